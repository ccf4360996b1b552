"""
Small helpers shared by the orchestrator: argument assembly and browser launch.
"""

from sitebox.utils.args import collapse_args
from sitebox.utils.browser import open_url

__all__ = ["collapse_args", "open_url"]
