import logging
from pathlib import Path

from sitebox.core.shell import CommandRunner
from sitebox.errors import ExternalToolError, SiteboxIOError

logger = logging.getLogger(__name__)


def update_submodules(runner: CommandRunner) -> None:
    """Check out every submodule of the repository the runner works in."""
    runner.run(["git", "submodule", "update", "--init", "--recursive", "--force"])


def ensure_submodule(runner: CommandRunner, path: Path) -> bool:
    """
    Make sure the submodule checked out at ``path`` is present.

    Returns True if the submodules had to be initialized.

    Raises
    ------
    SiteboxIOError
        If ``path`` cannot be inspected.
    ExternalToolError
        If initializing the submodules fails.
    """
    try:
        path.stat()
        return False
    except FileNotFoundError:
        pass
    except OSError as e:
        raise SiteboxIOError(f"could not check for {path}") from e

    logger.info(f"📦 {path} is missing, initializing git submodules")
    try:
        update_submodules(runner)
    except ExternalToolError as e:
        raise ExternalToolError(
            f"could not clone the submodule at {path}",
            command=e.command,
            returncode=e.returncode,
        ) from e
    return True
