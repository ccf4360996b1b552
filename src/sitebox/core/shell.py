"""
Blocking execution of external commands.

All external tools (container runtime, git) are reached through
`CommandRunner`, which turns a non-zero exit status or a missing executable
into an `ExternalToolError`. Output of `run` goes straight to the terminal;
`output` captures it for callers that inspect it (``ps``, ``logs``).
"""

import logging
import shlex
import subprocess
from pathlib import Path
from typing import Optional, Sequence, Union

from sitebox.errors import ExternalToolError

logger = logging.getLogger(__name__)


class CommandRunner:
    """
    Runs external commands from a fixed working directory.

    Parameters
    ----------
    cwd : Optional[Union[str, Path]], optional
        Directory the commands run in. If None, the current directory is used.
    """

    def __init__(self, cwd: Optional[Union[str, Path]] = None) -> None:
        self.cwd = str(cwd) if cwd is not None else None

    def run(self, cmd: Sequence[str]) -> None:
        """
        Run ``cmd`` attached to the current terminal.

        Stdin, stdout and stderr are inherited, so interactive sessions
        (``docker run -it``) work through this method too.

        Raises
        ------
        ExternalToolError
            If the command cannot be started or exits non-zero.
        """
        cmd_list = list(cmd)
        logger.info(f"🐳 Running: {shlex.join(cmd_list)}")
        try:
            res = subprocess.run(cmd_list, cwd=self.cwd, check=False)
        except FileNotFoundError as e:
            raise ExternalToolError(
                f"{cmd_list[0]}: executable not found", command=cmd_list
            ) from e
        if res.returncode != 0:
            raise ExternalToolError(
                f"running '{shlex.join(cmd_list)}' failed with exit code {res.returncode}",
                command=cmd_list,
                returncode=res.returncode,
            )

    def output(self, cmd: Sequence[str], merge_stderr: bool = False) -> str:
        """
        Run ``cmd`` and return its captured stdout.

        With ``merge_stderr`` the command's stderr is interleaved into the
        returned text; container logs are split across both streams.
        """
        cmd_list = list(cmd)
        logger.debug(f"Capturing: {shlex.join(cmd_list)}")
        try:
            res = subprocess.run(
                cmd_list,
                cwd=self.cwd,
                check=False,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT if merge_stderr else subprocess.PIPE,
                text=True,
            )
        except FileNotFoundError as e:
            raise ExternalToolError(
                f"{cmd_list[0]}: executable not found", command=cmd_list
            ) from e
        if res.returncode != 0:
            detail = (res.stderr or res.stdout or "").strip()
            message = f"running '{shlex.join(cmd_list)}' failed with exit code {res.returncode}"
            if detail:
                message = f"{message}: {detail.splitlines()[-1]}"
            raise ExternalToolError(
                message, command=cmd_list, returncode=res.returncode
            )
        return res.stdout or ""
