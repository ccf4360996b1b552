"""
Error types raised by sitebox.

Every failure that should end a command with a readable message derives from
`SiteboxError`. Call boundaries re-raise with a one-line context message and
chain the original exception (``raise ... from exc``), so the CLI can print the
whole chain with `format_error_chain`.
"""

from typing import List, Optional, Sequence


class SiteboxError(Exception):
    """Base class for all sitebox errors."""


class FormatError(SiteboxError, ValueError):
    """A configuration value (override variable, port) is malformed."""


class SiteboxIOError(SiteboxError, OSError):
    """A filesystem operation or a container log read failed."""


class ExternalToolError(SiteboxError):
    """
    An external command exited non-zero or could not be started.

    Attributes
    ----------
    command : List[str]
        The argument list that was executed, if known.
    returncode : Optional[int]
        The exit status, or None when the executable could not be started.
    """

    def __init__(
        self,
        message: str,
        command: Optional[Sequence[str]] = None,
        returncode: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.command: List[str] = list(command or [])
        self.returncode = returncode


class ContainerTimeoutError(SiteboxError, TimeoutError):
    """A container did not report readiness before the deadline."""


def format_error_chain(exc: BaseException) -> str:
    """Render an exception and its causes as ``outer: inner: root``."""
    parts: List[str] = []
    current: Optional[BaseException] = exc
    while current is not None:
        message = str(current) or current.__class__.__name__
        if message not in parts:
            parts.append(message)
        current = current.__cause__
    return ": ".join(parts)
