from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from sitebox.errors import FormatError

DEFAULT_CONTENT_REPO = "github.com/carolynvs/example-site-content"
DEFAULT_CONTAINER_NAME = "example-site"
DEFAULT_PORT = 1313

CONTENT_OVERRIDE_ENV_VAR = "CONTENT_REPOS"


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name, "")
    if raw.strip() == "":
        return default
    return raw.strip()


def _env_float(name: str, default: float) -> float:
    """Read a positive, finite number of seconds; anything else yields ``default``."""
    raw = os.getenv(name, "")
    if raw == "":
        return default
    try:
        value = float(raw.strip())
    except ValueError:
        return default
    if not math.isfinite(value) or value <= 0:
        return default
    return value


def _env_list(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    raw = os.getenv(name, "")
    items = tuple(item.strip() for item in raw.split(",") if item.strip())
    return items or default


def parse_port(raw: str) -> int:
    """Parse the preview port, rejecting anything that is not a TCP port number."""
    value = raw.strip()
    if not value:
        return DEFAULT_PORT
    try:
        port = int(value)
    except ValueError:
        raise FormatError(f"PORT must be an integer, got {raw!r}") from None
    if not 0 < port < 65536:
        raise FormatError(f"PORT must be between 1 and 65535, got {port}")
    return port


def parse_content_overrides(raw: str) -> Dict[str, str]:
    """
    Parse the content override variable into an identifier -> path mapping.

    The value is a comma-separated list of ``identifier=path`` pairs, e.g.
    ``github.com/org/content=../content,github.com/org/docs=/src/docs``.
    Blank entries are skipped.

    Raises
    ------
    FormatError
        If an entry does not split into exactly two non-empty parts on ``=``.
    """
    overrides: Dict[str, str] = {}
    if not raw.strip():
        return overrides

    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        parts = entry.split("=")
        if len(parts) != 2:
            raise FormatError(
                f"invalid {CONTENT_OVERRIDE_ENV_VAR} entry {entry!r}: "
                "expected identifier=path"
            )
        identifier, path = (part.strip() for part in parts)
        if not identifier or not path:
            raise FormatError(
                f"invalid {CONTENT_OVERRIDE_ENV_VAR} entry {entry!r}: "
                "identifier and path must both be set"
            )
        overrides[identifier] = path
    return overrides


@dataclass(frozen=True)
class SiteboxSettings:
    """
    Configuration for one sitebox invocation.

    Built once at startup (usually via `from_env`) and passed to the
    orchestrator; nothing reads the environment after that.
    """

    workdir: Path = field(default_factory=Path.cwd)
    content_dependencies: Tuple[str, ...] = (DEFAULT_CONTENT_REPO,)
    content_overrides: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({}), hash=False
    )
    port: int = DEFAULT_PORT
    container_name: str = DEFAULT_CONTAINER_NAME
    image: str = DEFAULT_CONTAINER_NAME
    dockerfile: str = "dev.Dockerfile"
    theme_dir: str = "themes/docsy"
    output_dir: str = "website/public"
    manifest: str = "go.mod"
    local_manifest: str = "go.local.mod"
    ready_marker: str = "Web Server is available"
    ready_timeout_seconds: float = 60.0
    poll_interval_seconds: float = 1.0
    runtime: str = "docker"
    backend: str = "cli"

    def __post_init__(self) -> None:
        # Read-only view so the overrides cannot change after validation.
        object.__setattr__(
            self, "content_overrides", MappingProxyType(dict(self.content_overrides))
        )

    @property
    def preview_url(self) -> str:
        return f"http://localhost:{self.port}"

    @classmethod
    def from_env(cls, workdir: Optional[Path] = None) -> "SiteboxSettings":
        """
        Read settings from the environment.

        Raises
        ------
        FormatError
            If ``PORT`` or the content override variable is malformed.
        """
        container_name = _env_str("SITEBOX_CONTAINER_NAME", DEFAULT_CONTAINER_NAME)
        backend = _env_str("SITEBOX_BACKEND", "cli").lower()
        if backend not in {"cli", "sdk"}:
            raise FormatError(f"SITEBOX_BACKEND must be 'cli' or 'sdk', got {backend!r}")
        return cls(
            workdir=Path(workdir) if workdir is not None else Path.cwd(),
            content_dependencies=_env_list(
                "SITEBOX_CONTENT_DEPENDENCIES", (DEFAULT_CONTENT_REPO,)
            ),
            content_overrides=parse_content_overrides(
                os.getenv(CONTENT_OVERRIDE_ENV_VAR, "")
            ),
            port=parse_port(os.getenv("PORT", "")),
            container_name=container_name,
            image=_env_str("SITEBOX_IMAGE", container_name),
            dockerfile=_env_str("SITEBOX_DOCKERFILE", "dev.Dockerfile"),
            theme_dir=_env_str("SITEBOX_THEME_DIR", "themes/docsy"),
            output_dir=_env_str("SITEBOX_OUTPUT_DIR", "website/public"),
            manifest=_env_str("SITEBOX_MANIFEST", "go.mod"),
            local_manifest=_env_str("SITEBOX_LOCAL_MANIFEST", "go.local.mod"),
            ready_marker=_env_str("SITEBOX_READY_MARKER", "Web Server is available"),
            ready_timeout_seconds=_env_float("SITEBOX_READY_TIMEOUT_SECONDS", 60.0),
            poll_interval_seconds=_env_float("SITEBOX_POLL_INTERVAL_SECONDS", 1.0),
            runtime=_env_str("SITEBOX_RUNTIME", "docker"),
            backend=backend,
        )
