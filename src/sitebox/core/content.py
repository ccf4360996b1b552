from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import List, Mapping, Optional, Sequence

from sitebox.integrations.containers.models import MountSpec

logger = logging.getLogger(__name__)

CONTAINER_SRC = "/src"


@dataclass(frozen=True)
class ContentDependency:
    """
    An external repository that supplies site content.

    Attributes
    ----------
    identifier : str
        The module path of the repository, e.g.
        ``github.com/carolynvs/example-site-content``.
    local_path : Optional[Path]
        Absolute path of a local checkout to use instead of the remote one, or
        None when the remote source is used.
    """

    identifier: str
    local_path: Optional[Path] = None

    @property
    def dir_name(self) -> str:
        return PurePosixPath(self.identifier).name

    @property
    def container_path(self) -> str:
        return f"{CONTAINER_SRC}/{self.dir_name}"

    @property
    def is_local(self) -> bool:
        return self.local_path is not None

    def mount(self) -> Optional[MountSpec]:
        if self.local_path is None:
            return None
        return MountSpec(host_path=str(self.local_path), container_path=self.container_path)


def candidate_path(
    identifier: str, workdir: Path, overrides: Mapping[str, str]
) -> Path:
    """
    Where a local checkout of ``identifier`` is expected.

    An override wins; relative overrides are taken relative to ``workdir``.
    Without one, the checkout is expected next to the working directory, at
    ``../<last segment of identifier>``.
    """
    override = overrides.get(identifier)
    if override is not None:
        path = Path(override).expanduser()
    else:
        path = Path("..") / PurePosixPath(identifier).name
    if not path.is_absolute():
        path = workdir / path
    return path.resolve()


def resolve_content(
    identifiers: Sequence[str], workdir: Path, overrides: Mapping[str, str]
) -> List[ContentDependency]:
    """
    Decide, for each declared content dependency, whether a local copy is used.

    A dependency gets a ``local_path`` only when its candidate path exists on
    disk; otherwise it keeps using the remote source. Override keys that match
    no declared dependency are ignored with a warning.
    """
    workdir = Path(workdir).resolve()
    for unknown in sorted(set(overrides) - set(identifiers)):
        logger.warning(
            f"Ignoring local override for {unknown}: it is not a declared content dependency"
        )

    resolved: List[ContentDependency] = []
    for identifier in identifiers:
        path = candidate_path(identifier, workdir, overrides)
        logger.debug(f"Checking for a local copy of {identifier} at {path}")
        if path.exists():
            logger.info(f"📂 Using your local copy of {identifier} -> {path}")
            resolved.append(ContentDependency(identifier=identifier, local_path=path))
        else:
            resolved.append(ContentDependency(identifier=identifier))
    return resolved


def content_mounts(dependencies: Sequence[ContentDependency]) -> List[MountSpec]:
    """Mount specifications for the dependencies that resolved to a local copy."""
    mounts: List[MountSpec] = []
    for dependency in dependencies:
        mount = dependency.mount()
        if mount is not None:
            mounts.append(mount)
    return mounts
