"""
Pointing the site's module manifest at local content checkouts.

The site pulls its content repositories in as Go modules. When a local
checkout is mounted into the container, the manifest has to say so: the
manifest is copied to a working copy and rewritten with one ``-replace``
directive per local dependency, using the module tool shipped in the site
image. The working copy is then mounted over the original manifest inside the
container, so the file in the repository is never modified.
"""

import logging
import shutil
from pathlib import Path
from typing import List, Optional, Sequence, Union

from sitebox.core.content import CONTAINER_SRC, ContentDependency
from sitebox.errors import ExternalToolError, SiteboxIOError
from sitebox.integrations.containers.backends import ContainerBackend
from sitebox.integrations.containers.models import ContainerRunSpec, MountSpec

logger = logging.getLogger(__name__)


def copy_file(src: Union[str, Path], dest: Union[str, Path]) -> None:
    """
    Copy ``src`` to ``dest``, replacing ``dest`` if it exists.

    Raises
    ------
    SiteboxIOError
        If ``src`` cannot be read or ``dest`` cannot be written.
    """
    try:
        shutil.copyfile(src, dest)
    except OSError as e:
        raise SiteboxIOError(f"could not copy {src} to {dest}") from e


def replace_directives(dependencies: Sequence[ContentDependency]) -> List[str]:
    """``mod edit`` arguments mapping each local dependency to its mount point."""
    args: List[str] = []
    for dependency in dependencies:
        if dependency.is_local:
            args.extend(["-replace", f"{dependency.identifier}={dependency.container_path}"])
    return args


def write_local_manifest(
    backend: ContainerBackend,
    image: str,
    workdir: Path,
    dependencies: Sequence[ContentDependency],
    manifest: str = "go.mod",
    local_manifest: str = "go.local.mod",
) -> Optional[MountSpec]:
    """
    Create the rewritten working copy of the manifest.

    Nothing happens when no dependency resolved to a local checkout.

    Parameters
    ----------
    backend : ContainerBackend
        Runs the module tool inside ``image``.
    image : str
        The site image, which provides the ``go`` tool.
    workdir : Path
        The site checkout; mounted at ``/src``.
    dependencies : Sequence[ContentDependency]
        The resolved content dependencies.
    manifest : str, default "go.mod"
        The manifest in ``workdir`` to copy.
    local_manifest : str, default "go.local.mod"
        Name of the working copy written to ``workdir``.

    Returns
    -------
    Optional[MountSpec]
        Mount of the working copy over ``/src/<manifest>``, or None when no
        dependency is local.

    Raises
    ------
    SiteboxIOError
        If the manifest cannot be copied.
    ExternalToolError
        If the module tool fails to rewrite the working copy.
    """
    local = [dependency for dependency in dependencies if dependency.is_local]
    if not local:
        return None

    workdir = Path(workdir).resolve()
    local_manifest_path = workdir / local_manifest
    copy_file(workdir / manifest, local_manifest_path)
    manifest_mount = MountSpec(
        host_path=str(local_manifest_path),
        container_path=f"{CONTAINER_SRC}/{manifest}",
    )

    spec = ContainerRunSpec(
        image=image,
        remove=True,
        entrypoint="go",
        mounts=[
            MountSpec(host_path=str(workdir), container_path=CONTAINER_SRC),
            manifest_mount,
        ],
        command=["mod", "edit", *replace_directives(local)],
    )
    names = ", ".join(dependency.identifier for dependency in local)
    logger.info(f"📝 Writing {local_manifest} with local replacements for {names}")
    try:
        backend.run(spec)
    except ExternalToolError as e:
        raise ExternalToolError(
            f"could not modify {manifest} to use your local copy of {names}",
            command=e.command,
            returncode=e.returncode,
        ) from e
    return manifest_mount
