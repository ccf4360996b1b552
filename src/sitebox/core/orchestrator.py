"""
Sitebox Orchestrator Module

Sequences the steps behind each sitebox command:

-   **build**: compile the site once into the output directory.
-   **preview**: serve the site from a detached container that watches for
    changes, wait for it to come up, and open it in a browser.
-   **shell**: open an interactive session in the site image.
-   **clean**: remove previous output and the preview container.
-   **ensure_tools**: check that the external tools are installed.

Every step is fail-fast. Errors are re-raised with a one-line description of
the step that failed, chained to the underlying cause.
"""

import logging
import shutil
from pathlib import Path
from typing import Callable, Dict, List, Optional

from sitebox.core.content import CONTAINER_SRC, content_mounts, resolve_content
from sitebox.core.modfile import write_local_manifest
from sitebox.core.settings import SiteboxSettings
from sitebox.core.shell import CommandRunner
from sitebox.errors import ExternalToolError, SiteboxError, SiteboxIOError
from sitebox.integrations.containers.backends import ContainerBackend, create_backend
from sitebox.integrations.containers.lifecycle import ReadinessWaiter
from sitebox.integrations.containers.models import ContainerRunSpec, MountSpec
from sitebox.integrations.git import ensure_submodule
from sitebox.utils.browser import open_url

logger = logging.getLogger(__name__)

GENERATOR_PORT = 1313
GENERATOR_FLAGS = ["--debug", "--verbose"]
SERVER_FLAGS = [
    "--buildDrafts",
    "--buildFuture",
    "--noHTTPCache",
    "--watch",
    "--bind=0.0.0.0",
]


class SiteOrchestrator:
    """
    Runs the site workflows against a container backend.

    Parameters
    ----------
    settings : SiteboxSettings
        Configuration for this invocation.
    backend : Optional[ContainerBackend], optional
        Container backend. If None, one is created from ``settings.backend``.
    runner : Optional[CommandRunner], optional
        Runner for non-container commands (git). If None, a runner working in
        ``settings.workdir`` is created.
    browser : Callable[[str], None], default open_url
        Opens the preview URL.
    waiter : Optional[ReadinessWaiter], optional
        Readiness waiter for the preview container. If None, one is created
        from the settings' timeout and poll interval.
    """

    def __init__(
        self,
        settings: SiteboxSettings,
        backend: Optional[ContainerBackend] = None,
        runner: Optional[CommandRunner] = None,
        browser: Callable[[str], None] = open_url,
        waiter: Optional[ReadinessWaiter] = None,
    ) -> None:
        self.settings = settings
        self.workdir = Path(settings.workdir).resolve()
        self.runner = runner or CommandRunner(cwd=self.workdir)
        self.backend = backend or create_backend(
            settings.backend, runner=self.runner, executable=settings.runtime
        )
        self.browser = browser
        self.waiter = waiter or ReadinessWaiter(
            self.backend.logs,
            timeout=settings.ready_timeout_seconds,
            interval=settings.poll_interval_seconds,
        )

    @property
    def source_mount(self) -> MountSpec:
        return MountSpec(host_path=str(self.workdir), container_path=CONTAINER_SRC)

    def clean(self) -> None:
        """Remove the generated site and the preview container."""
        output_dir = self.workdir / self.settings.output_dir
        try:
            shutil.rmtree(output_dir)
            logger.info(f"🧹 Removed {self.settings.output_dir}")
        except FileNotFoundError:
            pass
        except OSError as e:
            raise SiteboxIOError(f"could not remove {self.settings.output_dir}") from e

        try:
            self.backend.remove_if_exists(self.settings.container_name)
        except SiteboxError as e:
            raise ExternalToolError(
                f"could not remove container {self.settings.container_name}"
            ) from e

    def ensure_theme(self) -> None:
        ensure_submodule(self.runner, self.workdir / self.settings.theme_dir)

    def build_image(self) -> None:
        """Build the site image, checking out the theme first if needed."""
        self.ensure_theme()
        try:
            self.backend.build_image(self.settings.image, self.settings.dockerfile, ".")
        except SiteboxError as e:
            raise ExternalToolError("could not build website image") from e

    def prepare_content(self) -> List[MountSpec]:
        """
        Resolve the content dependencies and return the extra mounts they need.

        The list holds one mount per local content checkout followed by the
        rewritten manifest, or is empty when all content comes from the
        remote sources.
        """
        dependencies = resolve_content(
            self.settings.content_dependencies,
            self.workdir,
            self.settings.content_overrides,
        )
        mounts = content_mounts(dependencies)
        manifest_mount = write_local_manifest(
            self.backend,
            self.settings.image,
            self.workdir,
            dependencies,
            manifest=self.settings.manifest,
            local_manifest=self.settings.local_manifest,
        )
        if manifest_mount is not None:
            mounts.append(manifest_mount)
        return mounts

    def build_spec(self, mounts: List[MountSpec]) -> ContainerRunSpec:
        return ContainerRunSpec(
            image=self.settings.image,
            remove=True,
            mounts=[self.source_mount, *mounts],
            command=list(GENERATOR_FLAGS),
        )

    def preview_spec(self, mounts: List[MountSpec]) -> ContainerRunSpec:
        return ContainerRunSpec(
            image=self.settings.image,
            detach=True,
            mounts=[self.source_mount, *mounts],
            publish=[f"{self.settings.port}:{GENERATOR_PORT}"],
            name=self.settings.container_name,
            command=["server", *GENERATOR_FLAGS, *SERVER_FLAGS],
        )

    def shell_spec(self, mounts: List[MountSpec]) -> ContainerRunSpec:
        return ContainerRunSpec(
            image=self.settings.image,
            remove=True,
            interactive=True,
            mounts=[self.source_mount, *mounts],
            command=["shell"],
        )

    def build(self) -> None:
        """Compile the website into the output directory."""
        self.clean()
        self.build_image()
        mounts = self.prepare_content()
        try:
            self.backend.run(self.build_spec(mounts))
        except SiteboxError as e:
            raise ExternalToolError("could not build the website") from e

    def preview(self) -> str:
        """
        Serve the website locally, watching for changes.

        Returns
        -------
        str
            The URL the preview is served at.
        """
        self.clean()
        self.build_image()
        mounts = self.prepare_content()
        try:
            self.backend.run(self.preview_spec(mounts))
        except SiteboxError as e:
            raise ExternalToolError("could not run website container") from e

        try:
            self.waiter.wait(self.settings.container_name, self.settings.ready_marker)
        except SiteboxError as e:
            raise type(e)("error waiting for the website to become ready") from e

        url = self.settings.preview_url
        try:
            self.browser(url)
        except SiteboxError as e:
            raise ExternalToolError("could not open the website in a browser") from e
        return url

    def shell(self) -> None:
        """Start an interactive session in the site image."""
        self.build_image()
        mounts = self.prepare_content()
        try:
            self.backend.run(self.shell_spec(mounts))
        except SiteboxError as e:
            raise ExternalToolError("could not start the site generator in a container") from e

    def ensure_tools(self) -> Dict[str, str]:
        """
        Check that the external tools sitebox shells out to are installed.

        Returns
        -------
        Dict[str, str]
            Tool name -> resolved executable path.

        Raises
        ------
        ExternalToolError
            If any tool is not found on ``PATH``.
        """
        found: Dict[str, str] = {}
        missing: List[str] = []
        for tool in (self.settings.runtime, "git"):
            path = shutil.which(tool)
            if path:
                found[tool] = path
            else:
                missing.append(tool)
        if missing:
            raise ExternalToolError(
                f"required tools not found on PATH: {', '.join(missing)}"
            )
        return found
