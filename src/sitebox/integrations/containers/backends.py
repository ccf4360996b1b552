"""
Sitebox Container Backends Module

This module defines how sitebox talks to the container runtime. Every backend
exposes the same small surface used by the orchestrator:

-   **Execution**: `run` for an assembled `ContainerRunSpec` and `build_image`
    for the site image. Both always go through the runtime CLI, so the argument
    list built by the Argument Assembler is exactly what gets executed.
-   **Lifecycle**: `container_exists`, `remove_container` and `logs`, used by
    `clean` and by the readiness wait of the preview workflow.

`DockerCliBackend` answers the lifecycle queries by shelling out
(``docker ps`` / ``docker rm`` / ``docker logs``). `DockerSdkBackend` answers
them through the Docker Engine API with the ``docker`` SDK, which avoids
parsing ``ps`` output.
"""

import abc
import logging
from typing import Any, List, Optional

import docker
from docker.errors import DockerException, NotFound

from sitebox.core.shell import CommandRunner
from sitebox.errors import ExternalToolError
from sitebox.integrations.containers.models import ContainerRunSpec

logger = logging.getLogger(__name__)


class ContainerBackend(abc.ABC):
    @abc.abstractmethod
    def run(self, spec: ContainerRunSpec) -> None:
        """
        Run a container described by ``spec``.

        Foreground runs block until the container exits; detached runs return
        once the runtime has started the container.

        Raises
        ------
        ExternalToolError
            If the runtime reports a failure.
        """

    @abc.abstractmethod
    def build_image(self, tag: str, dockerfile: str, context: str = ".") -> None:
        """Build ``tag`` from ``dockerfile`` using ``context`` as build context."""

    @abc.abstractmethod
    def container_exists(self, name: str) -> bool:
        """Return True if any container (running or stopped) matches ``name``."""

    @abc.abstractmethod
    def remove_container(self, name: str) -> None:
        """Force-remove the container ``name``."""

    @abc.abstractmethod
    def logs(self, name: str) -> str:
        """
        Return the full log output of container ``name``.

        Raises
        ------
        ExternalToolError
            If the logs cannot be read (e.g. the container is gone).
        """

    def remove_if_exists(self, name: str) -> bool:
        """
        Remove ``name`` if such a container exists.

        Returns True if a container was removed. Calling this for a name with no
        matching container is a no-op.
        """
        if not self.container_exists(name):
            logger.debug(f"No container named {name} to remove")
            return False
        self.remove_container(name)
        return True


class DockerCliBackend(ContainerBackend):
    """
    A `ContainerBackend` that drives the runtime's command line client.

    Attributes
    ----------
    runner : CommandRunner
        Executes the runtime commands.
    executable : str
        The runtime executable, ``docker`` by default. Any CLI-compatible
        runtime (e.g. ``podman``) works.
    """

    def __init__(
        self, runner: Optional[CommandRunner] = None, executable: str = "docker"
    ) -> None:
        self.runner = runner or CommandRunner()
        self.executable = executable

    def command(self, *args: str) -> List[str]:
        return [self.executable, *args]

    def run(self, spec: ContainerRunSpec) -> None:
        self.runner.run(self.command(*spec.to_args()))

    def build_image(self, tag: str, dockerfile: str, context: str = ".") -> None:
        self.runner.run(self.command("build", "-t", tag, "-f", dockerfile, context))

    def container_exists(self, name: str) -> bool:
        # The name filter matches substrings, so compare the listed names exactly.
        try:
            output = self.runner.output(
                self.command(
                    "ps", "--all", "--filter", f"name=^/?{name}$", "--format", "{{.Names}}"
                )
            )
        except ExternalToolError as e:
            logger.debug(f"Could not list containers matching {name}: {e}")
            return False
        return any(line.strip() == name for line in output.splitlines())

    def remove_container(self, name: str) -> None:
        self.runner.run(self.command("rm", "-f", name))

    def logs(self, name: str) -> str:
        return self.runner.output(self.command("logs", name), merge_stderr=True)


class DockerSdkBackend(DockerCliBackend):
    """
    A `DockerCliBackend` whose lifecycle queries use the Docker Engine API.

    Container runs and image builds still use the CLI; only `container_exists`,
    `remove_container` and `logs` go through the SDK client.

    Attributes
    ----------
    client : docker.client.DockerClient
        The Docker client used to query and remove containers.
    """

    def __init__(
        self,
        client: Optional[Any] = None,
        runner: Optional[CommandRunner] = None,
        executable: str = "docker",
    ) -> None:
        """
        Parameters
        ----------
        client : Optional[Any], optional
            An existing Docker client instance. If None, a client is created
            with `docker.from_env()`.
        runner : Optional[CommandRunner], optional
            Runner for the CLI commands (runs and builds).
        executable : str, default "docker"
            The runtime executable used for CLI commands.

        Raises
        ------
        ExternalToolError
            If no client was given and the Docker daemon cannot be reached.
        """
        super().__init__(runner=runner, executable=executable)
        if client is not None:
            self.client = client
        else:
            try:
                self.client = docker.from_env()
            except DockerException as e:
                raise ExternalToolError("could not connect to the Docker daemon") from e

    def container_exists(self, name: str) -> bool:
        try:
            containers = self.client.containers.list(all=True, filters={"name": name})
        except DockerException as e:
            logger.debug(f"Could not list containers matching {name}: {e}")
            return False
        return any(container.name == name for container in containers)

    def remove_container(self, name: str) -> None:
        logger.info(f"🐳 Removing container {name}")
        try:
            self.client.containers.get(name).remove(force=True)
        except NotFound:
            logger.debug(f"Container {name} already removed")
        except DockerException as e:
            raise ExternalToolError(f"could not remove container {name}") from e

    def logs(self, name: str) -> str:
        try:
            raw = self.client.containers.get(name).logs(stdout=True, stderr=True)
        except DockerException as e:
            raise ExternalToolError(f"could not read logs for container {name}") from e
        return raw.decode("utf-8", errors="replace")


def create_backend(
    kind: str, runner: Optional[CommandRunner] = None, executable: str = "docker"
) -> ContainerBackend:
    """Return the backend named by ``kind`` (``"cli"`` or ``"sdk"``)."""
    if kind == "sdk":
        return DockerSdkBackend(runner=runner, executable=executable)
    if kind == "cli":
        return DockerCliBackend(runner=runner, executable=executable)
    raise ValueError(f"Unknown container backend: {kind}")
