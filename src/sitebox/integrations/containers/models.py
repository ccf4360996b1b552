from typing import List, Optional

from pydantic import BaseModel

from sitebox.utils.args import collapse_args


class MountSpec(BaseModel):
    """
    A host path bound into the container.
    """

    host_path: str
    container_path: str

    def to_arg(self) -> str:
        """Render as a single runtime volume flag, e.g. ``-v=/host:/src/x``."""
        return f"-v={self.host_path}:{self.container_path}"


class ContainerRunSpec(BaseModel):
    """
    Everything that goes into one ``docker run`` invocation.

    `to_args` renders the spec in a fixed order: run flags, entrypoint,
    volume mounts, published ports, container name, image, then the command
    passed to the image.
    """

    image: str
    command: List[str] = []
    mounts: List[MountSpec] = []
    publish: List[str] = []
    name: Optional[str] = None
    entrypoint: Optional[str] = None
    detach: bool = False
    remove: bool = False
    interactive: bool = False

    def to_args(self) -> List[str]:
        """Returns the argument list that follows the runtime executable."""
        return collapse_args(
            "run",
            "--rm" if self.remove else "",
            "-it" if self.interactive else "",
            "-d" if self.detach else "",
            ["--entrypoint", self.entrypoint] if self.entrypoint else None,
            [mount.to_arg() for mount in self.mounts],
            [arg for port in self.publish for arg in ("-p", port)],
            ["--name", self.name] if self.name else None,
            self.image,
            self.command,
        )
