"""
sitebox: build and preview a static site with a containerized site generator.

This package provides the public API used by the ``sitebox`` command line
tool, so the same workflows can be driven from Python.
"""

# Configuration
from sitebox.core.settings import SiteboxSettings

# Core
from sitebox.core.content import ContentDependency, content_mounts, resolve_content
from sitebox.core.orchestrator import SiteOrchestrator

# Containers
from sitebox.integrations.containers.backends import (
    ContainerBackend,
    DockerCliBackend,
    DockerSdkBackend,
)
from sitebox.integrations.containers.lifecycle import ReadinessWaiter
from sitebox.integrations.containers.models import ContainerRunSpec, MountSpec

# Errors
from sitebox.errors import (
    ContainerTimeoutError,
    ExternalToolError,
    FormatError,
    SiteboxError,
    SiteboxIOError,
)

__all__ = [
    "SiteboxSettings",
    "ContentDependency",
    "content_mounts",
    "resolve_content",
    "SiteOrchestrator",
    "ContainerBackend",
    "DockerCliBackend",
    "DockerSdkBackend",
    "ReadinessWaiter",
    "ContainerRunSpec",
    "MountSpec",
    "ContainerTimeoutError",
    "ExternalToolError",
    "FormatError",
    "SiteboxError",
    "SiteboxIOError",
]
