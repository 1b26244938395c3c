"""Filesystem and environment providers consumed by the navigation core."""

from __future__ import annotations

from .base import EnvironmentProvider, FileSystemProvider, TerminalSize
from .local import LocalEnvironmentProvider, LocalFileSystemProvider
from .memory import InMemoryFileSystemProvider, StaticEnvironmentProvider

__all__ = [
    "EnvironmentProvider",
    "FileSystemProvider",
    "TerminalSize",
    "LocalEnvironmentProvider",
    "LocalFileSystemProvider",
    "InMemoryFileSystemProvider",
    "StaticEnvironmentProvider",
]
