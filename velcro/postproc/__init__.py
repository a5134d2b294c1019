"""Post-processing passes over the finished output tree."""

from .virtual_paths import NAMESPACES, VirtualPathResolver, resolve_virtual_paths

__all__ = ["NAMESPACES", "VirtualPathResolver", "resolve_virtual_paths"]
