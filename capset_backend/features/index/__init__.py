"""Dataset filesystem traversal."""
from .fs_walker import FileSystemWalker

__all__ = ["FileSystemWalker"]
