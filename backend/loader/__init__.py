"""
Loader module - process-wide rendering library handle.
Use load_library() from async code; get_library() is the synchronous peek.
"""

from .library import LibraryHandle, LibraryLoader, evaluate_source

library_loader = LibraryLoader()


def load_library(context=None):
    """Future resolving to the shared LibraryHandle."""
    return library_loader.load(context)


def get_library():
    return library_loader.peek()


def reset_library() -> None:
    library_loader.reset()


__all__ = [
    "LibraryHandle",
    "LibraryLoader",
    "evaluate_source",
    "get_library",
    "library_loader",
    "load_library",
    "reset_library",
]
