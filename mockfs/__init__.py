"""
mockfs - An in-memory hierarchical filesystem simulator

This package provides a tree of files and directories addressable by
slash-separated paths, with POSIX-like attributes and no real I/O, along
with a storage-operations facade built on top of it.
"""

__version__ = "0.1.0"

from .mockfs import (
    MockFilesystem,
    StoreConfig,
    Node,
    FileNode,
    DirNode,
    NodeAttributes,
    NodeKind,
    Mode,
    FailureReason,
    normalize_path,
    parse_path,
    split_path,
)

from .filesystem_api import (
    FilesystemAPI,
    APIConfig,
)

__all__ = [
    # Tree store
    "MockFilesystem",
    "StoreConfig",
    "Node",
    "FileNode",
    "DirNode",
    "NodeAttributes",
    "NodeKind",
    "Mode",
    "FailureReason",

    # Path helpers
    "normalize_path",
    "parse_path",
    "split_path",

    # Storage-operations facade
    "FilesystemAPI",
    "APIConfig",

    # Version info
    "__version__",
]
