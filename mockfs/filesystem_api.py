#!/usr/bin/env python3
"""
Storage-operations facade for mockfs.

This module maps the calls a host application makes against its storage
layer (get_contents, put_contents, chmod, copy, rmdir, ...) onto the
primitive operations of a MockFilesystem.

Core Design Principles:
- Works only through the store's public operations
- Returns False/None on failure, exactly like the store
- Owns the policies the store leaves to its callers (overwrite, default modes)
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from .mockfs import Contents, Mode, MockFilesystem, NodeAttributes, NodeKind

logger = logging.getLogger(__name__)


@dataclass
class APIConfig:
    """Default modes applied by the facade."""
    chmod_file: int = Mode.FILE_DEFAULT
    chmod_dir: int = Mode.DIR_DEFAULT


class FilesystemAPI:
    """
    Host-style filesystem interface backed by an in-memory store.

    The store is passed in explicitly; several facades may share one store.
    """

    def __init__(self, store: MockFilesystem, config: Optional[APIConfig] = None):
        """Initialize with the store to operate on."""
        self.store = store
        self.config = config or APIConfig()

    # Contents

    def get_contents(self, path: str) -> Optional[Contents]:
        """Read a file's contents, None if it is missing or a directory."""
        return self.store.get_attribute(path, 'contents', NodeKind.FILE)

    def get_contents_array(self, path: str) -> Optional[List[Contents]]:
        """Read a file's contents as a list of lines."""
        contents = self.get_contents(path)
        if contents is None:
            return None

        separator = b'\n' if isinstance(contents, bytes) else '\n'
        return contents.split(separator)

    def put_contents(self, path: str, contents: Contents, mode: Optional[int] = None) -> bool:
        """Write a file's contents, creating the file if needed.

        Usage:
            put_contents(path, contents[, mode])

        Options:
            mode                   Permission bits to set afterwards
                                   (defaults to the configured file mode)

        Returns:
            False when the path is a directory or cannot be created.
        """
        if self.exists(path):
            if not self.is_file(path):
                return False
        elif not self.store.create(path):
            return False

        self.store.set_attribute(path, 'contents', contents)
        self.store.set_attribute(path, 'mode', mode if mode is not None else self.config.chmod_file)
        return True

    # Working directory

    def cwd(self) -> str:
        """Current working directory."""
        return self.store.get_cwd()

    def chdir(self, path: str) -> bool:
        """Change the working directory."""
        return self.store.set_cwd(path)

    # Ownership and permissions

    def chgrp(self, path: str, group: str, recursive: bool = False) -> bool:
        """Change the group of a file or directory."""
        return self.store.set_attribute(path, 'group', group, recursive)

    def chown(self, path: str, owner: str, recursive: bool = False) -> bool:
        """Change the owner of a file or directory."""
        return self.store.set_attribute(path, 'owner', owner, recursive)

    def chmod(self, path: str, mode: Optional[int] = None, recursive: bool = False) -> bool:
        """Change the permission bits.

        Usage:
            chmod(path[, mode][, recursive])

        Options:
            mode                   New permission bits; when omitted the
                                   configured default for the node's kind
            recursive              Apply to everything below a directory

        Examples:
            chmod('/var', 0o750, recursive=True)
            chmod('/index.php')    # back to the default file mode
        """
        if mode is None:
            if self.is_file(path):
                mode = self.config.chmod_file
            elif self.is_dir(path):
                mode = self.config.chmod_dir
            else:
                return False

        return self.store.set_attribute(path, 'mode', mode, recursive)

    def owner(self, path: str) -> Optional[str]:
        return self.store.get_attribute(path, 'owner')

    def group(self, path: str) -> Optional[str]:
        return self.store.get_attribute(path, 'group')

    def getchmod(self, path: str) -> Optional[int]:
        return self.store.get_attribute(path, 'mode')

    # Copy, move, delete

    def copy(self, source: str, destination: str, overwrite: bool = False,
             mode: Optional[int] = None) -> bool:
        """Copy a file or directory, refusing to overwrite unless asked."""
        if not overwrite and self.exists(destination):
            logger.debug("Not overwriting %r with %r", destination, source)
            return False

        if not self.store.copy(source, destination):
            return False

        if mode:
            self.chmod(destination, mode)
        return True

    def move(self, source: str, destination: str, overwrite: bool = False) -> bool:
        """Move a file or directory, refusing to overwrite unless asked."""
        if not overwrite and self.exists(destination):
            logger.debug("Not overwriting %r with %r", destination, source)
            return False

        return self.store.move(source, destination)

    def delete(self, path: str, recursive: bool = False, file_type: Optional[str] = None) -> bool:
        """Delete a file or directory.

        Usage:
            delete(path[, recursive][, file_type])

        Options:
            recursive              Allow removing a non-empty directory
            file_type              'f' to only delete regular files

        Returns:
            True if something was deleted.
        """
        if file_type == 'f':
            if not self.is_file(path):
                return False
        elif not recursive:
            children = self.store.get_attribute(path, 'contents', NodeKind.DIRECTORY)
            if children:
                logger.debug("Directory %r is not empty", path)
                return False

        return self.store.delete(path)

    def rmdir(self, path: str, recursive: bool = False) -> bool:
        """Remove a directory."""
        return self.delete(path, recursive)

    # Inspection

    def exists(self, path: str) -> bool:
        return self.store.exists(path)

    def is_file(self, path: str) -> bool:
        return self.store.get_attribute(path, 'type') is NodeKind.FILE

    def is_dir(self, path: str) -> bool:
        return self.store.get_attribute(path, 'type') is NodeKind.DIRECTORY

    def is_readable(self, path: str) -> bool:
        """Check the owner read bit."""
        return self._has_mode_bit(path, Mode.IRUSR)

    def is_writable(self, path: str) -> bool:
        """Check the owner write bit."""
        return self._has_mode_bit(path, Mode.IWUSR)

    def _has_mode_bit(self, path: str, bit: int) -> bool:
        mode = self.store.get_attribute(path, 'mode')
        if mode is None:
            return False
        return bool(mode & bit)

    def atime(self, path: str) -> Optional[float]:
        return self.store.get_attribute(path, 'atime')

    def mtime(self, path: str) -> Optional[float]:
        return self.store.get_attribute(path, 'mtime')

    def size(self, path: str) -> Optional[int]:
        return self.store.get_attribute(path, 'size')

    # Creation

    def touch(self, path: str, mtime: Optional[float] = None,
              atime: Optional[float] = None) -> bool:
        """Update a file's timestamps, creating it if it does not exist."""
        if not self.exists(path) and not self.store.create(path):
            return False

        now = self.store.config.clock()
        self.store.set_attribute(path, 'mtime', mtime if mtime is not None else now)
        self.store.set_attribute(path, 'atime', atime if atime is not None else now)
        return True

    def mkdir(self, path: str, mode: Optional[int] = None, owner: Optional[str] = None,
              group: Optional[str] = None) -> bool:
        """Create a single directory."""
        attributes = NodeAttributes(
            kind=NodeKind.DIRECTORY,
            mode=mode if mode is not None else self.config.chmod_dir,
            owner=owner,
            group=group,
        )
        return self.store.create(path, attributes)

    def dirlist(self, path: str, include_hidden: bool = True, recursive: bool = False):
        """Directory listings are not supported."""
        raise NotImplementedError(f"{type(self).__name__}.dirlist is not implemented yet.")
