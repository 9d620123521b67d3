#!/usr/bin/env python3
"""
mockfs - An in-memory hierarchical filesystem for deterministic tests.

Core philosophy:
- A single mutable tree rooted at '/', no real I/O
- Every expected failure is a return value, never an exception
- Directories exclusively own their children
"""

import copy
import logging
import re
import time
from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

Contents = Union[str, bytes]


class Mode(IntEnum):
    """Unix-style permission bits."""
    IRUSR = 0o400  # owner read
    IWUSR = 0o200  # owner write
    IXUSR = 0o100  # owner execute
    IRGRP = 0o040  # group read
    IWGRP = 0o020  # group write
    IXGRP = 0o010  # group execute
    IROTH = 0o004  # other read
    IWOTH = 0o002  # other write
    IXOTH = 0o001  # other execute

    # Common combinations
    FILE_DEFAULT = IRUSR | IWUSR | IRGRP | IROTH  # 0o644
    DIR_DEFAULT = IRUSR | IWUSR | IXUSR | IRGRP | IXGRP | IROTH | IXOTH  # 0o755


class NodeKind(str, Enum):
    """Kind of a tree entry."""
    FILE = 'file'
    DIRECTORY = 'dir'


class FailureReason(Enum):
    """Why an operation returned its failure value."""
    NOT_FOUND = 'not found'
    TYPE_MISMATCH = 'type mismatch'
    ALREADY_EXISTS = 'already exists'
    INVALID_PARENT = 'invalid parent'
    INVALID_ATTRIBUTE = 'invalid attribute'


READABLE_ATTRIBUTES = ('type', 'contents', 'mode', 'owner', 'group', 'atime', 'mtime', 'size')
WRITABLE_ATTRIBUTES = ('contents', 'mode', 'owner', 'group', 'atime', 'mtime')


def byte_length(contents: Contents) -> int:
    """Length of a payload in bytes (UTF-8 for text)."""
    if isinstance(contents, str):
        return len(contents.encode('utf-8'))
    return len(contents)


@dataclass
class Node:
    """Base class for all tree entries."""
    mode: int
    owner: str = ''
    group: str = ''
    atime: float = field(default_factory=time.time)
    mtime: float = field(default_factory=time.time)

    kind = None  # set by subclasses

    def is_file(self) -> bool:
        return self.kind is NodeKind.FILE

    def is_dir(self) -> bool:
        return self.kind is NodeKind.DIRECTORY


@dataclass
class FileNode(Node):
    """Regular file. Its size always follows its contents."""
    mode: int = Mode.FILE_DEFAULT
    contents: Contents = ''

    kind = NodeKind.FILE

    @property
    def size(self) -> int:
        return byte_length(self.contents)


@dataclass
class DirNode(Node):
    """Directory owning its children by name."""
    mode: int = Mode.DIR_DEFAULT
    children: Dict[str, Node] = field(default_factory=dict)

    kind = NodeKind.DIRECTORY

    def walk(self) -> Iterator[Node]:
        """Yield every descendant, depth-first, children before their parent."""
        for child in self.children.values():
            if isinstance(child, DirNode):
                yield from child.walk()
            yield child


@dataclass
class NodeAttributes:
    """
    Caller-supplied attributes for a new node.

    Unset fields fall back to the kind defaults of the store. Size is never
    accepted here; it is derived from contents.
    """
    kind: NodeKind = NodeKind.FILE
    contents: Optional[Contents] = None
    mode: Optional[int] = None
    owner: Optional[str] = None
    group: Optional[str] = None
    atime: Optional[float] = None
    mtime: Optional[float] = None

    def __post_init__(self):
        # Accept the plain string values ('file', 'dir') as well.
        self.kind = NodeKind(self.kind)


@dataclass
class StoreConfig:
    """Configuration for a tree store."""
    file_mode: int = Mode.FILE_DEFAULT
    dir_mode: int = Mode.DIR_DEFAULT
    clock: Callable[[], float] = time.time


# Path handling

_SLASH_RUN = re.compile(r'/+')


def normalize_path(path: str) -> str:
    """
    Canonicalize separators and strip any trailing slash.

    Backslashes count as slashes and runs of slashes collapse to one. The
    root normalizes to the empty string.
    """
    path = path.replace('\\', '/')
    path = _SLASH_RUN.sub('/', path)
    return path.rstrip('/')


def parse_path(path: str) -> Tuple[bool, List[str]]:
    """Split a path into (is_absolute, segments).

    '.' and '..' are kept as literal names; nothing resolves them.
    """
    normalized = normalize_path(path)
    absolute = normalized == '' or normalized.startswith('/')
    segments = [part for part in normalized.split('/') if part]
    return absolute, segments


def split_path(path: str) -> Tuple[Optional[str], str]:
    """Split a target path into its parent path and base name.

    The parent is None for a single relative segment, meaning the current
    working directory. The base name is empty for the root.
    """
    absolute, segments = parse_path(path)
    if not segments:
        return '/', ''
    parent = '/'.join(segments[:-1])
    if absolute:
        return '/' + parent, segments[-1]
    return (parent or None), segments[-1]


class MockFilesystem:
    """
    In-memory tree store.

    Holds a root directory and a current working directory. Every operation
    resolves a path to a node and then reads or mutates it. Failures are
    reported through the return value; the cause of the latest one is kept
    in ``last_failure``.
    """

    def __init__(self, config: Optional[StoreConfig] = None):
        self.config = config or StoreConfig()
        self.root: DirNode = self._build_node(NodeAttributes(kind=NodeKind.DIRECTORY))
        self.cwd = '/'
        self.last_failure: Optional[FailureReason] = None

    def _fail(self, reason: FailureReason, operation: str, path: str, result: Any = False) -> Any:
        """Record a failure and hand back the operation's failure value."""
        self.last_failure = reason
        logger.debug("%s %r failed: %s", operation, path, reason.value)
        return result

    # Resolution

    def _resolve(self, path: str) -> Optional[Node]:
        """Translate a path into the node it names, or None."""
        absolute, segments = parse_path(path)
        node = self.root if absolute else self._resolve(self.cwd)

        for segment in segments:
            if not isinstance(node, DirNode) or segment not in node.children:
                return None
            node = node.children[segment]

        return node

    def _resolve_parent(self, path: str) -> Tuple[Optional[Node], str]:
        """Resolve the directory a path would live in, plus its base name."""
        parent_path, name = split_path(path)
        return self._resolve(self.cwd if parent_path is None else parent_path), name

    def _check_cwd(self) -> None:
        """Fall back to '/' when the working directory vanished."""
        if not isinstance(self._resolve(self.cwd), DirNode):
            logger.warning("Working directory %s no longer exists, resetting to /", self.cwd)
            self.cwd = '/'

    def _build_node(self, attributes: NodeAttributes) -> Node:
        """Build a node: kind defaults, then caller overrides."""
        now = self.config.clock()
        common = {
            'owner': attributes.owner if attributes.owner is not None else '',
            'group': attributes.group if attributes.group is not None else '',
            'atime': attributes.atime if attributes.atime is not None else now,
            'mtime': attributes.mtime if attributes.mtime is not None else now,
        }

        if attributes.kind is NodeKind.DIRECTORY:
            mode = attributes.mode if attributes.mode is not None else self.config.dir_mode
            return DirNode(mode=mode, **common)

        mode = attributes.mode if attributes.mode is not None else self.config.file_mode
        contents = attributes.contents if attributes.contents is not None else ''
        return FileNode(mode=mode, contents=contents, **common)

    # Lookup

    def get_node(self, path: str) -> Optional[Node]:
        """Return the live node at a path, or None."""
        node = self._resolve(path)
        if node is None:
            return self._fail(FailureReason.NOT_FOUND, 'get_node', path, None)
        self.last_failure = None
        return node

    def exists(self, path: str) -> bool:
        """Check if a path resolves."""
        return self._resolve(path) is not None

    def get_attribute(self, path: str, name: str,
                      expected_kind: Optional[Union[NodeKind, str]] = None) -> Any:
        """
        Read one attribute of a node.

        Args:
            path: File or directory path
            name: Attribute name (type, contents, mode, owner, group,
                atime, mtime or size)
            expected_kind: When given, the node must be of this kind

        Returns:
            The attribute value, or None when the path does not resolve, the
            attribute is not set for this node, or the kind does not match.
            A directory's contents come back as a deep copy of its children,
            so the tree cannot be changed through the result.
        """
        node = self._resolve(path)
        if node is None:
            return self._fail(FailureReason.NOT_FOUND, 'get_attribute', path, None)

        if expected_kind is not None and NodeKind(expected_kind) is not node.kind:
            return self._fail(FailureReason.TYPE_MISMATCH, 'get_attribute', path, None)

        if name not in READABLE_ATTRIBUTES:
            return self._fail(FailureReason.INVALID_ATTRIBUTE, 'get_attribute', path, None)

        self.last_failure = None
        if name == 'type':
            return node.kind
        if name == 'contents':
            return copy.deepcopy(node.children) if isinstance(node, DirNode) else node.contents
        if name == 'size':
            if not isinstance(node, FileNode):
                return self._fail(FailureReason.TYPE_MISMATCH, 'get_attribute', path, None)
            return node.size
        return getattr(node, name)

    # Creation

    def create(self, path: str, attributes: Optional[NodeAttributes] = None) -> bool:
        """
        Create a file or directory inside an existing directory.

        Never overwrites: an existing entry with the same name is a failure.
        """
        attributes = attributes or NodeAttributes()
        parent, name = self._resolve_parent(path)

        if not name:
            return self._fail(FailureReason.ALREADY_EXISTS, 'create', path)
        if not isinstance(parent, DirNode):
            return self._fail(FailureReason.INVALID_PARENT, 'create', path)
        if name in parent.children:
            return self._fail(FailureReason.ALREADY_EXISTS, 'create', path)
        if attributes.contents is not None and not isinstance(attributes.contents, (str, bytes)):
            return self._fail(FailureReason.TYPE_MISMATCH, 'create', path)

        parent.children[name] = self._build_node(attributes)
        self.last_failure = None
        logger.debug("Created %s %r", attributes.kind.value, path)
        return True

    def create_deep(self, path: str, attributes: Optional[NodeAttributes] = None) -> bool:
        """
        Create every missing directory along a path.

        Existing directories are left alone. Directories created before a
        failure are not removed again.
        """
        attributes = replace(attributes or NodeAttributes(),
                             kind=NodeKind.DIRECTORY, contents=None)
        absolute, segments = parse_path(path)
        prefix = '' if absolute else None

        for segment in segments:
            prefix = segment if prefix is None else f'{prefix}/{segment}'

            node = self._resolve(prefix)
            if isinstance(node, DirNode):
                continue
            if node is not None:
                return self._fail(FailureReason.TYPE_MISMATCH, 'create_deep', prefix)
            if not self.create(prefix, attributes):
                return False

        self.last_failure = None
        return True

    # Mutation

    def set_attribute(self, path: str, name: str, value: Any, recursive: bool = False) -> bool:
        """
        Set one attribute of a node.

        Setting contents is only allowed on files. With recursive=True on a
        directory, every descendant gets the value first, then the directory.
        """
        node = self._resolve(path)
        if node is None:
            return self._fail(FailureReason.NOT_FOUND, 'set_attribute', path)

        if name not in WRITABLE_ATTRIBUTES:
            logger.warning("Refusing to set attribute %r on %s", name, path)
            return self._fail(FailureReason.INVALID_ATTRIBUTE, 'set_attribute', path)

        if name == 'contents':
            if not isinstance(node, FileNode) or not isinstance(value, (str, bytes)):
                return self._fail(FailureReason.TYPE_MISMATCH, 'set_attribute', path)

        if recursive and isinstance(node, DirNode):
            for descendant in node.walk():
                setattr(descendant, name, value)

        setattr(node, name, value)
        self.last_failure = None
        logger.debug("Set %s on %r (recursive=%s)", name, path, recursive)
        return True

    def copy(self, source: str, destination: str) -> bool:
        """
        Copy a file or directory tree.

        The destination is overwritten if it already exists.
        """
        node = self._resolve(source)
        if node is None:
            return self._fail(FailureReason.NOT_FOUND, 'copy', source)

        parent, name = self._resolve_parent(destination)
        if not isinstance(parent, DirNode) or not name:
            return self._fail(FailureReason.INVALID_PARENT, 'copy', destination)

        parent.children[name] = copy.deepcopy(node)
        self._check_cwd()
        self.last_failure = None
        logger.debug("Copied %r to %r", source, destination)
        return True

    def move(self, source: str, destination: str) -> bool:
        """Move a file or directory: copy, then detach the source."""
        parent, name = self._resolve_parent(source)
        node = parent.children.get(name) if isinstance(parent, DirNode) else None

        if not self.copy(source, destination):
            return False

        # The copy may have reset cwd; detach the node that was copied,
        # not whatever a relative source names now.
        if node is not None and parent.children.get(name) is node:
            del parent.children[name]
            self._check_cwd()

        self.last_failure = None
        logger.debug("Moved %r to %r", source, destination)
        return True

    def delete(self, path: str) -> bool:
        """Delete a file or directory together with everything below it."""
        parent, name = self._resolve_parent(path)

        if parent is None:
            return self._fail(FailureReason.INVALID_PARENT, 'delete', path)
        if not isinstance(parent, DirNode):
            return self._fail(FailureReason.INVALID_PARENT, 'delete', path)
        if name not in parent.children:
            return self._fail(FailureReason.NOT_FOUND, 'delete', path)

        del parent.children[name]
        self._check_cwd()
        self.last_failure = None
        logger.debug("Deleted %r", path)
        return True

    # Working directory

    def get_cwd(self) -> str:
        """Get the current working directory."""
        return self.cwd

    def set_cwd(self, path: str) -> bool:
        """Change the working directory to an existing directory."""
        node = self._resolve(path)
        if node is None:
            return self._fail(FailureReason.NOT_FOUND, 'set_cwd', path)
        if not isinstance(node, DirNode):
            return self._fail(FailureReason.TYPE_MISMATCH, 'set_cwd', path)

        absolute, segments = parse_path(path)
        if not absolute:
            segments = parse_path(self.cwd)[1] + segments

        self.cwd = '/' + '/'.join(segments)
        self.last_failure = None
        return True
