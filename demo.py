#!/usr/bin/env python3
"""
Demo script showcasing mockfs.

This demonstrates:
1. Building a tree with the store's primitive operations
2. Copy, move and delete on whole subtrees
3. Recursive attribute changes
4. The storage-operations facade and its overwrite policy
"""

import logging

import mockfs
from mockfs import NodeAttributes, NodeKind


def demo_store():
    """Demonstrate the tree store."""
    print("=== Tree Store Demo ===")
    print()

    fs = mockfs.MockFilesystem()

    # Create directory structure
    fs.create_deep("/home/user/documents")
    fs.create("/home/user/hello.txt", NodeAttributes(contents="Hello, World!"))
    fs.create("/home/user/documents/note.txt", NodeAttributes(contents="Important note"))

    for path in ("/home/user/hello.txt", "/home/user/documents/note.txt"):
        print(f"  {path:<32} size={fs.get_attribute(path, 'size')}")

    # Copies are deep
    print("\nCopy and move:")
    fs.copy("/home/user", "/backup")
    fs.set_attribute("/backup/hello.txt", "contents", "Changed in the backup")
    print(f"  original: {fs.get_attribute('/home/user/hello.txt', 'contents')!r}")
    print(f"  backup:   {fs.get_attribute('/backup/hello.txt', 'contents')!r}")

    fs.move("/backup", "/home/backup")
    print(f"  /backup exists after move: {fs.exists('/backup')}")

    # Recursive ownership
    print("\nRecursive chown of /home:")
    fs.set_attribute("/home", "owner", "user", recursive=True)
    print(f"  owner of note.txt: {fs.get_attribute('/home/user/documents/note.txt', 'owner')}")

    # Failures are values, with a reason
    print("\nFailures:")
    print(f"  create existing file: {fs.create('/home/user/hello.txt')} ({fs.last_failure.value})")
    print(f"  cd into a file:       {fs.set_cwd('/home/user/hello.txt')} ({fs.last_failure.value})")
    print(f"  '..' is a literal:    {fs.exists('/home/user/..')}")
    print()


def demo_facade():
    """Demonstrate the storage-operations facade."""
    print("=== Facade Demo ===")
    print()

    api = mockfs.FilesystemAPI(mockfs.MockFilesystem())

    api.mkdir("/wp-content")
    api.put_contents("/wp-content/index.php", "<?php // Silence is golden.", 0o640)
    print(f"  mode of index.php: {oct(api.getchmod('/wp-content/index.php'))}")
    print(f"  writable: {api.is_writable('/wp-content/index.php')}")

    api.touch("/wp-content/other.php")
    print(f"  copy without overwrite: {api.copy('/wp-content/index.php', '/wp-content/other.php')}")
    print(f"  copy with overwrite:    {api.copy('/wp-content/index.php', '/wp-content/other.php', True)}")
    print(f"  rmdir non-empty:        {api.rmdir('/wp-content')}")
    print(f"  rmdir recursive:        {api.rmdir('/wp-content', True)}")

    try:
        api.dirlist("/")
    except NotImplementedError as exc:
        print(f"  dirlist: {exc}")
    print()


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 60)
    print("mockfs - In-Memory Filesystem Demo")
    print("=" * 60)
    print()

    demo_store()
    demo_facade()

    print("=" * 60)
    print("Demo complete!")


if __name__ == "__main__":
    main()
