"""Filesystem abstraction for testability.

This module provides a filesystem abstraction that adapters use for every
read and write. The RealFileSystem implementation wraps standard library
operations.
"""

from __future__ import annotations

import hashlib
import os
import shutil
from pathlib import Path


class RealFileSystem:
    """Production filesystem implementation.

    Wraps standard library Path, os and shutil operations.
    Satisfies the FileSystem protocol structurally.
    """

    def read_text(self, path: Path) -> str:
        """Read text content from a file."""
        return path.read_text(encoding="utf-8")

    def write_text(self, path: Path, content: str) -> None:
        """Write text content to a file."""
        path.write_text(content, encoding="utf-8")

    def exists(self, path: Path) -> bool:
        """Check if a path exists, following symlinks."""
        return path.exists()

    def lexists(self, path: Path) -> bool:
        """Check if a path exists without following symlinks.

        A dangling symlink counts as existing.
        """
        return os.path.lexists(path)

    def is_dir(self, path: Path) -> bool:
        """Check if a path is a directory."""
        return path.is_dir()

    def is_file(self, path: Path) -> bool:
        """Check if a path is a regular file."""
        return path.is_file()

    def is_symlink(self, path: Path) -> bool:
        """Check if a path is a symbolic link."""
        return path.is_symlink()

    def readlink(self, path: Path) -> Path:
        """Return the absolute target of a symlink.

        Relative link targets are resolved against the link's directory.
        """
        target = Path(os.readlink(path))
        if not target.is_absolute():
            target = path.parent / target
        return Path(os.path.normpath(target))

    def resolve(self, path: Path) -> Path:
        """Return the canonical absolute form of a path."""
        return path.resolve()

    def symlink(self, target: Path, link: Path) -> None:
        """Create a directory symlink at ``link`` pointing to ``target``."""
        link.symlink_to(target, target_is_directory=True)

    def mkdir(self, path: Path, parents: bool = False, exist_ok: bool = False) -> None:
        """Create a directory."""
        path.mkdir(parents=parents, exist_ok=exist_ok)

    def iterdir(self, path: Path) -> list[Path]:
        """List directory entries in name order."""
        return sorted(path.iterdir())

    def unlink(self, path: Path) -> None:
        """Remove a file or symlink."""
        path.unlink()

    def move(self, src: Path, dst: Path) -> None:
        """Move a file or directory."""
        shutil.move(str(src), str(dst))

    def file_hash(self, path: Path) -> str:
        """Get the SHA256 hex digest of a file."""
        return hashlib.sha256(path.read_bytes()).hexdigest()
