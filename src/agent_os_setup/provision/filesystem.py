"""Filesystem helpers: idempotent directories, atomic writes, execute bits."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path


def ensure_directory(path: Path) -> Path:
    """Create ``path`` and any missing parents; existing directories are fine."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def _target_mode(path: Path) -> int:
    """Mode a plain ``open(path, "w")`` would leave on ``path``."""
    if path.is_file():
        return path.stat().st_mode & 0o7777
    return 0o666 & ~_current_umask()


def atomic_write_bytes(path: Path, data: bytes, *, mode: int | None = None) -> None:
    """Atomically write ``data`` to ``path`` (temp file + rename).

    The temp file is created in the destination directory so ``os.replace``
    never crosses filesystems. On any failure the temp file is removed and
    the previous content of ``path`` is left as it was.

    Args:
        path: Destination file
        data: Full content to place
        mode: Permission bits applied before the rename. Defaults to the
            mode of the existing file, or 0o666 minus the umask for a new one

    Raises:
        OSError: If the write or rename fails
    """
    if mode is None:
        mode = _target_mode(path)
    fd, tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        # mkstemp creates 0600
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)  # Atomic on POSIX
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


def make_executable(path: Path) -> bool:
    """Mirror read bits onto execute bits (no-op on Windows).

    Returns True when the mode changed.
    """
    if os.name == "nt":
        return False
    mode = path.stat().st_mode
    new_mode = mode
    if mode & 0o400: new_mode |= 0o100
    if mode & 0o040: new_mode |= 0o010
    if mode & 0o004: new_mode |= 0o001
    if not (new_mode & 0o100):
        new_mode |= 0o100
    if new_mode == mode:
        return False
    os.chmod(path, new_mode)
    return True


def is_within(path: Path, root: Path) -> bool:
    """True if ``path`` resolves to ``root`` or somewhere below it."""
    try:
        path.resolve().relative_to(root.resolve())
    except ValueError:
        return False
    return True


__all__ = ["atomic_write_bytes", "ensure_directory", "is_within", "make_executable"]
