"""File discovery and file I/O helpers."""

from __future__ import annotations

import contextlib
import errno
import logging
import os
import shutil
import stat
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

ZIG_EXTENSION = ".zig"

# Decoding with surrogateescape lets undecodable bytes survive a rewrite.
ENCODING = "utf-8"
ENCODING_ERRORS = "surrogateescape"


def iter_zig_files(path: Path) -> list[Path]:
    """
    Resolve a file or directory into the Zig files it contains.

    Directories are walked recursively. Hidden entries (leading ``.``) and
    symlinked directories are skipped, as is anything that cannot be read.
    """
    files: list[Path] = []
    _collect_zig_files(path, files)
    return files


def _collect_zig_files(path: Path, files: list[Path]) -> None:
    try:
        mode = path.stat().st_mode
    except OSError as e:
        # Broken symlinks end up here
        logger.debug(f"Failed to open {path}: {e}")
        return

    if stat.S_ISREG(mode):
        if path.suffix == ZIG_EXTENSION:
            logger.debug(f"Storing zig file {path}")
            files.append(path)
        return

    if not stat.S_ISDIR(mode):
        return
    if path.is_symlink():
        logger.debug(f"Skipping symlinked directory {path}")
        return
    try:
        entries = sorted(path.iterdir())
    except OSError as e:
        logger.debug(f"Failed to open {path}: {e}")
        return

    for entry in entries:
        if entry.name.startswith("."):
            logger.debug(f"Skipping hidden path {entry}")
            continue
        _collect_zig_files(entry, files)


def read_source(path: Path) -> str:
    return path.read_bytes().decode(ENCODING, errors=ENCODING_ERRORS)


def write_source(path: Path, content: str) -> None:
    """
    Replace the contents of ``path`` in one step.

    The new content is written to a temporary file next to ``path`` which is
    then renamed over it, so readers never see a partial write.
    """
    if path.is_dir():
        raise IsADirectoryError(errno.EISDIR, os.strerror(errno.EISDIR), str(path))

    data = content.encode(ENCODING, errors=ENCODING_ERRORS)
    fd, temp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with open(fd, "wb", closefd=True) as handle:
            handle.write(data)
        shutil.copymode(path, temp_name)
        os.replace(temp_name, path)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(temp_name)
        raise
