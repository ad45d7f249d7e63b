"""
Atomic whole-file writes.

Both stores replace files by writing a temp file in the target directory and
renaming it over the destination, so a concurrent reader sees either the old
content or the new content, never a partial file.
"""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path

from .errors import StorageError

DEFAULT_FILE_MODE = 0o666


def _current_umask() -> int:
    # os.umask can only be read by setting it.
    mask = os.umask(0)
    os.umask(mask)
    return mask


def target_mode(path: Path) -> int:
    """
    Mode the replaced file should end up with.

    An existing file keeps its permission bits; a new one gets the usual
    `0o666 & ~umask`, as if it had been created with open().
    """
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        return DEFAULT_FILE_MODE & ~_current_umask()


def write_atomic(path: Path, data: bytes) -> None:
    """
    Write `data` to `path` via temp file + rename.

    mkstemp creates files as 0600, so the temp file is chmod-ed to the
    target mode before the rename.

    Raises StorageError if any filesystem step fails; the temp file is removed
    on failure.
    """
    dir_path = path.parent
    fd = None
    temp_path = None
    try:
        dir_path.mkdir(parents=True, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(dir=str(dir_path), prefix=".tmp_", suffix=path.suffix)
        os.fchmod(fd, target_mode(path))

        view = memoryview(data)
        while view:
            written = os.write(fd, view)
            view = view[written:]
        os.close(fd)
        fd = None

        # Atomic replace
        os.replace(temp_path, path)
        temp_path = None
    except OSError as e:
        raise StorageError("write_file", str(path), e) from e
    finally:
        if fd is not None:
            try:
                os.close(fd)
            except OSError:
                pass
        if temp_path is not None:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
