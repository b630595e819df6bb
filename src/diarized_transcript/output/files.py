#!/usr/bin/env python3
"""
Atomic file output shared by the transcript writers.
"""
import os
import stat
import tempfile
from pathlib import Path
from typing import Union


def _current_umask() -> int:
    # os.umask can only be read by setting it
    mask = os.umask(0)
    os.umask(mask)
    return mask


def atomic_write_text(path: Union[str, Path], text: str, encoding: str = "utf-8") -> Path:
    """
    Write text to a file through a temporary sibling and os.replace

    A failure never leaves a partial file behind. The result gets the mode a
    plain open() would give (0666 masked by the umask), or keeps the mode of
    the file it replaces. Symlinks are written through, not replaced.

    Args:
        path: File to create or replace
        text: Full file contents
        encoding: Text encoding

    Returns:
        Path that was actually written (the symlink target, if any)

    Raises:
        OSError: the file could not be written
    """
    target = Path(os.path.realpath(path))
    try:
        mode = stat.S_IMODE(os.stat(target).st_mode)
    except FileNotFoundError:
        mode = 0o666 & ~_current_umask()

    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=str(target.parent))
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="\n") as f:
            f.write(text)
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, target)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
    return target
