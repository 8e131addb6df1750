"""
appseed.emitter - File Writing
==============================

Writes a :class:`~appseed.models.RenderedFile` below an output directory.

The write is atomic: content goes to a temporary file in the destination
directory which then replaces the target with ``os.replace``. A failed write
never leaves a half-written file behind. An existing file at the target path
is overwritten without warning.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from appseed.errors import EmitError
from appseed.models import RenderedFile


logger = logging.getLogger(__name__)

FILE_MODE = 0o644


def write_file(rendered: RenderedFile, output_dir: Path) -> Path:
    """
    Write a rendered file below ``output_dir``.

    Parameters
    ----------
    rendered : RenderedFile
        File to write; its path is relative to ``output_dir``.

    output_dir : Path
        Destination root. Created along with any parent directories.

    Returns
    -------
    Path
        Path of the written file.

    Raises
    ------
    EmitError
        If directories can't be created or the file can't be written
        (permissions, disk full, path is a directory, ...).
    """
    target = output_dir / rendered.path

    try:
        target.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", dir=target.parent)
        os.close(fd)
        tmp_path = Path(tmp_name)
        try:
            with tmp_path.open("w", encoding="utf-8", newline="") as f:
                f.write(rendered.content)
            os.chmod(tmp_path, FILE_MODE)
            os.replace(tmp_path, target)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
    except OSError as e:
        raise EmitError(f"Failed to write {target}: {e.strerror or e}") from e

    logger.info("Wrote %s (%d bytes)", target, len(rendered.content.encode("utf-8")))
    return target
