"""Persist multi-file output (the generated Java project)."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Mapping, Union

from .errors import OutputError

logger = logging.getLogger(__name__)


def write_project(files: Mapping[str, str], base_dir: Union[str, Path]) -> Path:
    """Replace ``base_dir`` with a fresh directory holding ``files``.

    Args:
        files: Relative path (forward slashes) -> file contents.
        base_dir: Output root; removed first if it already exists.

    Returns:
        The output root as a :class:`~pathlib.Path`.

    Raises:
        OutputError: The directory could not be cleared or a file could not
            be written.
    """
    base = Path(base_dir)
    try:
        if base.exists():
            logger.debug("Removing existing output directory %s", base)
            shutil.rmtree(base)
        base.mkdir(parents=True)
        for relative, contents in files.items():
            target = base / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(contents, encoding="utf-8")
    except OSError as exc:
        raise OutputError(f"Failed writing generated files under {base}: {exc}") from exc

    logger.info("Wrote %d files under %s", len(files), base)
    return base
