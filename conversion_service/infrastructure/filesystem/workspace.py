"""Scoped temporary working directories for a single conversion."""
from __future__ import annotations

import logging
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from conversion_service.constants import TEMP_DIR_PREFIX

logger = logging.getLogger(__name__)


def remove_dir_safe(path: Optional[Path]) -> None:
    """Delete ``path`` recursively; failures are logged, never raised."""

    if path is None:
        return
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        return
    except OSError as exc:
        logger.warning("Failed to cleanup temp directory %s: %s", path, exc)


@contextmanager
def conversion_workspace(
    prefix: str = TEMP_DIR_PREFIX,
    base_dir: Optional[Path | str] = None,
) -> Iterator[Path]:
    """Create a private temp directory and remove it on every exit path."""

    path = Path(tempfile.mkdtemp(prefix=prefix, dir=base_dir))
    logger.debug("Created workspace %s", path)
    try:
        yield path
    finally:
        remove_dir_safe(path)
