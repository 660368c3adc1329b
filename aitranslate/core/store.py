"""
Catalog persistence.

This module handles reading and writing string catalogs:
- Loading and shape validation
- Pruning of stale entries
- Deterministic serialization (sorted keys, Xcode layout)
- Backup and atomic replacement of the file on disk
"""

import json
import shutil
import tempfile
from pathlib import Path
from typing import List, Optional

from aitranslate.config import STALE_EXTRACTION_STATE
from aitranslate.core.backup import BackupStore
from aitranslate.core.catalog import Catalog
from aitranslate.core.exceptions import CatalogLoadError, CatalogWriteError
from aitranslate.logger import get_logger

logger = get_logger(__name__)


def load_catalog(path: Path) -> Catalog:
    """
    Load a string catalog from disk.

    Raises:
        CatalogLoadError: If the file can't be read, isn't JSON or isn't a catalog
    """
    path = Path(path)
    logger.info(f"Loading catalog: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError) as e:
        raise CatalogLoadError(
            f"Failed to read catalog {path}: {e}",
            code="catalog_unreadable",
            details={"path": str(path)},
        )
    except json.JSONDecodeError as e:
        raise CatalogLoadError(
            f"Failed to parse catalog {path}: {e}",
            code="catalog_invalid",
            details={"path": str(path), "line": e.lineno, "column": e.colno},
        )

    try:
        catalog = Catalog.from_dict(data)
    except ValueError as e:
        raise CatalogLoadError(
            f"Invalid catalog {path}: {e}",
            code="catalog_invalid",
            details={"path": str(path)},
        )

    logger.info(f"Loaded {len(catalog.entries)} entries (source language: {catalog.source_language})")
    return catalog


def prune_stale_entries(catalog: Catalog) -> List[str]:
    """Remove entries whose extractionState is stale. Returns the removed keys."""
    stale_keys = [
        key for key, entry in catalog.entries.items()
        if entry.extraction_state == STALE_EXTRACTION_STATE
    ]
    for key in stale_keys:
        del catalog.entries[key]

    if stale_keys:
        logger.info(f"Removed {len(stale_keys)} stale entries")
    return stale_keys


def serialize_catalog(catalog: Catalog) -> str:
    """
    Encode a catalog the way Xcode writes .xcstrings files.

    Keys are sorted and the layout is fixed, so the same data always produces
    the same text.
    """
    return json.dumps(
        catalog.to_dict(),
        ensure_ascii=False,
        indent=2,
        sort_keys=True,
        separators=(',', ' : '),
    ) + '\n'


def save_catalog(
    catalog: Catalog,
    path: Path,
    remove_stale: bool = False,
    skip_backup: bool = False,
    backup_store: Optional[BackupStore] = None,
) -> None:
    """
    Write a catalog to disk.

    This function:
    1. Prunes stale entries if requested
    2. Serializes the catalog deterministically
    3. Backs up the current file unless skip_backup is set
    4. Replaces the file atomically (temp file + rename)

    Raises:
        CatalogWriteError: If the backup or the write fails
    """
    path = Path(path)

    if remove_stale:
        prune_stale_entries(catalog)

    content = serialize_catalog(catalog)

    if not skip_backup:
        (backup_store or BackupStore()).backup(path)

    _atomic_write_text(path, content)
    logger.info(f"Saved catalog: {path}")


def _atomic_write_text(file_path: Path, content: str) -> None:
    """
    Write text to file atomically.

    The content goes to a temporary file in the same directory which then
    replaces the target, so readers never see a partially written file.

    Raises:
        CatalogWriteError: If write fails
    """
    temp_path: Optional[Path] = None
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)

        # Same directory so the rename stays on one file system
        temp_fd, temp_name = tempfile.mkstemp(
            dir=file_path.parent,
            prefix=f".{file_path.stem}_",
            suffix=".tmp"
        )
        temp_path = Path(temp_name)

        with open(temp_fd, 'w', encoding='utf-8', newline='\n') as f:
            f.write(content)

        # mkstemp creates 0600 files; keep the mode of the file being replaced
        if file_path.exists():
            shutil.copymode(file_path, temp_path)

        temp_path.replace(file_path)
        logger.debug(f"Atomic write successful: {file_path}")

    except Exception as e:
        # Clean up temp file on error (I/O and encoding failures alike)
        if temp_path is not None and temp_path.exists():
            temp_path.unlink()
        raise CatalogWriteError(
            f"Failed to write catalog {file_path}: {e}",
            code="catalog_unwritable",
            details={"path": str(file_path)},
        )
