"""
Core module - String catalog model and persistence

This module provides:
- catalog: Catalog, Entry, Unit and TranslationRequest types
- store: Loading, stale pruning and deterministic saving
- backup: Backup of the previous catalog file
- exceptions: Catalog I/O errors
"""

from aitranslate.core.catalog import (
    UNIT_STATE_NEW,
    UNIT_STATE_TRANSLATED,
    UNIT_STATE_ERROR,
    Unit,
    Entry,
    Catalog,
    TranslationRequest,
)

from aitranslate.core.exceptions import (
    CatalogIOError,
    CatalogLoadError,
    CatalogWriteError,
)

from aitranslate.core.backup import (
    BackupStore,
    backup_path_for,
)

from aitranslate.core.store import (
    load_catalog,
    save_catalog,
    serialize_catalog,
    prune_stale_entries,
)
