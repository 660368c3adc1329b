"""
Backup of the catalog file before it is overwritten.
"""

import shutil
from pathlib import Path
from typing import Optional

from aitranslate.config import BACKUP_SUFFIX
from aitranslate.core.exceptions import CatalogWriteError
from aitranslate.logger import get_logger

logger = get_logger(__name__)


def backup_path_for(path: Path) -> Path:
    """Sibling backup path, e.g. Localizable.xcstrings.original"""
    return path.with_name(path.name + BACKUP_SUFFIX)


class BackupStore:
    """Keeps one backup copy next to the catalog, replacing any older backup."""

    def backup(self, path: Path) -> Optional[Path]:
        """
        Copy the current file to its backup path.

        Returns:
            The backup path, or None if there was no file to back up

        Raises:
            CatalogWriteError: If the existing file could not be copied
        """
        path = Path(path)
        if not path.exists():
            logger.debug(f"Nothing to back up at {path}")
            return None

        target = backup_path_for(path)
        try:
            shutil.copy2(path, target)
        except OSError as e:
            raise CatalogWriteError(
                f"Failed to back up {path}: {e}",
                code="catalog_unwritable",
                details={"path": str(path), "backup_path": str(target)},
            )

        logger.info(f"Backed up {path.name} to {target}")
        return target
