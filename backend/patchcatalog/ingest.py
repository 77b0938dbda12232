#!/usr/bin/env python3
"""
Patch Import Engine (ingest.py)
===============================
Walks a patch library on disk and records every new patch in the catalog:
- bank directories are recognised by a ``.bank`` marker file
- patches live in ``patch*`` subdirectories as ``.mmp`` files
- patches already in the catalog (same checksum) are skipped

Usage:
    python -m patchcatalog.ingest /path/to/library --library Factory
    python -m patchcatalog.ingest /path/to/library --db ./patches.db
"""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, Set

from .config import configure_logging
from .database import Bank, CatalogDB, Patch
from .fingerprint import calculate_checksum

logger = logging.getLogger(__name__)


class PatchImporter:
    """
    Imports a directory tree of banks and patches into a CatalogDB.

    Expected layout (the ``library`` level is optional):

        root/library/<bank dir>/<name>.bank
        root/library/<bank dir>/patchNN/<patch name>.mmp
    """

    LIBRARY_DIR = "library"
    BANK_EXTENSION = ".bank"
    PATCH_EXTENSION = ".mmp"
    PATCH_DIR_PREFIX = "patch"
    CUSTOM_BANK_PREFIX = "user"

    def __init__(self, db: CatalogDB):
        self.db = db

    def import_directory(self, root_dir: Optional[str], library_name: Optional[str] = None) -> List[Patch]:
        """
        Import all new patches found under ``root_dir``.

        Args:
            root_dir: Directory chosen by the user; None or "" imports nothing
            library_name: Label for this import run (default: root directory name)

        Returns:
            The newly imported patches only
        """
        if not root_dir:
            logger.info("No directory selected, nothing to import")
            return []

        root = os.path.abspath(root_dir)
        if not os.path.isdir(root):
            raise FileNotFoundError(f"Import root not found: {root_dir}")

        if not library_name:
            library_name = os.path.basename(root.rstrip(os.sep))

        root = self._resolve_root(root)
        bank_dirs = self._find_bank_dirs(root)
        logger.info(f"Found {len(bank_dirs)} bank directories in {root}")

        patches: List[Patch] = []
        seen: Set[str] = set()

        for bank_dir in bank_dirs:
            bank_path = os.path.join(root, bank_dir)
            bank_name = self._bank_name(bank_path)
            if bank_name is None:
                logger.info(f"No {self.BANK_EXTENSION} file found in {bank_dir}, skipping")
                continue

            is_custom = self.is_custom_bank(bank_name)
            logger.info(f"Processing bank: {bank_name} (custom: {is_custom})")
            self.db.save_bank(Bank(name=bank_name, library=library_name, custom=is_custom))

            for patch_file in self._find_patch_files(bank_path):
                checksum = calculate_checksum(patch_file)
                if checksum in seen or self.db.patch_exists(checksum):
                    logger.debug(f"Skipping duplicate patch: {patch_file}")
                    continue
                seen.add(checksum)
                patches.append(Patch(
                    path=patch_file,
                    name=os.path.basename(patch_file)[:-len(self.PATCH_EXTENSION)],
                    loved=False,
                    category="",
                    tags=[bank_name],
                    bank=bank_name,
                    library=library_name,
                    checksum=checksum,
                    custom=is_custom
                ))

        logger.info(f"Total new patches found: {len(patches)}")
        if not patches:
            return []
        return self._commit(patches)

    @classmethod
    def is_custom_bank(cls, bank_name: str) -> bool:
        return bank_name.lower().startswith(cls.CUSTOM_BANK_PREFIX)

    def _commit(self, patches: List[Patch]) -> List[Patch]:
        """Batch-save the patches, then link the inserted ones to their banks."""
        inserted = self.db.save_patches(patches)

        for patch in inserted:
            bank = self.db.get_bank(patch.bank, patch.library)
            if bank is None:
                bank_id = self.db.save_bank(
                    Bank(name=patch.bank, library=patch.library, custom=patch.custom)
                )
            else:
                bank_id = bank.id
            self.db.associate_patch_with_bank(patch.path, bank_id)

        logger.info(f"Saved {len(inserted)} patches to the catalog")
        return inserted

    def _resolve_root(self, root: str) -> str:
        """Descend into the ``library`` directory when the root has one.

        The name is matched case-insensitively; an exact ``library`` wins.
        """
        candidates = sorted(
            entry for entry in os.listdir(root)
            if entry.lower() == self.LIBRARY_DIR
            and os.path.isdir(os.path.join(root, entry))
        )
        if not candidates:
            return root
        chosen = self.LIBRARY_DIR if self.LIBRARY_DIR in candidates else candidates[0]
        library_root = os.path.join(root, chosen)
        logger.info(f"Using {chosen}/ as root directory: {library_root}")
        return library_root

    def _find_bank_dirs(self, root: str) -> List[str]:
        """Subdirectories holding at least one bank marker file, sorted."""
        bank_dirs = []
        for entry in os.listdir(root):
            full_path = os.path.join(root, entry)
            if not os.path.isdir(full_path):
                continue
            if any(f.endswith(self.BANK_EXTENSION) for f in os.listdir(full_path)):
                bank_dirs.append(entry)
        return sorted(bank_dirs)

    def _bank_name(self, bank_path: str) -> Optional[str]:
        markers = sorted(
            f for f in os.listdir(bank_path)
            if f.endswith(self.BANK_EXTENSION)
            and os.path.isfile(os.path.join(bank_path, f))
        )
        if not markers:
            return None
        return markers[0][:-len(self.BANK_EXTENSION)]

    def _find_patch_files(self, bank_path: str) -> List[str]:
        """Absolute paths of ``.mmp`` files inside the bank's ``patch*`` directories."""
        files = []
        patch_dirs = sorted(
            d for d in os.listdir(bank_path)
            if d.startswith(self.PATCH_DIR_PREFIX)
            and os.path.isdir(os.path.join(bank_path, d))
        )
        for patch_dir in patch_dirs:
            patch_dir_path = os.path.join(bank_path, patch_dir)
            for f in sorted(os.listdir(patch_dir_path)):
                full_path = os.path.join(patch_dir_path, f)
                if f.endswith(self.PATCH_EXTENSION) and os.path.isfile(full_path):
                    files.append(full_path)
        return files


async def import_patches_from_directory(
    root_dir: Optional[str],
    library_name: Optional[str],
    db: CatalogDB
) -> List[Patch]:
    """
    Import patches from a directory into the catalog.

    This is the entry point used by the API and the CLI. It runs the whole
    import before returning; a second import must not be started on the same
    store until this one completes.

    Args:
        root_dir: Directory to scan, or None when no directory was chosen
        library_name: Library label for the run (default: root directory name)
        db: Connected catalog store

    Returns:
        The newly imported patches
    """
    importer = PatchImporter(db)
    return importer.import_directory(root_dir, library_name)


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description='Patch Import Engine - Catalog synth patches found in a library directory',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Import a factory library
  python -m patchcatalog.ingest ~/Patches/Factory -l Factory

  # Import into a specific catalog file
  python -m patchcatalog.ingest ~/Patches/User --db ./patches.db
        """
    )

    parser.add_argument(
        'root_dir',
        help='Directory containing the patch library'
    )

    parser.add_argument(
        '-l', '--library',
        default=None,
        help='Library label for this import (default: directory name)'
    )

    parser.add_argument(
        '--db',
        default=None,
        help='Catalog database path (default: $PATCHCATALOG_DB_PATH or ~/.patchcatalog/patches.db)'
    )

    args = parser.parse_args()
    configure_logging()

    try:
        with CatalogDB(args.db) as db:
            patches = asyncio.run(import_patches_from_directory(args.root_dir, args.library, db))
        print(f"Imported {len(patches)} new patches from {Path(args.root_dir)}")
        sys.exit(0)

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
