"""
Patch Catalog
=============
Catalogs synthesizer patch files found on disk into a de-duplicated SQLite
library organised by bank and library of origin.

Modules:
- database.py: SQLite store for patches, banks and their links
- fingerprint.py: Directory-aware checksum used for de-duplication
- ingest.py: Directory importer and its CLI
- editor.py: Metadata edits on stored patches
- filters.py: List filtering for browsing the catalog
- export.py: Copies selected patches into a numbered bank tree
- api.py / server.py: FastAPI surface over the store
- cli.py: Unified command line
"""

__version__ = "1.0.0"

from .database import Bank, CatalogDB, Patch
from .editor import MetadataEditor
from .fingerprint import calculate_checksum
from .ingest import PatchImporter, import_patches_from_directory
from .models import PatchUpdate
