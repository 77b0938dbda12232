import argparse
import asyncio
import sys
from pathlib import Path

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from patchcatalog.config import configure_logging
from patchcatalog.database import CatalogDB
from patchcatalog.ingest import import_patches_from_directory


def main() -> None:
    parser = argparse.ArgumentParser(description="Import a patch library into the catalog SQLite index.")
    parser.add_argument("root", help="Root directory to scan")
    parser.add_argument("--library", default=None, help="Library label (default: root directory name).")
    parser.add_argument("--db", default=None, help="Catalog database path.")
    args = parser.parse_args()

    configure_logging()
    with CatalogDB(args.db) as db:
        patches = asyncio.run(import_patches_from_directory(args.root, args.library, db))
        stats = db.get_statistics()
    print(
        f"import complete | imported={len(patches)} "
        f"patches={stats['total_patches']} banks={stats['total_banks']}"
    )


if __name__ == "__main__":
    main()
