from pathlib import Path

import pytest

from patchcatalog.database import CatalogDB


SAMPLE_LIBRARY = {
    "library/bank01/muse.bank": b"",
    "library/bank01/patch01/vox humana.mmp": b"vox humana data",
    "library/bank01/patch02/muse runner.mmp": b"muse runner data",
    "library/bank01/patch03/struga baab.mmp": b"struga baab data",
    "library/bank02/classic.bank": b"",
    "library/bank02/patch01/moog 55 strings.mmp": b"moog 55 strings data",
}


def write_tree(root: Path, files: dict) -> Path:
    for rel, content in files.items():
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
    return root


@pytest.fixture
def db(tmp_path):
    catalog = CatalogDB(str(tmp_path / "data" / "patches.db"))
    catalog.connect()
    yield catalog
    catalog.close()


@pytest.fixture
def sample_library(tmp_path):
    return write_tree(tmp_path / "patches", SAMPLE_LIBRARY)


@pytest.fixture
def make_tree():
    return write_tree
