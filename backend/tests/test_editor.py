import pytest
from pydantic import ValidationError

from patchcatalog.database import Patch
from patchcatalog.editor import MetadataEditor
from patchcatalog.models import PatchUpdate


@pytest.fixture
def stored_patch(db):
    patch = Patch(
        path="/lib/bank01/patch01/vox humana.mmp",
        name="vox humana",
        checksum="c" * 32,
        tags=["muse"],
        bank="muse",
        library="Library",
    )
    db.save_patch(patch)
    return patch


def test_update_with_model(db, stored_patch):
    editor = MetadataEditor(db)

    assert editor.update(stored_patch.path, PatchUpdate(loved=True)) is True
    assert db.get_patch(stored_patch.path).loved is True


def test_update_with_mapping(db, stored_patch):
    editor = MetadataEditor(db)

    editor.update(stored_patch.path, {"category": "Choir", "tags": ["muse", "vocal"]})

    patch = db.get_patch(stored_patch.path)
    assert patch.category == "Choir"
    assert patch.tags == ["muse", "vocal"]
    assert patch.loved is False
    assert patch.bank == "muse"


def test_update_rejects_unknown_fields(db, stored_patch):
    with pytest.raises(ValidationError):
        MetadataEditor(db).update(stored_patch.path, {"checksum": "0" * 32})
    assert db.get_patch(stored_patch.path).checksum == stored_patch.checksum


def test_update_missing_patch(db):
    assert MetadataEditor(db).update("/nowhere.mmp", {"loved": True}) is False
