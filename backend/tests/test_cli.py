import os

from patchcatalog.cli import main
from patchcatalog.database import CatalogDB


def test_import_and_list(tmp_path, sample_library, capsys):
    db_path = str(tmp_path / "cli.db")

    assert main(["--db", db_path, "import", str(sample_library), "-l", "Library"]) == 0
    assert "Imported 4 new patches" in capsys.readouterr().out

    assert main(["--db", db_path, "banks"]) == 0
    out = capsys.readouterr().out
    assert "muse [Library] factory, 3 patches" in out
    assert "classic [Library] factory, 1 patches" in out

    assert main(["--db", db_path, "patches", "--bank", "classic"]) == 0
    assert "Library/classic/moog 55 strings" in capsys.readouterr().out


def test_update_command(tmp_path, sample_library):
    db_path = str(tmp_path / "cli.db")
    main(["--db", db_path, "import", str(sample_library), "-l", "Library"])
    path = os.path.join(str(sample_library), "library/bank01/patch02/muse runner.mmp")

    assert main(["--db", db_path, "update", path, "--love", "-c", "Lead", "-t", "muse", "-t", "bright"]) == 0

    with CatalogDB(db_path) as db:
        patch = db.get_patch(path)
    assert patch.loved is True
    assert patch.category == "Lead"
    assert patch.tags == ["muse", "bright"]
    assert patch.bank == "muse"


def test_update_unknown_patch_fails(tmp_path):
    assert main(["--db", str(tmp_path / "cli.db"), "update", "/missing.mmp", "--love"]) == 1


def test_import_missing_root_fails(tmp_path, capsys):
    assert main(["--db", str(tmp_path / "cli.db"), "import", str(tmp_path / "nope")]) == 1
    assert "Error:" in capsys.readouterr().err


def test_info(tmp_path, sample_library, capsys):
    db_path = str(tmp_path / "cli.db")
    main(["--db", db_path, "import", str(sample_library), "-l", "Library"])

    assert main(["--db", db_path, "info"]) == 0
    out = capsys.readouterr().out
    assert "Total Patches: 4" in out
    assert "Total Banks: 2" in out


def test_no_command_prints_help(capsys):
    assert main([]) == 1
    assert "usage" in capsys.readouterr().out
