import os

import pytest
from fastapi.testclient import TestClient

from patchcatalog.server import create_app


@pytest.fixture
def client(tmp_path):
    app = create_app(str(tmp_path / "api" / "patches.db"))
    with TestClient(app) as test_client:
        yield test_client


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_import_then_browse(client, sample_library):
    response = client.post("/api/catalog/import", json={
        "root_dir": str(sample_library),
        "library": "Library",
    })
    assert response.status_code == 200
    assert len(response.json()) == 4

    patches = client.get("/api/catalog/patches").json()
    assert len(patches) == 4

    banks = client.get("/api/catalog/banks").json()
    assert {b["name"] for b in banks} == {"muse", "classic"}

    muse = next(b for b in banks if b["name"] == "muse")
    muse_patches = client.get(f"/api/catalog/banks/{muse['id']}/patches").json()
    assert len(muse_patches) == 3
    assert all(p["bank"] == "muse" for p in muse_patches)

    again = client.post("/api/catalog/import", json={"root_dir": str(sample_library), "library": "Library"})
    assert again.json() == []


def test_import_without_directory(client):
    response = client.post("/api/catalog/import", json={})
    assert response.status_code == 200
    assert response.json() == []


def test_import_missing_directory(client, tmp_path):
    response = client.post("/api/catalog/import", json={"root_dir": str(tmp_path / "nope")})
    assert response.status_code == 404


def test_update_and_filter(client, sample_library):
    client.post("/api/catalog/import", json={"root_dir": str(sample_library), "library": "Library"})
    path = os.path.join(str(sample_library), "library/bank01/patch01/vox humana.mmp")

    response = client.patch(
        "/api/catalog/patches",
        params={"path": path},
        json={"loved": True, "category": "Choir"},
    )
    assert response.status_code == 200
    assert response.json() == {"success": True, "updated": True}

    loved = client.get("/api/catalog/patches", params={"loved": True}).json()
    assert [p["name"] for p in loved] == ["vox humana"]
    assert loved[0]["category"] == "Choir"
    assert loved[0]["tags"] == ["muse"]

    by_bank = client.get("/api/catalog/patches", params={"bank": "classic"}).json()
    assert [p["name"] for p in by_bank] == ["moog 55 strings"]


def test_update_unknown_patch(client):
    response = client.patch("/api/catalog/patches", params={"path": "/missing.mmp"}, json={"loved": True})
    assert response.status_code == 200
    assert response.json()["updated"] is False


def test_update_rejects_unknown_field(client):
    response = client.patch("/api/catalog/patches", params={"path": "/x.mmp"}, json={"checksum": "abc"})
    assert response.status_code == 422


def test_export(client, sample_library, tmp_path):
    source = os.path.join(str(sample_library), "library/bank02/patch01/moog 55 strings.mmp")
    destination = tmp_path / "exported"

    response = client.post("/api/catalog/export", json={"paths": [source], "destination": str(destination)})

    assert response.status_code == 200
    assert response.json()["files"] == [str(destination / "bank00" / "patch00.mmp")]


def test_stats(client, sample_library):
    client.post("/api/catalog/import", json={"root_dir": str(sample_library), "library": "Library"})
    stats = client.get("/api/catalog/stats").json()
    assert stats["total_patches"] == 4
    assert stats["total_banks"] == 2
    assert stats["by_library"] == {"Library": 4}


def test_facets(client, sample_library):
    client.post("/api/catalog/import", json={"root_dir": str(sample_library), "library": "Library"})

    response = client.get("/api/catalog/facets")

    assert response.status_code == 200
    assert response.json() == {
        "categories": [],
        "tags": ["classic", "muse"],
        "banks": ["classic", "muse"],
        "libraries": ["Library"],
    }
