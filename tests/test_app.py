"""Tests for the in-memory server endpoints."""

from __future__ import annotations

from pathlib import Path

import pytest

from menu_editor import app as server
from menu_editor.store import MenuStore

DOCUMENT = {
    "menu": {
        "main": [
            {"_uid": "item-1", "name": "A", "identifier": "a", "weight": 5},
            {"_uid": "item-2", "name": "B", "identifier": "b", "parent": "a"},
        ]
    },
    "lang": "en",
}


@pytest.fixture
def client():
    server.STORE.clear()
    server.app.config["TESTING"] = True
    with server.app.test_client() as test_client:
        yield test_client
    server.STORE.clear()


def test_get_returns_skeleton_when_empty(client):
    response = client.get("/menu-data")
    assert response.status_code == 200
    assert response.get_json() == {"menu": {"main": []}}


def test_post_then_get_returns_document_verbatim(client):
    response = client.post("/menu-data", json=DOCUMENT)
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok", "items": 2}
    assert client.get("/menu-data").get_json() == DOCUMENT


@pytest.mark.parametrize(
    "payload",
    [{"menu": {}}, {"menu": {"main": "nope"}}, ["not", "a", "mapping"], {"other": 1}],
)
def test_post_rejects_bad_shape(client, payload):
    response = client.post("/menu-data", json=payload)
    assert response.status_code == 400
    assert "error" in response.get_json()
    assert server.STORE.is_empty()


def test_post_rejects_non_json(client):
    response = client.post("/menu-data", data="menu: yaml", content_type="text/plain")
    assert response.status_code == 400


def test_download_strips_keys(client):
    client.post("/menu-data", json=DOCUMENT)
    response = client.get("/download-yaml")
    assert response.status_code == 200
    assert response.mimetype == "text/yaml"
    assert "main.en.yaml" in response.headers["Content-Disposition"]
    text = response.get_data(as_text=True)
    assert "_uid" not in text
    assert "identifier: b" in text
    assert "lang: en" in text


def test_download_without_data_is_404(client):
    response = client.get("/download-yaml")
    assert response.status_code == 404
    assert "error" in response.get_json()


def test_reset_clears_store(client):
    client.post("/menu-data", json=DOCUMENT)
    assert client.post("/reset").get_json() == {"status": "ok"}
    assert client.get("/menu-data").get_json() == {"menu": {"main": []}}
    assert client.get("/download-yaml").status_code == 404


def test_menu_tree_is_derived_from_store(client):
    client.post("/menu-data", json=DOCUMENT)
    payload = client.get("/menu-tree").get_json()
    assert payload["count"] == 2
    (root,) = payload["tree"]
    assert root["_uid"] == "item-1"
    assert [child["name"] for child in root["children"]] == ["B"]
    assert payload["integrity"]["clean"] is True
    # Deriving the tree does not write keys back.
    assert client.get("/menu-data").get_json() == DOCUMENT


def test_menu_tree_reports_findings(client):
    client.post(
        "/menu-data",
        json={"menu": {"main": [{"name": "X", "identifier": "x"}, {"name": "X", "identifier": "x"}, {"name": "Y"}]}},
    )
    integrity = client.get("/menu-tree").get_json()["integrity"]
    assert integrity["duplicates"][0]["are_byte_identical"] is True
    assert [e["name"] for e in integrity["missing_identifiers"]] == ["Y"]


def test_health_and_index(client):
    health = client.get("/health").get_json()
    assert health["status"] == "ok"
    assert health["stored"] is False

    client.post("/menu-data", json=DOCUMENT)
    page = client.get("/")
    assert page.status_code == 200
    body = page.get_data(as_text=True)
    assert 'data-uid="item-1"' in body
    assert 'data-uid="item-2"' in body


def test_seed_store_from_file(tmp_path: Path, scenario_yaml):
    path = tmp_path / "main.en.yaml"
    path.write_text(scenario_yaml, encoding="utf-8")
    store = MenuStore()
    assert server._seed_store(store, path) is True
    data = store.get()
    assert [item["name"] for item in data["menu"]["main"]] == ["A", "B", "B2"]
    assert "_uid" not in data["menu"]["main"][0]


def test_seed_store_skips_missing_or_bad_files(tmp_path: Path):
    store = MenuStore()
    assert server._seed_store(store, None) is False
    assert server._seed_store(store, tmp_path / "absent.yaml") is False
    bad = tmp_path / "bad.yaml"
    bad.write_text("menu: nope\n", encoding="utf-8")
    assert server._seed_store(store, bad) is False
    assert store.is_empty()


def test_views_tolerate_sequence_and_mapping_link_values(client):
    client.post(
        "/menu-data",
        json={"menu": {"main": [
            {"name": "A", "identifier": ["a", "b"]},
            {"name": "B", "identifier": "b", "parent": {"x": 1}},
        ]}},
    )
    response = client.get("/menu-tree")
    assert response.status_code == 200
    payload = response.get_json()
    assert payload["count"] == 2
    assert [node["name"] for node in payload["tree"]] == ["A", "B"]
    assert [e["name"] for e in payload["integrity"]["missing_identifiers"]] == ["A"]
    assert [e["name"] for e in payload["integrity"]["unresolved_parents"]] == ["B"]

    page = client.get("/")
    assert page.status_code == 200
    assert "Unknown parent" in page.get_data(as_text=True)
