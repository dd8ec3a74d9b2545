# File: backend/tests/test_api_forest.py
# Version: v0.1.1
"""Smoke tests for the forest render / layout / analysis endpoints and params defaults."""
from fastapi.testclient import TestClient

from backend.app.main import app

client = TestClient(app)

FOREST = {
    "pruning_threshold": 0.5,
    "neighbor_threshold": 0.1,
    "trees": [
        {"id": 7, "value": 10.0, "children": [
            {"id": 5, "value": 5.0, "children": [
                {"id": 6, "value": 4.0, "children": [{"id": 1, "value": 0.0}, {"id": 2, "value": 1.0}]},
                {"id": 3, "value": 2.0},
            ]},
            {"id": 4, "value": 3.0},
        ]},
        {"id": 9, "value": 1.5},
    ],
}


def test_render_returns_eps():
    res = client.post("/api/forest/render", json={"forest": FOREST, "generated_at": "2024-05-01T12:30:00"})
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("application/postscript")
    assert res.text.startswith("%!PS-Adobe-3.0 EPSF-3.0\n%%BoundingBox: 0 0 612 767\n")
    assert "(Barrier forest generated 2024-05-01 12:30:00) show" in res.text
    assert "(Structurer: WeightStructurer, Colorer: FixedColorer) show" in res.text

    again = client.post("/api/forest/render", json={"forest": FOREST, "generated_at": "2024-05-01T12:30:00"})
    assert again.text == res.text


def test_layout_positions_and_structuring():
    res = client.post("/api/forest/layout", json={"forest": FOREST})
    assert res.status_code == 200
    data = res.json()
    assert data["swaps"] == 2  # root (3 vs 1) and node 5 (2 vs 1)
    assert data["columns"] == [[87, 487], [487, 587]]
    assert data["scale"]["top"] == 652 and data["scale"]["bottom"] == 50

    root = data["forest"]["trees"][0]
    left, right = root["children"]
    assert left["weight"] <= right["weight"]
    assert left["x"] < root["x"] < right["x"]
    assert root["y"] == 652
    assert data["forest"]["measures"]["leaves"] == 5


def test_layout_without_header_uses_full_height():
    res = client.post("/api/forest/layout", json={"forest": FOREST, "add_header": False})
    assert res.status_code == 200
    assert res.json()["scale"]["top"] == 742


def test_analysis_endpoint():
    res = client.post("/api/forest/analysis", json={"forest": FOREST, "structurer": "value"})
    assert res.status_code == 200
    data = res.json()
    assert data["forest"]["trees"] == 2
    assert data["forest"]["minimum_value"] == 0.0
    assert data["trees"][0]["depth"] == 3
    assert data["trees"][1]["leaves"] == 1
    assert "neighbors" not in data


def test_malformed_forest_is_422():
    bad = {"trees": [{"id": 1, "value": 0.0, "children": [{"id": 2, "value": 9.0}, {"id": 3, "value": 0.0}]}]}
    res = client.post("/api/forest/render", json={"forest": bad})
    assert res.status_code == 422

    res = client.post("/api/forest/layout", json={"forest": FOREST, "structurer": "nope"})
    assert res.status_code == 422

    res = client.post("/api/forest/layout", json={"forest": FOREST, "color": [2.0, 0.0, 0.0]})
    assert res.status_code == 422


def test_params_defaults():
    res = client.get("/api/params/defaults")
    assert res.status_code == 200
    cfg = res.json()["analysis"]
    assert cfg["neighborhood"]["metric"] == "angle_difference"
    assert cfg["structurer"] == "weight"
    assert "rmsd_angle_difference" in cfg["known"]["metrics"]


def test_healthz():
    assert client.get("/healthz").json() == {"status": "ok"}


def test_non_finite_and_ill_typed_forests_are_422():
    nan_root = {"trees": [{"id": 3, "value": "nan", "children": [
        {"id": 1, "value": 0.0}, {"id": 2, "value": 1.0},
    ]}]}
    assert client.post("/api/forest/render", json={"forest": nan_root}).status_code == 422
    assert client.post("/api/forest/layout", json={"forest": nan_root}).status_code == 422

    null_threshold = dict(FOREST, pruning_threshold=None)
    assert client.post("/api/forest/render", json={"forest": null_threshold}).status_code == 422

    dict_children = {"trees": [{"id": 1, "value": 0.0, "children": {"id": 2, "value": 0.0}}]}
    assert client.post("/api/forest/analysis", json={"forest": dict_children}).status_code == 422
