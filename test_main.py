from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Dict, List
import pytest
from fastapi.testclient import TestClient

import main
from main import app, get_listings


CATALOG: List[Dict[str, Any]] = [
    {"id": "l1", "location_id": "loc1", "length": 20, "width": 10, "price_in_cents": 100},
    {"id": "l2", "location_id": "loc1", "length": 30, "width": 15, "price_in_cents": 200},
    {"id": "l3", "location_id": "loc1", "length": 10, "width": 10, "price_in_cents": 50},
    {"id": "l4", "location_id": "loc2", "length": 40, "width": 20, "price_in_cents": 300},
    {"id": "l5", "location_id": "loc2", "length": 10, "width": 10, "price_in_cents": 75},
]


@pytest.fixture
def client():
    app.dependency_overrides[get_listings] = lambda: CATALOG
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_root_reports_catalog_size(client: TestClient) -> None:
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"message": "ok", "listings": 5}


def test_post_returns_locations_cheapest_first(client: TestClient) -> None:
    response = client.post("/", json=[{"length": 10, "quantity": 1}, {"length": 30, "quantity": 1}])

    assert response.status_code == 200
    assert response.json() == [
        {"location_id": "loc1", "listing_ids": ["l3", "l2"], "total_price_in_cents": 250},
        {"location_id": "loc2", "listing_ids": ["l5", "l4"], "total_price_in_cents": 375},
    ]


def test_post_no_fit_returns_empty_list(client: TestClient) -> None:
    response = client.post("/", json=[{"length": 50, "quantity": 1}])

    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.parametrize("body", [
    [{"length": "long", "quantity": 1}],
    [{"length": 10}],
    [{"length": 0, "quantity": 1}],
    [{"length": 10, "quantity": -1}],
    {"length": 10, "quantity": 1},
])
def test_post_invalid_body_is_rejected(client: TestClient, body: Any) -> None:
    response = client.post("/", json=body)

    assert response.status_code == 400
    assert response.json() == {"detail": "invalid request"}


def test_post_malformed_json_is_rejected(client: TestClient) -> None:
    response = client.post("/", content=b"[{", headers={"Content-Type": "application/json"})

    assert response.status_code == 400


def test_lifespan_loads_catalog(tmp_path: Path, monkeypatch: Any) -> None:
    path = tmp_path / "listings.json"
    path.write_text(json.dumps(CATALOG[:2]), encoding="utf-8")
    monkeypatch.setattr(main, "LISTINGS_PATH", str(path))

    with TestClient(app) as client:
        response = client.get("/")

    assert response.json() == {"message": "ok", "listings": 2}
