import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import main
from collectors import Community
from community_protocol import GameState, encode_game_state
from errors import TransportError


@pytest.fixture
def client(fake_gateway, monkeypatch):
    monkeypatch.setattr(main.channel, "gateway", fake_gateway)
    return TestClient(main.app)


def advert(state: GameState) -> list[Community]:
    counter, position = encode_game_state(state)
    return [Community(65000, 0), Community(main.config.marker_as, counter), Community(main.config.marker_as, position)]


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["marker_as"] == main.config.marker_as


def test_read_state(client, fake_gateway):
    fake_gateway.queue(advert(GameState(1, 3, 7, 1)))
    resp = client.get("/api/state")
    assert resp.status_code == 200
    body = resp.json()
    assert (body["move_counter"], body["x"], body["y"], body["outcome"]) == (1, 3, 7, 1)
    assert body["outcome_label"] == "hit"
    assert fake_gateway.fetched == [main.config.prefix]


def test_read_incomplete_is_409(client, fake_gateway):
    fake_gateway.queue([Community(main.config.marker_as, 0x4001)])
    resp = client.get("/api/state")
    assert resp.status_code == 409
    detail = resp.json()["detail"]
    assert detail["code"] == "incomplete_state"
    assert detail["retryable"] is True
    assert detail["missing"] == ["position"]


def test_read_invalid_is_422(client, fake_gateway):
    fake_gateway.queue([Community(main.config.marker_as, 0xC000)])
    resp = client.get("/api/state")
    assert resp.status_code == 422
    assert resp.json()["detail"]["code"] == "invalid_type"


def test_read_duplicate_is_422(client, fake_gateway):
    fake_gateway.queue([Community(main.config.marker_as, 0x8000)] * 2)
    resp = client.get("/api/state")
    assert resp.status_code == 422
    assert resp.json()["detail"]["code"] == "duplicate_fragment"


def test_read_transport_is_502(client, fake_gateway):
    fake_gateway.queue(TransportError("unable to connect to bird"))
    resp = client.get("/api/state")
    assert resp.status_code == 502
    assert resp.json()["detail"]["code"] == "transport_error"


def test_publish_state(client, fake_gateway):
    resp = client.post("/api/state", json={"move_counter": 1, "x": 3, "y": 7, "outcome": 0})
    assert resp.status_code == 200
    body = resp.json()
    assert body["counter_community"] == 16385
    assert body["position_community"] == 35952
    assert body["communities"] == [f"({main.config.marker_as},16385)", f"({main.config.marker_as},35952)"]
    assert fake_gateway.published == [(main.config.marker_as, 16385, 35952)]


def test_publish_out_of_range_rejected(client, fake_gateway):
    resp = client.post("/api/state", json={"move_counter": 1, "x": 16, "y": 7, "outcome": 0})
    assert resp.status_code == 422
    assert fake_gateway.published == []


def test_publish_move_increments(client, fake_gateway):
    resp = client.post("/api/move", json={"previous_counter": 16383, "x": 2, "y": 2, "outcome": 2})
    assert resp.status_code == 200
    assert resp.json()["move_counter"] == 0


def test_publish_transport_error(client, fake_gateway):
    fake_gateway.publish_error = TransportError("configure failed", reply_code=8002)
    resp = client.post("/api/state", json={"move_counter": 1, "x": 3, "y": 7})
    assert resp.status_code == 502


def test_reset(client, fake_gateway):
    resp = client.post("/api/reset")
    assert resp.status_code == 200
    assert fake_gateway.resets == 1
