import importlib.util
import json
from pathlib import Path

import pytest
import requests

ROOT = Path(__file__).resolve().parents[1]
SCRIPT = ROOT / "scripts" / "register_equipment.py"


@pytest.fixture()
def cli():
    spec = importlib.util.spec_from_file_location("register_equipment", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class FakeResponse:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self._payload = payload
        self.text = json.dumps(payload)

    def json(self):
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code}", response=self)


class FakeSession:
    def __init__(self, listing, created=None, create_status=201):
        self.listing = listing
        self.created = created or {}
        self.create_status = create_status
        self.calls = []

    def get(self, url, headers=None, params=None, timeout=None):
        self.calls.append(("GET", url, headers, params))
        return FakeResponse(200, self.listing)

    def post(self, url, headers=None, json=None, timeout=None):
        self.calls.append(("POST", url, headers, json))
        return FakeResponse(self.create_status, self.created)


def test_existing_item_is_reported(cli, monkeypatch, capsys):
    session = FakeSession([{"id": 3, "name": "Stihl Chainsaw", "equipment_code": "EQ003"}])
    monkeypatch.setattr(cli.requests, "Session", lambda: session)

    code = cli.main(["stihl chainsaw", "--token", "abc"])

    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert out["status"] == "exists"
    assert out["record"]["equipment_code"] == "EQ003"
    assert [call[0] for call in session.calls] == ["GET"]
    assert session.calls[0][2]["Authorization"] == "Bearer abc"


def test_missing_item_is_created(cli, monkeypatch, capsys):
    session = FakeSession([], created={"id": 9, "name": "Shop Vac", "equipment_code": "EQ009"})
    monkeypatch.setattr(cli.requests, "Session", lambda: session)
    monkeypatch.setenv("EQTRACKER_TOKEN", "from-env")

    code = cli.main(["Shop Vac", "-c", "Cleaning", "-l", "Shed", "--base-url", "http://tracker/api/v1/"])

    assert code == 0
    method, url, headers, payload = session.calls[-1]
    assert method == "POST"
    assert url == "http://tracker/api/v1/equipment"
    assert headers["Authorization"] == "Bearer from-env"
    assert payload == {"name": "Shop Vac", "category": "Cleaning", "location": "Shed"}
    assert json.loads(capsys.readouterr().out)["status"] == "created"


def test_create_failure_is_a_network_error_exit(cli, monkeypatch, capsys):
    session = FakeSession([], created={"code": "forbidden", "message": "nope"}, create_status=403)
    monkeypatch.setattr(cli.requests, "Session", lambda: session)

    assert cli.main(["Ladder", "--token", "t"]) == 2
    assert "Create failed (403)" in capsys.readouterr().err
