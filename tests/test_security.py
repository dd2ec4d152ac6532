import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATA_DIR", str(ROOT / "data"))

from eqtracker.core.config import AppSettings
from eqtracker.core.security import decode_token, hash_password, issue_token_pair, verify_password


def test_password_hash_round_trip():
    hashed = hash_password("hunter2")
    assert hashed != "hunter2"
    assert verify_password("hunter2", hashed)
    assert not verify_password("hunter3", hashed)
    assert not verify_password("hunter2", None)
    assert not verify_password("hunter2", "not-a-bcrypt-hash")


def test_token_pair_carries_member_and_role():
    pair = issue_token_pair(12, role="chair")

    access = decode_token(pair.access_token, verify_type="access")
    assert access.user_id == 12
    assert access.role == "chair"
    assert decode_token(pair.refresh_token, verify_type="refresh").typ == "refresh"

    with pytest.raises(ValueError):
        decode_token(pair.refresh_token, verify_type="access")
    with pytest.raises(ValueError):
        decode_token(pair.access_token + "tampered")


def test_settings_parse_env(monkeypatch):
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example,")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("DATABASE_URL", "sqlite:///tmp/club.db")

    configured = AppSettings()

    assert configured.allowed_origins == ["https://a.example", "https://b.example"]
    assert configured.LOG_LEVEL == "DEBUG"
    assert configured.database_url == "sqlite:///tmp/club.db"
    assert configured.MAINTENANCE_LOOKAHEAD_DAYS == 14
