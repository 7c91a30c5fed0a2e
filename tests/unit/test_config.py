"""Tests for Settings validation and derived paths."""

import pytest
from pydantic import ValidationError

from stash.core.config import Settings
from stash.domain.enums import IdStrategy


def test_defaults() -> None:
    settings = Settings(_env_file=None)
    assert settings.port == 40115
    assert settings.default_id_strategy is IdStrategy.RANDOM
    assert settings.credentials_file.name == "auth.json"
    assert settings.resources_file.name == "data.json"


def test_s3_requires_bucket() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, storage_backend="s3")


def test_unknown_backend_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, storage_backend="ftp")


def test_unknown_id_strategy_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, resource_id_type="emoji")


def test_id_strategy_from_env(monkeypatch) -> None:
    monkeypatch.setenv("RESOURCE_ID_TYPE", "zws")
    assert Settings(_env_file=None).default_id_strategy is IdStrategy.ZWS
