"""Unit tests for configuration helpers."""

from __future__ import annotations

from datetime import timedelta

import pytest

from marketplace.core.config import (
    PLACEHOLDER_JWT_KEY,
    BaseConfig,
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    check_config,
    env_bool,
    env_duration,
    get_config,
    parse_duration,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("90", timedelta(seconds=90)),
        ("15m", timedelta(minutes=15)),
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("720h", timedelta(days=30)),
        ("2d", timedelta(days=2)),
        ("500ms", timedelta(milliseconds=500)),
        (" 1H ", timedelta(hours=1)),
    ],
)
def test_parse_duration(raw, expected):
    assert parse_duration(raw) == expected


@pytest.mark.parametrize("raw", ["", "abc", "10x", "h1", "0", "0s", "1h 30"])
def test_parse_duration_rejects_bad_values(raw):
    with pytest.raises(ValueError):
        parse_duration(raw)


def test_env_duration_falls_back_on_garbage(monkeypatch):
    monkeypatch.setenv("SOME_TTL", "forever")
    assert env_duration("SOME_TTL", timedelta(hours=1)) == timedelta(hours=1)
    monkeypatch.setenv("SOME_TTL", "2h")
    assert env_duration("SOME_TTL", timedelta(hours=1)) == timedelta(hours=2)


@pytest.mark.parametrize(("raw", "expected"), [("1", True), ("Yes", True), ("off", False)])
def test_env_bool(monkeypatch, raw, expected):
    monkeypatch.setenv("SOME_FLAG", raw)
    assert env_bool("SOME_FLAG") is expected


def test_jwt_algorithm_is_pinned():
    assert BaseConfig.JWT_ALGORITHM == "HS256"
    assert BaseConfig.JWT_DECODE_ALGORITHMS == [BaseConfig.JWT_ALGORITHM]


@pytest.mark.parametrize(
    ("name", "cls"),
    [("production", ProductionConfig), ("testing", TestingConfig), ("bogus", DevelopmentConfig)],
)
def test_get_config_selects_by_app_env(monkeypatch, name, cls):
    monkeypatch.setenv("APP_ENV", name)
    assert get_config() is cls


def test_check_config_refuses_placeholder_key_in_production():
    with pytest.raises(RuntimeError, match="JWT_SECRET_KEY"):
        check_config({"DEBUG": False, "TESTING": False, "JWT_SECRET_KEY": PLACEHOLDER_JWT_KEY})


def test_check_config_allows_placeholder_in_debug():
    check_config({"DEBUG": True, "JWT_SECRET_KEY": PLACEHOLDER_JWT_KEY})
    check_config({"DEBUG": False, "JWT_SECRET_KEY": "a-real-key"})
