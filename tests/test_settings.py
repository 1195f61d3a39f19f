"""Configuration settings behaviour tests."""

from __future__ import annotations

import pytest

from config import Settings


def test_defaults_point_at_animeunity() -> None:
    settings = Settings(_env_file=None)

    assert settings.base_url == "https://www.animeunity.so"
    assert settings.request_timeout == 30.0
    assert settings.log_level == "INFO"


def test_base_url_is_normalised() -> None:
    settings = Settings(_env_file=None, ANIMEUNITY_BASE_URL=" https://www.animeunity.to/ ", LOG_LEVEL="debug")

    assert settings.base_url == "https://www.animeunity.to"
    assert settings.log_level == "DEBUG"


def test_relative_base_url_is_rejected() -> None:
    with pytest.raises(ValueError, match="absolute http"):
        Settings(_env_file=None, ANIMEUNITY_BASE_URL="animeunity.so")


def test_timeout_must_be_positive() -> None:
    with pytest.raises(ValueError):
        Settings(_env_file=None, REQUEST_TIMEOUT=0)


def test_unknown_log_level_is_rejected() -> None:
    with pytest.raises(ValueError, match="logging level"):
        Settings(_env_file=None, LOG_LEVEL="verbose")
