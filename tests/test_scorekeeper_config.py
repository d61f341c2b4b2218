"""Tests for TOML-based scorekeeper config loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from domain.scoreboards.config import (
    DEFAULT_DB_URL,
    DEFAULT_TOP_N,
    ScorekeeperConfig,
    load_scorekeeper_config,
)


def test_load_config_from_file(tmp_path: Path) -> None:
    config_path = tmp_path / "scorekeeper.toml"
    config_path.write_text(
        """
[engine]
k_factor = 24.0
scale_factor = 420.0
initial_elo = 1200
top_n = 10

[store]
db_url = "sqlite:///league.db"
""".strip()
    )

    config = load_scorekeeper_config(config_path)

    assert config.elo.k_factor == pytest.approx(24.0)
    assert config.elo.scale_factor == pytest.approx(420.0)
    assert config.elo.initial_elo == 1200
    assert config.top_n == 10
    assert config.db_url == "sqlite:///league.db"
    assert config.file_path == config_path
    assert config.as_config_json()["k_factor"] == pytest.approx(24.0)


def test_defaults_when_sections_omitted(tmp_path: Path) -> None:
    config_path = tmp_path / "empty.toml"
    config_path.write_text("")

    config = load_scorekeeper_config(config_path)

    assert config.elo.k_factor == pytest.approx(32.0)
    assert config.elo.scale_factor == pytest.approx(400.0)
    assert config.elo.initial_elo == 1500
    assert config.top_n == DEFAULT_TOP_N
    assert config.db_url == DEFAULT_DB_URL


def test_default_config_matches_file_defaults() -> None:
    config = ScorekeeperConfig()
    assert config.elo.k_factor == pytest.approx(32.0)
    assert config.top_n == 5


@pytest.mark.parametrize(
    ("body", "message"),
    [
        ("[engine]\nk_factor = 0.0", r"\[engine\]\.k_factor must be > 0"),
        ("[engine]\nscale_factor = -1.0", r"\[engine\]\.scale_factor must be > 0"),
        ("[engine]\ninitial_elo = 0", r"\[engine\]\.initial_elo must be > 0"),
        ("[engine]\ntop_n = 0", r"\[engine\]\.top_n must be > 0"),
        ('[store]\ndb_url = "  "', r"\[store\]\.db_url is required"),
    ],
)
def test_invalid_values_raise_validation_error(tmp_path: Path, body: str, message: str) -> None:
    config_path = tmp_path / "invalid.toml"
    config_path.write_text(body)

    with pytest.raises(ValueError, match=message):
        load_scorekeeper_config(config_path)


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="Config file not found"):
        load_scorekeeper_config(tmp_path / "missing.toml")
