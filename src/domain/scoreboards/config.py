"""Load scorekeeper settings from a TOML file."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
import tomllib

from domain.ratings.elo.calculator import EloParameters

DEFAULT_DB_URL = "sqlite:///scoreboards.db"
DEFAULT_TOP_N = 5


@dataclass(frozen=True)
class ScorekeeperConfig:
    """Engine and store settings."""

    elo: EloParameters = field(default_factory=EloParameters)
    top_n: int = DEFAULT_TOP_N
    db_url: str = DEFAULT_DB_URL
    file_path: Path | None = None

    def as_config_json(self) -> dict[str, Any]:
        return {
            "k_factor": self.elo.k_factor,
            "scale_factor": self.elo.scale_factor,
            "initial_elo": self.elo.initial_elo,
            "top_n": self.top_n,
            "db_url": self.db_url,
        }


def load_scorekeeper_config(file_path: Path) -> ScorekeeperConfig:
    """Load and validate one TOML config file."""
    if not file_path.exists():
        raise FileNotFoundError(f"Config file not found: {file_path}")
    if not file_path.is_file():
        raise IsADirectoryError(f"Config path is not a file: {file_path}")

    with file_path.open("rb") as file:
        raw = tomllib.load(file)
    return _parse_scorekeeper_config(raw, file_path)


def _parse_scorekeeper_config(raw: dict[str, Any], file_path: Path) -> ScorekeeperConfig:
    engine_raw = raw.get("engine", {})
    store_raw = raw.get("store", {})

    elo = EloParameters(
        initial_elo=int(engine_raw.get("initial_elo", 1500)),
        k_factor=float(engine_raw.get("k_factor", 32.0)),
        scale_factor=float(engine_raw.get("scale_factor", 400.0)),
    )
    top_n = int(engine_raw.get("top_n", DEFAULT_TOP_N))
    db_url = str(store_raw.get("db_url", DEFAULT_DB_URL)).strip()

    _validate(file_path=file_path, elo=elo, top_n=top_n, db_url=db_url)
    return ScorekeeperConfig(elo=elo, top_n=top_n, db_url=db_url, file_path=file_path)


def _validate(*, file_path: Path, elo: EloParameters, top_n: int, db_url: str) -> None:
    if elo.initial_elo <= 0:
        raise ValueError(f"{file_path}: [engine].initial_elo must be > 0")
    if elo.k_factor <= 0.0:
        raise ValueError(f"{file_path}: [engine].k_factor must be > 0")
    if elo.scale_factor <= 0.0:
        raise ValueError(f"{file_path}: [engine].scale_factor must be > 0")
    if top_n <= 0:
        raise ValueError(f"{file_path}: [engine].top_n must be > 0")
    if not db_url:
        raise ValueError(f"{file_path}: [store].db_url is required")


__all__ = ["DEFAULT_DB_URL", "DEFAULT_TOP_N", "ScorekeeperConfig", "load_scorekeeper_config"]
