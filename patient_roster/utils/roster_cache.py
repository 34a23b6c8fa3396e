"""On-disk cache of the resolved roster."""

import logging
from pathlib import Path

import pandas as pd

from ..core.columns import (
    BIRTH_PART_COLUMNS,
    BIRTHDATE_IS_ESTIMATED,
    HEALTH_FLAG_COLUMNS,
)
from .site_loader import parse_flag

logger = logging.getLogger(__name__)


class RosterCache:
    """Saves and reloads the resolved roster as Parquet or CSV."""

    def __init__(self, cache_path: Path):
        """
        Initialize cache.

        Args:
            cache_path: Cache file; a .csv suffix selects CSV, anything else Parquet
        """
        self.cache_path = Path(cache_path)

    @property
    def is_csv(self) -> bool:
        return self.cache_path.suffix.lower() == ".csv"

    def exists(self) -> bool:
        return self.cache_path.exists()

    def save(self, roster: pd.DataFrame) -> None:
        """Write the roster, creating parent directories."""
        self.cache_path.parent.mkdir(parents=True, exist_ok=True)

        if self.is_csv:
            roster.to_csv(self.cache_path, index=False, na_rep="")
        else:
            roster.to_parquet(self.cache_path, index=False)

        logger.info(f"Saved roster ({len(roster)} patients) to cache at {self.cache_path}")

    def load(self) -> pd.DataFrame:
        """
        Read the cached roster.

        Identifier columns always come back as strings, so identifiers such
        as "001-000020" and the UUIDs derived from them survive unchanged.
        """
        if not self.exists():
            raise FileNotFoundError(f"Roster cache not found: {self.cache_path}")

        if self.is_csv:
            roster = pd.read_csv(self.cache_path, dtype=str, keep_default_na=False)
            roster = self._restore_csv_types(roster)
        else:
            roster = pd.read_parquet(self.cache_path)

        logger.info(f"Using cached patient data at {self.cache_path}")
        return roster

    @staticmethod
    def _restore_csv_types(roster: pd.DataFrame) -> pd.DataFrame:
        """Re-type the non-text columns of a CSV-loaded roster."""
        for col in HEALTH_FLAG_COLUMNS:
            if col in roster.columns:
                roster[col] = pd.array(
                    [parse_flag(v) if v != "" else pd.NA for v in roster[col]],
                    dtype="boolean",
                )

        for col in BIRTH_PART_COLUMNS:
            if col in roster.columns:
                roster[col] = pd.to_numeric(roster[col], errors="coerce").astype("Int64")

        if BIRTHDATE_IS_ESTIMATED in roster.columns:
            roster[BIRTHDATE_IS_ESTIMATED] = roster[BIRTHDATE_IS_ESTIMATED] == "True"

        return roster
