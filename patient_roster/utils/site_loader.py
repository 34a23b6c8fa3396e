"""
Loading of per-site clinic extracts.

Each subdirectory of the input directory is one clinic site holding
Pacientes.csv, Comunidades.csv and optionally Consultas.csv. Rows are tagged
with the site's directory name.
"""

import logging
from pathlib import Path
from typing import List

import pandas as pd

from ..core.columns import (
    BIRTH_PART_COLUMNS,
    COMMUNITY_CODE_COLUMN,
    COMMUNITY_ID_COLUMN,
    HEALTH_FLAG_COLUMNS,
    RAW_PATIENT_COLUMNS,
    TEXT_COLUMNS,
)

logger = logging.getLogger(__name__)

TRUE_VALUES = {"1", "-1", "true", "t", "yes", "y", "si", "sí", "verdadero", "v"}
FALSE_VALUES = {"0", "false", "f", "no", "n", "falso"}


def parse_flag(value):
    """
    Parse an exported yes/no value.

    Returns:
        True, False, or pd.NA when missing or unrecognized
    """
    if value is None or (not isinstance(value, bool) and pd.isna(value)):
        return pd.NA
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text.endswith(".0"):
        text = text[:-2]
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    return pd.NA


def standardize_patient_columns(df: pd.DataFrame) -> pd.DataFrame:
    """
    Rename raw extract columns and coerce their types.

    Text columns become stripped strings with "" for missing values, health
    flags become nullable booleans, birth parts become nullable integers.

    Args:
        df: Raw patient rows tagged with a site column

    Returns:
        DataFrame with internal column names
    """
    df = df.rename(columns=RAW_PATIENT_COLUMNS)

    for col in TEXT_COLUMNS:
        if col in df.columns:
            df[col] = df[col].fillna("").astype(str).str.strip()
        else:
            df[col] = ""

    for col in HEALTH_FLAG_COLUMNS:
        if col in df.columns:
            df[col] = pd.array([parse_flag(v) for v in df[col]], dtype="boolean")
        else:
            df[col] = pd.array([pd.NA] * len(df), dtype="boolean")

    for col in BIRTH_PART_COLUMNS:
        if col in df.columns:
            numbers = pd.to_numeric(df[col], errors="coerce")
            df[col] = numbers.where(numbers == numbers.round()).astype("Int64")
        else:
            df[col] = pd.array([pd.NA] * len(df), dtype="Int64")

    return df


class SiteLoader:
    """Reads clinic site extracts with consistent settings."""

    PATIENTS_FILE = "Pacientes.csv"
    COMMUNITIES_FILE = "Comunidades.csv"
    CONSULTS_FILE = "Consultas.csv"

    @staticmethod
    def read_csv(file_path: Path) -> pd.DataFrame:
        """
        Read an extract CSV with every column as text.

        Args:
            file_path: Path to CSV file

        Returns:
            DataFrame with CSV contents
        """
        if not file_path.exists():
            raise FileNotFoundError(f"CSV file not found: {file_path}")

        return pd.read_csv(file_path, dtype=str, keep_default_na=True)

    @staticmethod
    def site_dirs(input_dir: Path) -> List[Path]:
        """Return site directories sorted by name."""
        input_dir = Path(input_dir)
        if not input_dir.is_dir():
            raise FileNotFoundError(f"Input directory not found: {input_dir}")

        dirs = sorted(d for d in input_dir.iterdir() if d.is_dir())
        if not dirs:
            raise ValueError(f"No site directories found in {input_dir}")
        return dirs

    @classmethod
    def load_site_patients(cls, site_dir: Path) -> pd.DataFrame:
        """
        Load one site's patients with community names denormalized.

        Patients whose community code is not in Comunidades.csv are dropped.

        Args:
            site_dir: Site directory

        Returns:
            Raw patient rows with Comunidades and site columns
        """
        patients = cls.read_csv(site_dir / cls.PATIENTS_FILE)
        communities = cls.read_csv(site_dir / cls.COMMUNITIES_FILE)

        communities = communities.rename(
            columns={COMMUNITY_ID_COLUMN: COMMUNITY_CODE_COLUMN}
        )
        if communities[COMMUNITY_CODE_COLUMN].duplicated().any():
            logger.warning(f"Duplicate community codes in {site_dir.name}; keeping first")
            communities = communities.drop_duplicates(COMMUNITY_CODE_COLUMN)

        # Left join keeps extract row order; unmatched rows are then dropped
        merged = patients.merge(
            communities, on=COMMUNITY_CODE_COLUMN, how="left", indicator=True
        )
        merged = merged[merged["_merge"] == "both"].drop(columns="_merge")
        merged = merged.reset_index(drop=True)
        if len(merged) < len(patients):
            logger.warning(
                f"{len(patients) - len(merged)} patients in {site_dir.name} "
                f"have an unknown community code"
            )

        merged["site"] = site_dir.name
        return merged

    @classmethod
    def load_sites(cls, input_dir: Path) -> pd.DataFrame:
        """
        Load patients from every site into one table in site order.

        Args:
            input_dir: Directory with one subdirectory per site

        Returns:
            Standardized raw patient rows
        """
        frames = []
        for site_dir in cls.site_dirs(input_dir):
            df = cls.load_site_patients(site_dir)
            logger.debug(f"Loaded {len(df)} patients from {site_dir.name}")
            frames.append(df)

        combined = pd.concat(frames, ignore_index=True)
        logger.info(f"Loaded {len(combined)} patient rows from {len(frames)} sites")

        return standardize_patient_columns(combined)

    @classmethod
    def load_site_consults(cls, input_dir: Path) -> pd.DataFrame:
        """
        Load consult records from every site that has them.

        Args:
            input_dir: Directory with one subdirectory per site

        Returns:
            Raw consult rows with a site column
        """
        frames = []
        for site_dir in cls.site_dirs(input_dir):
            path = site_dir / cls.CONSULTS_FILE
            if not path.exists():
                logger.warning(f"No consults file found in {site_dir.name}")
                continue
            df = cls.read_csv(path)
            df["site"] = site_dir.name
            frames.append(df)

        if not frames:
            raise ValueError(f"No consult records found in {input_dir}")

        combined = pd.concat(frames, ignore_index=True)
        logger.info(f"Loaded {len(combined)} consults from {len(frames)} sites")
        return combined
