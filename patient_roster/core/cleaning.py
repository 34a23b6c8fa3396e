"""
Record cleanup applied after identity resolution.

Repairs birth dates, converts export timestamps, and drops rows that cannot
be identified.
"""

import logging
from datetime import date, datetime
from typing import Optional

import numpy as np
import pandas as pd

from ..config import BirthdateConfig
from .columns import (
    BIRTHDATE,
    BIRTHDATE_IS_ESTIMATED,
    BLANK_NAME,
    REGISTRATION_DATE,
)
from .diagnostics import DiagnosticsLog, UnsalvageableRecord

logger = logging.getLogger(__name__)

# Access exports dates as e.g. "Fri May 19 00:00:00 CDT 2017"
EXPORT_DATE_FORMAT = "%a %b %d %H:%M:%S %Y"
OUTPUT_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def parse_and_fix_birthdates(
    roster: pd.DataFrame,
    config: Optional[BirthdateConfig] = None,
    today: Optional[date] = None,
) -> pd.DataFrame:
    """
    Assemble a birthdate from its parts, substituting implausible parts.

    Missing or out-of-range years become ``min_year``, months become 1 and
    days become 1. Dates after the export month cannot be real and become
    ``min_year``-1. Any substitution marks the birthdate as estimated.

    Args:
        roster: Roster with birth_year, birth_month, birth_day columns
        config: Birthdate repair bounds
        today: Reference date for the latest plausible year

    Returns:
        New roster with birthdate ("Y-M-D", unpadded) and birthdate_is_estimated
    """
    config = config or BirthdateConfig()
    current_year = (today or date.today()).year
    roster = roster.copy()

    year = pd.to_numeric(roster["birth_year"], errors="coerce").astype(float)
    month = pd.to_numeric(roster["birth_month"], errors="coerce").astype(float)
    day = pd.to_numeric(roster["birth_day"], errors="coerce").astype(float)

    bad_year = (year.isna() | (year < config.min_year) | (year > current_year)).to_numpy()
    bad_month = (month.isna() | (month < 1) | (month > 12)).to_numpy()
    bad_day = (day.isna() | (day < 1) | (day > 31)).to_numpy()

    year = np.where(bad_year, config.min_year, year.to_numpy())
    month = np.where(bad_month, 1, month.to_numpy())
    day = np.where(bad_day, 1, day.to_numpy())

    post_export = (year >= config.export_year) & (month > config.export_month)
    year = np.where(post_export, config.min_year, year)
    month = np.where(post_export, 1, month)

    roster[BIRTHDATE] = [
        f"{int(y)}-{int(m)}-{int(d)}" for y, m, d in zip(year, month, day)
    ]
    roster[BIRTHDATE_IS_ESTIMATED] = bad_year | bad_month | bad_day | post_export

    logger.debug(f"Estimated {int(roster[BIRTHDATE_IS_ESTIMATED].sum())} birthdates")

    return roster


def transform_date(value, timezone: str = "America/Mexico_City") -> Optional[str]:
    """
    Convert an export timestamp to ISO 8601 with offset.

    The export's clock time is taken as UTC and rendered in ``timezone``;
    the timezone abbreviation in the text is ignored.

    Args:
        value: Export timestamp text, e.g. "Sat Dec 30 11:14:18 CST 2016"
        timezone: Target timezone name

    Returns:
        e.g. "2016-12-30T05:14:18-0600", or None when missing or unparseable
    """
    if value is None or pd.isna(value) or str(value).strip() == "":
        return None

    text = str(value).strip()
    parts = text.split()
    timestamp = None
    if len(parts) == 6:
        try:
            parsed = datetime.strptime(
                " ".join(parts[:4] + parts[5:]), EXPORT_DATE_FORMAT
            )
            timestamp = pd.Timestamp(parsed)
        except ValueError:
            timestamp = None

    if timestamp is None:
        timestamp = pd.to_datetime(text, errors="coerce")
        if pd.isna(timestamp):
            logger.debug(f"Unparseable date: {text}")
            return None

    if timestamp.tzinfo is None:
        timestamp = timestamp.tz_localize("UTC")

    return timestamp.tz_convert(timezone).strftime(OUTPUT_DATE_FORMAT)


def add_registration_dates(
    roster: pd.DataFrame, timezone: str = "America/Mexico_City"
) -> pd.DataFrame:
    """Add registration_date converted from registration_date_raw."""
    roster = roster.copy()
    if "registration_date_raw" not in roster.columns:
        roster[REGISTRATION_DATE] = None
        return roster
    roster[REGISTRATION_DATE] = [
        transform_date(v, timezone) for v in roster["registration_date_raw"]
    ]
    return roster


def fix_blank_names(roster: pd.DataFrame) -> pd.DataFrame:
    """Replace blank given and family names with a placeholder."""
    roster = roster.copy()
    for col in ["given_name", "family_name"]:
        names = roster[col].fillna("").astype(str)
        roster[col] = names.where(names.str.strip() != "", BLANK_NAME)
    return roster


def filter_unsalvageable(
    roster: pd.DataFrame, diagnostics: Optional[DiagnosticsLog] = None
) -> pd.DataFrame:
    """
    Drop rows that cannot be identified.

    Expects blank names to have been replaced by the placeholder. A row is
    dropped when both names are blank, or when it has no site identifier
    (it could never be cross-referenced).

    Args:
        roster: Roster after fix_blank_names
        diagnostics: Receives an UnsalvageableRecord per dropped row

    Returns:
        New roster without unsalvageable rows
    """
    no_name = (roster["given_name"] == BLANK_NAME) & (roster["family_name"] == BLANK_NAME)
    no_id = roster["local_id"].fillna("").astype(str).str.strip() == ""
    drop = no_name | no_id

    if drop.any():
        if diagnostics is not None:
            for i, row in roster[drop].iterrows():
                reason = "no given or family name" if no_name[i] else "no site identifier"
                diagnostics.record(
                    UnsalvageableRecord(
                        local_id=str(row["local_id"]) if pd.notna(row["local_id"]) else "",
                        site=str(row["site"]),
                        reason=reason,
                    )
                )
        logger.info(f"Dropped {int(drop.sum())} unsalvageable records")

    return roster[~drop].reset_index(drop=True)
