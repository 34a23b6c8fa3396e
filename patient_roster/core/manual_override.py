"""Forced splitting of identifiers known to be shared by distinct people.

Site identifiers are only unique within a site, and a handful of them are
also shared by different people with identical names, which exact-key
merging would collapse. Each listed identifier is rewritten to
``<id>-1``, ``<id>-2``, ... before merging runs.
"""

import logging
from typing import Iterable, Optional

import pandas as pd

from ..config import OverrideRule
from .columns import CANONICAL_ID
from .diagnostics import DiagnosticsLog, UnsalvageableRecord

logger = logging.getLogger(__name__)


def prepare_for_resolution(roster: pd.DataFrame) -> pd.DataFrame:
    """
    Add the working canonical ID column, initialized from the site identifier.

    The original ``local_id`` is never rewritten, so the cross-reference
    index can later map (local_id, site) to whatever the canonical ID became.
    """
    if CANONICAL_ID in roster.columns:
        return roster
    roster = roster.reset_index(drop=True)
    roster[CANONICAL_ID] = roster["local_id"].fillna("").astype(str)
    return roster


def create_distinct_patients(
    roster: pd.DataFrame,
    identifier: str,
    drop_missing_birth_year: bool = False,
    diagnostics: Optional[DiagnosticsLog] = None,
) -> pd.DataFrame:
    """
    Give every row holding ``identifier`` its own suffixed identifier.

    Args:
        roster: Roster with a canonical_id column
        identifier: Identifier to split
        drop_missing_birth_year: Discard matching rows without a birth year
        diagnostics: Receives an event for each discarded row

    Returns:
        New roster; matching rows become ``<identifier>-<n>`` with n the
        1-based position among matching rows, other rows are untouched
    """
    roster = prepare_for_resolution(roster)
    matching = roster[CANONICAL_ID] == identifier

    if drop_missing_birth_year:
        noise = matching & roster["birth_year"].isna()
        if noise.any():
            if diagnostics is not None:
                for _, row in roster[noise].iterrows():
                    diagnostics.record(
                        UnsalvageableRecord(
                            local_id=str(row["local_id"]),
                            site=str(row["site"]),
                            reason=f"no birth year for overridden identifier {identifier}",
                        )
                    )
            roster = roster[~noise]
            matching = matching[~noise]

    roster = roster.copy()
    positions = matching.cumsum()[matching]
    roster.loc[matching, CANONICAL_ID] = [f"{identifier}-{n}" for n in positions]

    return roster


def apply_manual_overrides(
    roster: pd.DataFrame,
    rules: Iterable[OverrideRule],
    diagnostics: Optional[DiagnosticsLog] = None,
) -> pd.DataFrame:
    """
    Split each listed identifier into distinct patients.

    Args:
        roster: Raw rows from all sites
        rules: Identifiers known to collide across distinct people
        diagnostics: Receives an event for each discarded row

    Returns:
        New roster with listed identifiers suffixed
    """
    roster = prepare_for_resolution(roster)

    for rule in rules:
        matched = int((roster[CANONICAL_ID] == rule.local_id).sum())
        rows_before = len(roster)
        roster = create_distinct_patients(
            roster,
            rule.local_id,
            drop_missing_birth_year=rule.drop_missing_birth_year,
            diagnostics=diagnostics,
        )
        if matched:
            dropped = rows_before - len(roster)
            logger.debug(
                f"Manual override {rule.local_id}: split {matched - dropped} rows, "
                f"dropped {dropped} without birth year"
            )

    return roster
