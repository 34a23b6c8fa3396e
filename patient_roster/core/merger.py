"""
Duplicate grouping and merging.

Rows with an identical identity key (identifier, given name, family name)
are the same person registered at several sites, or registered twice at one
site. Each group is collapsed into a single roster row with field-level
conflict resolution.
"""

import logging
from typing import Any, List, Optional

import pandas as pd

from .columns import (
    BIRTH_PART_COLUMNS,
    CANONICAL_ID,
    HEALTH_FLAG_COLUMNS,
    IDENTITY_COLUMNS,
    MERGE_TEXT_COLUMNS,
    ORIGIN_SITES,
)
from .diagnostics import DiagnosticsLog, MergeFieldConflict
from .manual_override import prepare_for_resolution

logger = logging.getLogger(__name__)

# The identifier part of the key is the working identifier, so manual
# overrides applied earlier keep their rows apart.
IDENTITY_KEY = [CANONICAL_ID, "given_name", "family_name"]


def merge_duplicates(
    roster: pd.DataFrame, diagnostics: Optional[DiagnosticsLog] = None
) -> pd.DataFrame:
    """
    Collapse every group of rows sharing an identity key into one row.

    Groups are ordered by first appearance and rows within a group keep
    ingestion order, so "first value" tie-breaks are reproducible. Rows of
    merged groups are removed and the merged rows appended after the
    untouched ones.

    Args:
        roster: Rows after manual overrides
        diagnostics: Receives a MergeFieldConflict per disagreeing field;
            conflicts are logged as warnings when None

    Returns:
        New roster with one row per identity key and an origin_sites column
    """
    roster = prepare_for_resolution(roster)
    roster = roster.copy()
    if ORIGIN_SITES not in roster.columns:
        roster[ORIGIN_SITES] = roster["site"].astype(str)

    group_sizes = roster.groupby(IDENTITY_KEY, sort=False, dropna=False)[
        "site"
    ].transform("size")
    duplicated = group_sizes > 1

    if not duplicated.any():
        logger.info("No duplicate identity keys found")
        return roster.reset_index(drop=True)

    singles = roster[~duplicated]
    merged_rows = [
        merge_group(group, diagnostics)
        for _, group in roster[duplicated].groupby(
            IDENTITY_KEY, sort=False, dropna=False
        )
    ]

    logger.info(
        f"Merged {int(duplicated.sum())} duplicate rows into {len(merged_rows)} patients"
    )

    return pd.concat([singles] + merged_rows, ignore_index=True)


def merge_group(
    group: pd.DataFrame, diagnostics: Optional[DiagnosticsLog] = None
) -> pd.DataFrame:
    """
    Merge all rows of one duplicate group into a single row.

    Args:
        group: Rows sharing one identity key, in ingestion order
        diagnostics: Receives a MergeFieldConflict per disagreeing field;
            conflicts are logged as warnings when None

    Returns:
        One-row DataFrame based on the group's first row
    """
    merged = group.iloc[[0]].copy()
    idx = merged.index[0]
    identity = " ".join(str(merged.at[idx, col]) for col in IDENTITY_KEY)
    sites = group["site"].astype(str).tolist()

    merged.at[idx, ORIGIN_SITES] = ",".join(
        unique_in_order(
            site
            for joined in group[ORIGIN_SITES].astype(str)
            for site in joined.split(",")
        )
    )

    for col in BIRTH_PART_COLUMNS:
        if col in group.columns:
            values = unique_in_order(v for v in group[col] if pd.notna(v))
            _resolve_field(merged, idx, col, values, identity, sites, diagnostics)

    for col in MERGE_TEXT_COLUMNS:
        if col in group.columns:
            values = unique_in_order(
                v for v in group[col] if pd.notna(v) and str(v) != ""
            )
            _resolve_field(merged, idx, col, values, identity, sites, diagnostics)

    # A condition recorded at any site is kept: losing one is worse than
    # carrying a stale one.
    for col in HEALTH_FLAG_COLUMNS:
        if col in group.columns and group[col].eq(True).any():
            merged.at[idx, col] = True

    return merged


def _resolve_field(
    merged: pd.DataFrame,
    idx: Any,
    col: str,
    values: List[Any],
    identity: str,
    sites: List[str],
    diagnostics: Optional[DiagnosticsLog],
) -> None:
    """Keep the first non-missing value and report disagreement."""
    if not values:
        return

    merged.at[idx, col] = values[0]

    if len(values) < 2:
        return

    event = MergeFieldConflict(
        field=col,
        identity=identity,
        values=[str(v) for v in values],
        kept=str(values[0]),
        sites=sites,
        severity="review" if col in IDENTITY_COLUMNS else "warning",
    )
    if diagnostics is not None:
        diagnostics.record(event)
    else:
        logger.warning(event.message())


def unique_in_order(values) -> list:
    """Deduplicate an iterable, keeping first occurrences in order."""
    seen = set()
    result = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result
