"""Splitting of identifiers still shared after merging."""

import logging

import pandas as pd

from .columns import CANONICAL_ID
from .integrity import find_duplicated_ids
from .manual_override import create_distinct_patients, prepare_for_resolution

logger = logging.getLogger(__name__)


def split_duplicated_ids(roster: pd.DataFrame) -> pd.DataFrame:
    """
    Give each record of a still-shared identifier its own suffixed identifier.

    After merging, an identifier held by several rows belongs to different
    people (same site-scoped number, different names). Every such row is
    kept and renamed ``<id>-<n>`` in roster order.

    Args:
        roster: Roster after duplicate merging

    Returns:
        New roster; canonical IDs are unique unless a suffixed ID collides
        with one that already existed (checked by the pipeline)
    """
    roster = prepare_for_resolution(roster)
    duplicated = find_duplicated_ids(roster, CANONICAL_ID)

    if not duplicated:
        return roster

    logger.info(f"Splitting {len(duplicated)} identifiers shared by distinct patients")

    for identifier in duplicated:
        roster = create_distinct_patients(roster, identifier)

    return roster
