"""
End-to-end roster resolution orchestration.

Coordinates the workflow: override -> merge -> split -> cleanup -> UUIDs,
and the cached entry point used by consult linking.
"""

import logging
from typing import NamedTuple, Optional

import pandas as pd

from ..config import ResolutionConfig
from ..utils.roster_cache import RosterCache
from ..utils.site_loader import SiteLoader
from .cleaning import (
    add_registration_dates,
    filter_unsalvageable,
    fix_blank_names,
    parse_and_fix_birthdates,
)
from .diagnostics import DiagnosticsLog, ensure_log
from .integrity import check_unique_canonical_ids
from .manual_override import apply_manual_overrides, prepare_for_resolution
from .merger import merge_duplicates
from .splitter import split_duplicated_ids
from .uuid_assigner import assign_patient_uuids

logger = logging.getLogger(__name__)


class RosterResult(NamedTuple):
    roster: pd.DataFrame
    diagnostics: DiagnosticsLog


def resolve_roster(
    raw: pd.DataFrame,
    config: Optional[ResolutionConfig] = None,
    diagnostics: Optional[DiagnosticsLog] = None,
) -> RosterResult:
    """
    Resolve raw site rows into the canonical roster.

    Args:
        raw: Standardized raw patient rows from all sites, in ingestion order
        config: Resolution configuration (manual overrides, UUID namespace, ...)
        diagnostics: Event log to append to (a new one if None)

    Returns:
        RosterResult with one record per canonical ID and the diagnostics

    Raises:
        DuplicateCanonicalIdError: splitting left a canonical ID shared
        UuidCollisionError: two canonical IDs produced the same UUID
    """
    config = config or ResolutionConfig()
    diagnostics = ensure_log(diagnostics)

    logger.info(f"Resolving {len(raw)} raw patient rows")

    roster = prepare_for_resolution(raw)

    logger.info(f"[Step 1/5] Manual overrides ({len(config.manual_overrides)} rules)")
    roster = apply_manual_overrides(roster, config.manual_overrides, diagnostics)

    logger.info("[Step 2/5] Merging duplicate identity keys")
    roster = merge_duplicates(roster, diagnostics)

    logger.info("[Step 3/5] Splitting residual duplicate identifiers")
    roster = split_duplicated_ids(roster)
    check_unique_canonical_ids(roster)

    logger.info("[Step 4/5] Repairing dates and dropping unsalvageable records")
    roster = parse_and_fix_birthdates(roster, config.birthdate)
    roster = add_registration_dates(roster, config.timezone)
    roster = fix_blank_names(roster)
    roster = filter_unsalvageable(roster, diagnostics)

    logger.info("[Step 5/5] Assigning patient UUIDs")
    roster = assign_patient_uuids(roster, config.uuid.namespace)

    logger.info(
        f"Resolved {len(roster)} patients; diagnostics: {diagnostics.counts() or 'none'}"
    )

    return RosterResult(roster, diagnostics)


def get_cleaned_roster(
    config: ResolutionConfig,
    use_cache: Optional[bool] = None,
    diagnostics: Optional[DiagnosticsLog] = None,
) -> pd.DataFrame:
    """
    Return the resolved roster, from cache when allowed and present.

    Args:
        config: Resolution configuration; paths.input_dir is required when
            the roster has to be computed
        use_cache: Overrides config.use_cache when not None
        diagnostics: Event log for a fresh computation

    Returns:
        Resolved roster
    """
    cache = RosterCache(config.paths.cache_path)
    cache_enabled = config.use_cache if use_cache is None else use_cache

    if cache_enabled:
        if cache.exists():
            return cache.load()
        logger.info("Would use cache, but no cached patient data is present")

    if config.paths.input_dir is None:
        raise ValueError("paths.input_dir is required to compute the roster")

    raw = SiteLoader.load_sites(config.paths.input_dir)
    roster, _ = resolve_roster(raw, config, diagnostics)
    cache.save(roster)

    return roster
