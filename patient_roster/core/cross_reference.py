"""
Cross-reference from (site identifier, origin site) to canonical identifier.

Encounter records carry the identifier their site issued. After overrides,
merges, and splits that identifier may belong to a renamed canonical record;
the index maps it back using each record's local_id and origin_sites.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd

from .columns import CANONICAL_ID, ORIGIN_SITES
from .diagnostics import (
    AmbiguousCrossReference,
    DiagnosticsLog,
    UnresolvedCrossReference,
)
from .merger import unique_in_order

logger = logging.getLogger(__name__)


class CrossReferenceIndex:
    """Read-only lookup built once per roster version."""

    def __init__(
        self,
        entries: Dict[Tuple[str, str], List[str]],
        diagnostics: Optional[DiagnosticsLog] = None,
    ):
        """
        Initialize the index.

        Args:
            entries: (local_id, site) -> canonical IDs in roster order
            diagnostics: Receives ambiguous and unresolved lookup events
        """
        self._entries = entries
        self.diagnostics = diagnostics

    @classmethod
    def from_roster(
        cls, roster: pd.DataFrame, diagnostics: Optional[DiagnosticsLog] = None
    ) -> "CrossReferenceIndex":
        """
        Build the index from a resolved roster.

        Every site in a record's origin_sites registers (local_id, site).
        Records without a local_id are skipped.

        Args:
            roster: Roster with local_id, canonical_id and origin_sites columns
            diagnostics: Receives ambiguous and unresolved lookup events

        Returns:
            CrossReferenceIndex
        """
        entries: Dict[Tuple[str, str], List[str]] = {}

        for local_id, canonical_id, origin_sites in zip(
            roster["local_id"], roster[CANONICAL_ID], roster[ORIGIN_SITES]
        ):
            if pd.isna(local_id) or str(local_id) == "":
                continue
            if pd.isna(origin_sites):
                continue
            for site in unique_in_order(str(origin_sites).split(",")):
                entries.setdefault((str(local_id), site), []).append(str(canonical_id))

        logger.debug(f"Cross-reference index: {len(entries)} (identifier, site) keys")

        return cls(entries, diagnostics)

    def candidates(self, local_id: str, site: str) -> List[str]:
        """Return every canonical ID registered for the pair, in roster order."""
        return list(self._entries.get((str(local_id), str(site)), []))

    def resolve(self, local_id: str, site: str) -> str:
        """
        Resolve one identifier seen at one site.

        Args:
            local_id: Identifier as recorded on the encounter
            site: Site the encounter came from

        Returns:
            The canonical ID; the first one in roster order if several match;
            ``local_id`` unchanged if none match
        """
        matches = self._entries.get((str(local_id), str(site)))

        if not matches:
            if self.diagnostics is not None:
                self.diagnostics.record(
                    UnresolvedCrossReference(local_id=str(local_id), site=str(site))
                )
            return local_id

        if len(matches) > 1:
            event = AmbiguousCrossReference(
                local_id=str(local_id), site=str(site), candidates=list(matches)
            )
            if self.diagnostics is not None:
                self.diagnostics.record(event)
            else:
                logger.warning(event.message())

        return matches[0]

    def resolve_many(
        self, local_ids: Sequence[str], sites: Sequence[str]
    ) -> List[str]:
        """
        Resolve identifiers element-wise against the same index.

        Args:
            local_ids: Identifiers as recorded on encounters
            sites: Site of each encounter

        Returns:
            Canonical IDs, same length and order as the input
        """
        local_ids = list(local_ids)
        sites = list(sites)
        if len(local_ids) != len(sites):
            raise ValueError(
                f"local_ids ({len(local_ids)}) and sites ({len(sites)}) differ in length"
            )

        return [self.resolve(lid, site) for lid, site in zip(local_ids, sites)]

    def __len__(self) -> int:
        return len(self._entries)


def resolve_canonical_ids(
    roster: pd.DataFrame,
    local_ids: Sequence[str],
    sites: Sequence[str],
    diagnostics: Optional[DiagnosticsLog] = None,
) -> List[str]:
    """Build an index for ``roster`` and resolve all queries against it."""
    index = CrossReferenceIndex.from_roster(roster, diagnostics)
    return index.resolve_many(local_ids, sites)
