"""Roster integrity validation utilities."""

from typing import List, Tuple

import pandas as pd

from ..core.columns import BLANK_NAME, CANONICAL_ID, ORIGIN_SITES, PATIENT_UUID
from ..core.integrity import find_duplicated_ids


class RosterValidator:
    """Validates the invariants of a resolved roster."""

    REQUIRED_COLUMNS = [
        "local_id",
        "given_name",
        "family_name",
        CANONICAL_ID,
        ORIGIN_SITES,
        PATIENT_UUID,
    ]

    def validate_roster(self, roster: pd.DataFrame) -> Tuple[bool, List[str]]:
        """
        Validate a resolved roster.

        Args:
            roster: Resolved roster

        Returns:
            Tuple of (is_valid, list of error messages)
        """
        missing = [c for c in self.REQUIRED_COLUMNS if c not in roster.columns]
        if missing:
            return False, [f"Missing columns: {', '.join(missing)}"]

        errors = []
        errors.extend(self._validate_canonical_ids(roster))
        errors.extend(self._validate_uuids(roster))
        errors.extend(self._validate_names(roster))

        return len(errors) == 0, errors

    def _validate_canonical_ids(self, roster: pd.DataFrame) -> List[str]:
        """Canonical IDs are present and unique."""
        errors = []

        blank = roster[CANONICAL_ID].fillna("").astype(str).str.strip() == ""
        if blank.any():
            errors.append(f"{int(blank.sum())} records have a blank canonical ID")

        duplicated = find_duplicated_ids(roster, CANONICAL_ID)
        if duplicated:
            errors.append(f"{len(duplicated)} canonical IDs are shared by several records")

        return errors

    def _validate_uuids(self, roster: pd.DataFrame) -> List[str]:
        """Patient UUIDs are present and unique."""
        errors = []

        if roster[PATIENT_UUID].isna().any():
            errors.append("Some records have no patient UUID")

        duplicated = find_duplicated_ids(roster, PATIENT_UUID)
        if duplicated:
            errors.append(f"{len(duplicated)} patient UUIDs are shared by several records")

        return errors

    def _validate_names(self, roster: pd.DataFrame) -> List[str]:
        """No record is missing both names."""
        nameless = (roster["given_name"] == BLANK_NAME) & (
            roster["family_name"] == BLANK_NAME
        )
        if nameless.any():
            return [f"{int(nameless.sum())} records have neither given nor family name"]
        return []
