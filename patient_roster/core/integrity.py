"""Roster invariants whose violation halts the run."""

from typing import Dict, List

import pandas as pd

from .columns import CANONICAL_ID, PATIENT_UUID


class RosterIntegrityError(ValueError):
    """A roster invariant that downstream systems rely on is broken."""


class DuplicateCanonicalIdError(RosterIntegrityError):
    """Two roster records share one canonical identifier."""

    def __init__(self, duplicated: List[str]):
        self.duplicated = duplicated
        preview = ", ".join(duplicated[:10])
        super().__init__(
            f"{len(duplicated)} canonical identifier(s) are not unique: {preview}"
        )


class UuidCollisionError(RosterIntegrityError):
    """Two distinct canonical identifiers map to the same patient UUID."""

    def __init__(self, collisions: Dict[str, List[str]]):
        self.collisions = collisions
        preview = "; ".join(
            f"{uuid_str} <- {', '.join(ids)}"
            for uuid_str, ids in list(collisions.items())[:10]
        )
        super().__init__(f"{len(collisions)} patient UUID collision(s): {preview}")


def find_duplicated_ids(roster: pd.DataFrame, column: str = CANONICAL_ID) -> List[str]:
    """Return identifiers held by more than one row, in first-appearance order."""
    ids = roster[column]
    return ids[ids.duplicated(keep=False)].drop_duplicates().tolist()


def check_unique_canonical_ids(roster: pd.DataFrame) -> None:
    """Raise DuplicateCanonicalIdError if any canonical ID is repeated."""
    duplicated = find_duplicated_ids(roster, CANONICAL_ID)
    if duplicated:
        raise DuplicateCanonicalIdError(duplicated)


def check_uuid_collisions(roster: pd.DataFrame) -> None:
    """Raise UuidCollisionError if distinct canonical IDs share a UUID."""
    ids_per_uuid = roster.groupby(PATIENT_UUID, sort=False)[CANONICAL_ID].unique()
    collisions = {
        uuid_str: list(ids) for uuid_str, ids in ids_per_uuid.items() if len(ids) > 1
    }
    if collisions:
        raise UuidCollisionError(collisions)
