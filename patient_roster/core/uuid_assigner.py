"""Deterministic patient UUIDs derived from canonical identifiers."""

import logging
import uuid
from typing import Union

import pandas as pd

from ..config.config_schema import DEFAULT_UUID_NAMESPACE
from .columns import CANONICAL_ID, PATIENT_UUID
from .integrity import check_unique_canonical_ids, check_uuid_collisions

logger = logging.getLogger(__name__)

# Version 1: str(uuid5(namespace, canonical_id)). Bump if the derivation changes.
UUID_SCHEME_VERSION = 1


def generate_patient_uuid(
    canonical_id: str, namespace: Union[uuid.UUID, str] = DEFAULT_UUID_NAMESPACE
) -> str:
    """
    Derive a patient UUID from a canonical identifier.

    The same identifier always yields the same UUID; uniqueness across the
    roster follows from canonical identifier uniqueness.

    Args:
        canonical_id: Final canonical identifier
        namespace: Namespace UUID for the uuid5 derivation

    Returns:
        UUID string with dashes
    """
    if not isinstance(namespace, uuid.UUID):
        namespace = uuid.UUID(str(namespace))
    return str(uuid.uuid5(namespace, str(canonical_id)))


def assign_patient_uuids(
    roster: pd.DataFrame, namespace: Union[uuid.UUID, str] = DEFAULT_UUID_NAMESPACE
) -> pd.DataFrame:
    """
    Attach a patient_uuid to every roster record.

    Args:
        roster: Roster with unique canonical IDs
        namespace: Namespace UUID for the uuid5 derivation

    Returns:
        New roster with a patient_uuid column

    Raises:
        DuplicateCanonicalIdError: canonical IDs are not unique
        UuidCollisionError: distinct canonical IDs produced the same UUID
    """
    check_unique_canonical_ids(roster)

    roster = roster.copy()
    roster[PATIENT_UUID] = [
        generate_patient_uuid(cid, namespace) for cid in roster[CANONICAL_ID]
    ]

    check_uuid_collisions(roster)
    logger.debug(f"Assigned {len(roster)} patient UUIDs (scheme v{UUID_SCHEME_VERSION})")

    return roster
