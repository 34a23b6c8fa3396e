"""Linking of consult (encounter) records to canonical patients."""

import logging
import uuid
from typing import Optional, Union

import pandas as pd

from ..config.config_schema import DEFAULT_UUID_NAMESPACE
from .columns import CANONICAL_ID, PATIENT_UUID
from .cross_reference import CrossReferenceIndex
from .uuid_assigner import generate_patient_uuid

logger = logging.getLogger(__name__)

CONSULT_ID_COLUMN = "CESid"


def link_consults(
    consults: pd.DataFrame,
    roster: pd.DataFrame,
    index: Optional[CrossReferenceIndex] = None,
    namespace: Union[uuid.UUID, str] = DEFAULT_UUID_NAMESPACE,
) -> pd.DataFrame:
    """
    Attach canonical patients to consult records.

    Consults without a patient identifier are dropped. The rest are resolved
    through the cross-reference index using (CESid, site) and joined to the
    roster; consults whose patient is not in the roster are dropped.

    Args:
        consults: Raw consults with CESid and site columns
        roster: Resolved roster
        index: Prebuilt index for ``roster`` (built here if None)
        namespace: UUID namespace the roster was built with

    Returns:
        Consults joined with patient columns; clashing columns are suffixed
        "_con" (consult) and "_pt" (patient)
    """
    ids = consults[CONSULT_ID_COLUMN].fillna("").astype(str).str.strip()
    consults = consults[ids != ""].copy()
    logger.info(f"{len(consults)} consults have a patient identifier")

    if index is None:
        index = CrossReferenceIndex.from_roster(roster)

    consults[CANONICAL_ID] = index.resolve_many(
        consults[CONSULT_ID_COLUMN].astype(str).str.strip(), consults["site"]
    )

    linked = consults.merge(
        roster, on=CANONICAL_ID, how="inner", suffixes=("_con", "_pt")
    )
    # resolve_roster never emits a blank-identifier record; rosters assembled
    # elsewhere may, and such a record must not collect consults
    linked = linked[linked[PATIENT_UUID] != generate_patient_uuid("", namespace)]

    dropped = len(consults) - len(linked)
    if dropped:
        logger.warning(f"{dropped} consults could not be linked to a patient")

    return linked.reset_index(drop=True)
