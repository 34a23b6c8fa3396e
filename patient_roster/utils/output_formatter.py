"""Formatting of the resolved roster into the patient import table."""

from typing import List

import pandas as pd

from ..core.columns import BIRTHDATE, PATIENT_UUID, REGISTRATION_DATE

OUTPUT_COLUMNS = [
    "uuid",
    "Identifiers",
    "Given names",
    "Family names",
    "Gender",
    "Birthdate",
    "Date created",
    "Addresses",
    "Void/Retire",
]


def format_old_identifier(local_id, site: str) -> str:
    """Identifier entry preserving the site-issued ID, or "" when blank."""
    if local_id is None or pd.isna(local_id) or str(local_id) == "":
        return ""
    return f"Old Identification Number:{local_id}:{site}"


def format_emr_identifier(index: int, site: str) -> str:
    """Identifier entry for the new EMR ID, e.g. "Chiapas EMR ID:SOL1000001:Soledad"."""
    prefix = str(site)[:3].upper()
    return f"Chiapas EMR ID:{prefix}{1000000 + index}:{site}"


def format_gender(code) -> str:
    if code is None or pd.isna(code) or str(code) == "":
        return "U"
    return "F" if str(code) == "1" else "M"


def prepare_output_data(roster: pd.DataFrame) -> pd.DataFrame:
    """
    Build the patient import table from a resolved roster.

    Args:
        roster: Roster with patient_uuid, birthdate and registration_date

    Returns:
        DataFrame with OUTPUT_COLUMNS, one row per patient
    """
    identifiers: List[str] = [
        f"{format_old_identifier(local_id, site)};{format_emr_identifier(i, site)}"
        for i, (local_id, site) in enumerate(
            zip(roster["local_id"], roster["site"]), start=1
        )
    ]

    return pd.DataFrame(
        {
            "uuid": roster[PATIENT_UUID].tolist(),
            "Identifiers": identifiers,
            "Given names": roster["given_name"].tolist(),
            "Family names": roster["family_name"].tolist(),
            "Gender": [format_gender(g) for g in roster["gender_code"]],
            "Birthdate": roster[BIRTHDATE].tolist(),
            "Date created": roster[REGISTRATION_DATE].tolist(),
            "Addresses": [f"cityVillage:{c}" for c in roster["community_name"]],
            "Void/Retire": False,
        },
        columns=OUTPUT_COLUMNS,
    )
