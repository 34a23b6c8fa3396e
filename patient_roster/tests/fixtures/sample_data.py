"""Sample test data fixtures."""

from pathlib import Path
from typing import Dict, List

import pandas as pd

from patient_roster.core.columns import HEALTH_FLAG_COLUMNS
from patient_roster.utils.site_loader import standardize_patient_columns


def make_patient(
    local_id: str,
    given_name: str,
    family_name: str = "",
    site: str = "Salvador",
    **fields,
) -> Dict:
    """Create one raw patient row using internal column names."""
    row = {
        "local_id": local_id,
        "given_name": given_name,
        "family_name": family_name,
        "site": site,
        "birth_year": None,
        "birth_month": None,
        "birth_day": None,
        "gender_code": "",
        "community_name": f"{site} Centro",
        "registration_date_raw": "",
    }
    for flag in HEALTH_FLAG_COLUMNS:
        row[flag] = False
    row.update(fields)
    return row


def make_roster(rows: List[Dict]) -> pd.DataFrame:
    """Build a typed raw roster from make_patient rows."""
    return standardize_patient_columns(pd.DataFrame(rows))


def create_split_scenario() -> pd.DataFrame:
    """Three different people share 1-0001; two share 1-0002."""
    return make_roster(
        [
            make_patient("1-0001", "William", site="Laguna"),
            make_patient("1-0001", "Douglas", site="Soledad"),
            make_patient("1-0001", "Ricky", site="Salvador"),
            make_patient("1-0002", "Bill", site="Plan_Alta"),
            make_patient("1-0002", "Gregory", site="Plan_Baja"),
        ]
    )


def create_cross_reference_roster() -> pd.DataFrame:
    """A resolved roster where 1-0001 was split and merged across sites."""
    return pd.DataFrame(
        {
            "canonical_id": ["1-0001-1", "1-0001-2", "1-0001-3", "1-0002", "1-0002"],
            "given_name": ["William", "Douglas", "Ricky", "Bill", "Gregory"],
            "site": ["Laguna", "Soledad", "Salvador", "Plan_Alta", "Plan_Baja"],
            "origin_sites": [
                "Laguna,Letrero",
                "Soledad,Matazano",
                "Salvador",
                "Plan_Alta",
                "Plan_Baja",
            ],
            "local_id": ["1-0001", "1-0001", "1-0001", "1-0002", "1-0002"],
        }
    )


# Raw Pacientes.csv rows per site, using the export's column names
SITE_PATIENTS = {
    "Laguna": [
        {"CesID": "1-0001", "Nombre": "William", "Apellido": "Wallace",
         "FN_Ano": "1980", "FN_Mes": "2", "FN_Dia": "3", "Comunidad": "1",
         "Sexo": "2", "Diabetes": "1"},
    ],
    "Salvador": [
        {"CesID": "112-000351", "Nombre": "Rumblesack", "Apellido": "Cummerbund",
         "FN_Ano": "2011", "FN_Mes": "4", "FN_Dia": "10", "Comunidad": "1",
         "Sexo": "1", "Hipertensión": "0", "HTN_Fecha": "",
         "Fechar.de.registro": "Sat Dec 30 11:14:18 CST 2016"},
        {"CesID": "120-000004", "Nombre": "Alma", "Apellido": "Pérez",
         "FN_Ano": "2010", "FN_Mes": "1", "FN_Dia": "1", "Comunidad": "1"},
        {"CesID": "001-000020", "Nombre": "Bentobox", "Apellido": "Cuckooclock",
         "FN_Ano": "1995", "FN_Mes": "6", "FN_Dia": "7", "Comunidad": "2"},
        {"CesID": "120-000005", "Nombre": "", "Apellido": "", "FN_Ano": "1990",
         "Comunidad": "1"},
    ],
    "Soledad": [
        {"CesID": "112-000351", "Nombre": "Rumblesack", "Apellido": "Cummerbund",
         "FN_Ano": "", "FN_Mes": "4", "FN_Dia": "10", "Comunidad": "1",
         "Hipertensión": "1", "HTN_Fecha": "Fri May 19 00:00:00 CDT 2017"},
        {"CesID": "120-000004", "Nombre": "Berta", "Apellido": "Gómez",
         "FN_Ano": "1998", "FN_Mes": "9", "FN_Dia": "12", "Comunidad": "1"},
        {"CesID": "001-000020", "Nombre": "Bentobox", "Apellido": "Cuckooclock",
         "FN_Ano": "1970", "FN_Mes": "1", "FN_Dia": "5", "Comunidad": "1"},
        {"CesID": "001-000020", "Nombre": "Bentobox", "Apellido": "Cuckooclock",
         "FN_Ano": "", "Comunidad": "1"},
        {"CesID": "130-000001", "Nombre": "Nadie", "Apellido": "Ninguno",
         "FN_Ano": "1985", "Comunidad": "9"},
    ],
}

SITE_COMMUNITIES = {
    "Laguna": [{"ID": "1", "Comunidades": "Laguna del Cofre"}],
    "Salvador": [
        {"ID": "1", "Comunidades": "Salvador Urbina"},
        {"ID": "2", "Comunidades": "Monte Verde"},
    ],
    "Soledad": [{"ID": "1", "Comunidades": "Soledad"}],
}

SITE_CONSULTS = {
    "Salvador": [
        {"ConsID": "1", "CESid": "112-000351", "Fecha": "Sat Dec 30 11:14:18 CST 2017"},
        {"ConsID": "2", "CESid": "120-000004", "Fecha": "Sun Dec 31 09:00:00 CST 2017"},
        {"ConsID": "3", "CESid": "", "Fecha": "Sun Dec 31 10:00:00 CST 2017"},
    ],
    "Soledad": [
        {"ConsID": "4", "CESid": "120-000004", "Fecha": "Mon Jan 01 09:00:00 CST 2018"},
        {"ConsID": "5", "CESid": "999-999999", "Fecha": "Mon Jan 01 10:00:00 CST 2018"},
    ],
}


def write_site_extracts(base_dir: Path, with_consults: bool = True) -> Path:
    """
    Write a small multi-site extract tree.

    Args:
        base_dir: Directory to create site subdirectories in
        with_consults: Also write Consultas.csv files

    Returns:
        The input directory
    """
    for site, patients in SITE_PATIENTS.items():
        site_dir = base_dir / site
        site_dir.mkdir(parents=True, exist_ok=True)
        pd.DataFrame(patients).to_csv(site_dir / "Pacientes.csv", index=False)
        pd.DataFrame(SITE_COMMUNITIES[site]).to_csv(
            site_dir / "Comunidades.csv", index=False
        )
        if with_consults and site in SITE_CONSULTS:
            pd.DataFrame(SITE_CONSULTS[site]).to_csv(
                site_dir / "Consultas.csv", index=False
            )
    return base_dir
