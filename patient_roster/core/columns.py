"""Column names for raw site extracts and the canonical roster."""

# Raw Pacientes.csv column -> internal column
RAW_PATIENT_COLUMNS = {
    "CesID": "local_id",
    "Nombre": "given_name",
    "Apellido": "family_name",
    "FN_Ano": "birth_year",
    "FN_Mes": "birth_month",
    "FN_Dia": "birth_day",
    "Fechar.de.registro": "registration_date_raw",
    "Sexo": "gender_code",
    "Comunidad": "community_code",
    "Comunidades": "community_name",
    "Actualmente.embarazada": "currently_pregnant",
    "SPSS": "spss",
    "Oportunidades": "oportunidades",
    "Migrante": "migrant",
    "Indígena": "indigenous",
    "Discapacidad": "disability",
    "SUIVE": "suive",
    "Diabetes": "diabetes",
    "Hipertensión": "hypertension",
    "Asma": "asthma",
    "Embarazada": "pregnant",
    "Depresión": "depression",
    "Epilepsia": "epilepsy",
    "Desnutrición": "malnutrition",
    "AM_Fecha": "asthma_date",
    "DEP_Fecha": "depression_date",
    "DM_Fecha": "diabetes_date",
    "EMB_Fecha": "pregnancy_date",
    "EP_Fecha": "epilepsy_date",
    "HTN_Fecha": "hypertension_date",
    "DES_Fecha": "malnutrition_date",
}

# Comunidades.csv join columns
COMMUNITY_ID_COLUMN = "ID"
COMMUNITY_CODE_COLUMN = "Comunidad"

HEALTH_FLAG_COLUMNS = [
    "currently_pregnant",
    "spss",
    "oportunidades",
    "migrant",
    "indigenous",
    "disability",
    "suive",
    "diabetes",
    "hypertension",
    "asthma",
    "pregnant",
    "depression",
    "epilepsy",
    "malnutrition",
]

IDENTITY_COLUMNS = ["local_id", "given_name", "family_name"]

CONDITION_DATE_COLUMNS = [
    "asthma_date",
    "depression_date",
    "diabetes_date",
    "pregnancy_date",
    "epilepsy_date",
    "hypertension_date",
    "malnutrition_date",
]

# Text columns merged with "keep first non-empty" semantics
MERGE_TEXT_COLUMNS = IDENTITY_COLUMNS + CONDITION_DATE_COLUMNS

BIRTH_PART_COLUMNS = ["birth_year", "birth_month", "birth_day"]

# Columns that are always text, even when absent from an extract
TEXT_COLUMNS = MERGE_TEXT_COLUMNS + [
    "registration_date_raw",
    "gender_code",
    "community_name",
    "site",
]

# Roster columns added during resolution
CANONICAL_ID = "canonical_id"
ORIGIN_SITES = "origin_sites"
PATIENT_UUID = "patient_uuid"
BIRTHDATE = "birthdate"
BIRTHDATE_IS_ESTIMATED = "birthdate_is_estimated"
REGISTRATION_DATE = "registration_date"

# Identifier-like columns that must round-trip through the cache as strings
STRING_ID_COLUMNS = ["local_id", CANONICAL_ID, ORIGIN_SITES, PATIENT_UUID, "site"]

BLANK_NAME = "-"
