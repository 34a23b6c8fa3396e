"""Utility modules."""

from .output_formatter import prepare_output_data
from .roster_cache import RosterCache
from .site_loader import SiteLoader, parse_flag, standardize_patient_columns
from .validators import RosterValidator

__all__ = [
    "RosterCache",
    "RosterValidator",
    "SiteLoader",
    "parse_flag",
    "prepare_output_data",
    "standardize_patient_columns",
]
