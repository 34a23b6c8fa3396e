"""Core identity resolution modules."""

from .cleaning import parse_and_fix_birthdates, transform_date
from .consult_linker import link_consults
from .cross_reference import CrossReferenceIndex, resolve_canonical_ids
from .diagnostics import (
    AmbiguousCrossReference,
    DiagnosticsLog,
    MergeFieldConflict,
    UnresolvedCrossReference,
    UnsalvageableRecord,
)
from .integrity import (
    DuplicateCanonicalIdError,
    RosterIntegrityError,
    UuidCollisionError,
)
from .manual_override import apply_manual_overrides, create_distinct_patients
from .merger import merge_duplicates
from .splitter import split_duplicated_ids
from .uuid_assigner import assign_patient_uuids, generate_patient_uuid

__all__ = [
    "AmbiguousCrossReference",
    "CrossReferenceIndex",
    "DiagnosticsLog",
    "DuplicateCanonicalIdError",
    "MergeFieldConflict",
    "RosterIntegrityError",
    "UnresolvedCrossReference",
    "UnsalvageableRecord",
    "UuidCollisionError",
    "apply_manual_overrides",
    "assign_patient_uuids",
    "create_distinct_patients",
    "generate_patient_uuid",
    "link_consults",
    "merge_duplicates",
    "parse_and_fix_birthdates",
    "resolve_canonical_ids",
    "split_duplicated_ids",
    "transform_date",
]
