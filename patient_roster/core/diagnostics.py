"""Structured diagnostics for advisory resolution events.

Events are recorded instead of raised: they describe decisions the engine
made with a deterministic default (keep the first value, take the first
match, pass the identifier through) so callers can review them afterwards.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Literal, Optional, Type, Union

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class MergeFieldConflict(BaseModel):
    """Distinct non-missing values for one field within a duplicate group."""

    kind: Literal["merge_field_conflict"] = "merge_field_conflict"
    field: str
    identity: str
    values: List[str]
    kept: str
    sites: List[str]
    severity: Literal["warning", "review"] = "warning"

    def message(self) -> str:
        msg = (
            f"multiple values for {self.field} for person {self.identity}: "
            f"{' '.join(self.values)} (kept {self.kept}); "
            f"patient exists in {', '.join(self.sites)}"
        )
        if self.severity == "review":
            msg += "; consider adding a manual override"
        return msg


class AmbiguousCrossReference(BaseModel):
    """More than one canonical record matches a (local_id, site) query."""

    kind: Literal["ambiguous_cross_reference"] = "ambiguous_cross_reference"
    local_id: str
    site: str
    candidates: List[str]

    def message(self) -> str:
        return (
            f"multiple patients with identifier {self.local_id} at site "
            f"{self.site}: {', '.join(self.candidates)}; using {self.candidates[0]}"
        )


class UnresolvedCrossReference(BaseModel):
    """No canonical record matches a (local_id, site) query."""

    kind: Literal["unresolved_cross_reference"] = "unresolved_cross_reference"
    local_id: str
    site: str

    def message(self) -> str:
        return f"no patient registered for {self.local_id} at {self.site}"


class UnsalvageableRecord(BaseModel):
    """A row dropped from the roster because it cannot be identified."""

    kind: Literal["unsalvageable_record"] = "unsalvageable_record"
    local_id: str
    site: str
    reason: str

    def message(self) -> str:
        return f"dropped record {self.local_id or '<blank>'} from {self.site}: {self.reason}"


DiagnosticEvent = Union[
    MergeFieldConflict,
    AmbiguousCrossReference,
    UnresolvedCrossReference,
    UnsalvageableRecord,
]

# Unresolved lookups are expected in normal operation
_LOG_LEVELS = {
    "merge_field_conflict": logging.WARNING,
    "ambiguous_cross_reference": logging.WARNING,
    "unresolved_cross_reference": logging.DEBUG,
    "unsalvageable_record": logging.INFO,
}


class DiagnosticsLog:
    """Collects diagnostic events and mirrors them to the logging stream."""

    def __init__(self):
        """Initialize an empty event log."""
        self.events: List[DiagnosticEvent] = []

    def record(self, event: DiagnosticEvent) -> None:
        """
        Record an event and log its message.

        Args:
            event: Diagnostic event to record
        """
        self.events.append(event)
        logger.log(_LOG_LEVELS[event.kind], event.message())

    def of_type(self, event_type: Type[BaseModel]) -> List[DiagnosticEvent]:
        """Return the recorded events of one type, in recording order."""
        return [e for e in self.events if isinstance(e, event_type)]

    def counts(self) -> Dict[str, int]:
        """Count recorded events by kind."""
        counts: Dict[str, int] = {}
        for event in self.events:
            counts[event.kind] = counts.get(event.kind, 0) + 1
        return counts

    def export_jsonl(
        self, output_path: Path, include_unresolved: bool = False
    ) -> None:
        """
        Export recorded events as JSONL.

        Args:
            output_path: Output file path
            include_unresolved: Also write unresolved cross-reference events
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w") as f:
            for event in self.events:
                if event.kind == "unresolved_cross_reference" and not include_unresolved:
                    continue
                f.write(json.dumps(event.model_dump(), ensure_ascii=False) + "\n")

    def __len__(self) -> int:
        return len(self.events)


def ensure_log(diagnostics: Optional[DiagnosticsLog]) -> DiagnosticsLog:
    """Return the given log, or a fresh one when None."""
    return diagnostics if diagnostics is not None else DiagnosticsLog()


__all__ = [
    "AmbiguousCrossReference",
    "DiagnosticEvent",
    "DiagnosticsLog",
    "MergeFieldConflict",
    "UnresolvedCrossReference",
    "UnsalvageableRecord",
    "ensure_log",
]
