"""Unit tests for diagnostic event collection."""

import json
import logging

import pytest

from patient_roster.core import (
    AmbiguousCrossReference,
    DiagnosticsLog,
    MergeFieldConflict,
    UnresolvedCrossReference,
    UnsalvageableRecord,
)


@pytest.fixture
def diagnostics():
    log = DiagnosticsLog()
    log.record(
        MergeFieldConflict(
            field="birth_year",
            identity="1-0001 Ana Ruiz",
            values=["1980", "1982"],
            kept="1980",
            sites=["Laguna", "Soledad"],
        )
    )
    log.record(UnresolvedCrossReference(local_id="9-0001", site="Laguna"))
    log.record(
        AmbiguousCrossReference(
            local_id="7-0001", site="Laguna", candidates=["7-0001-1", "7-0001-2"]
        )
    )
    log.record(UnsalvageableRecord(local_id="", site="Laguna", reason="no site identifier"))
    return log


@pytest.mark.unit
class TestDiagnosticsLog:
    def test_empty_log(self):
        log = DiagnosticsLog()

        assert len(log) == 0
        assert log.counts() == {}

    def test_counts_by_kind(self, diagnostics):
        assert len(diagnostics) == 4
        assert diagnostics.counts() == {
            "merge_field_conflict": 1,
            "unresolved_cross_reference": 1,
            "ambiguous_cross_reference": 1,
            "unsalvageable_record": 1,
        }

    def test_of_type(self, diagnostics):
        events = diagnostics.of_type(AmbiguousCrossReference)

        assert len(events) == 1
        assert events[0].local_id == "7-0001"

    def test_messages(self, diagnostics):
        conflict, _, ambiguous, dropped = diagnostics.events

        assert "birth_year" in conflict.message()
        assert "kept 1980" in conflict.message()
        assert "manual override" not in conflict.message()
        assert ambiguous.message().endswith("using 7-0001-1")
        assert "<blank>" in dropped.message()

    def test_warnings_logged(self, caplog):
        log = DiagnosticsLog()
        with caplog.at_level(logging.WARNING, logger="patient_roster.core.diagnostics"):
            log.record(UnresolvedCrossReference(local_id="9-0001", site="Laguna"))
            log.record(
                AmbiguousCrossReference(
                    local_id="7-0001", site="Laguna", candidates=["a", "b"]
                )
            )

        assert len(caplog.records) == 1
        assert "7-0001" in caplog.records[0].getMessage()

    def test_export_skips_unresolved_by_default(self, diagnostics, tmp_path):
        path = tmp_path / "out" / "diagnostics.jsonl"
        diagnostics.export_jsonl(path)

        lines = [json.loads(line) for line in path.read_text().splitlines()]
        assert [line["kind"] for line in lines] == [
            "merge_field_conflict",
            "ambiguous_cross_reference",
            "unsalvageable_record",
        ]
        assert lines[0]["values"] == ["1980", "1982"]

    def test_export_with_unresolved(self, diagnostics, tmp_path):
        path = tmp_path / "diagnostics.jsonl"
        diagnostics.export_jsonl(path, include_unresolved=True)

        assert len(path.read_text().splitlines()) == 4
