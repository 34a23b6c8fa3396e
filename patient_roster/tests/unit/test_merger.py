"""Unit tests for duplicate grouping and merging."""

import logging

import pytest

from patient_roster.core import DiagnosticsLog, MergeFieldConflict, merge_duplicates
from patient_roster.core.manual_override import prepare_for_resolution
from patient_roster.core.merger import merge_group, unique_in_order
from patient_roster.tests.fixtures.sample_data import make_patient, make_roster


@pytest.fixture
def rumblesack_roster():
    """One person registered at two sites with complementary data."""
    return make_roster(
        [
            make_patient(
                "112-000351", "Rumblesack", "Cummerbund", "Salvador",
                birth_year=2011, hypertension=False, hypertension_date="",
            ),
            make_patient("200-000001", "Solo", "Patient", "Salvador", birth_year=1950),
            make_patient(
                "112-000351", "Rumblesack", "Cummerbund", "Soledad",
                birth_year=None, hypertension=True,
                hypertension_date="Fri May 19 00:00:00 CDT 2017",
            ),
        ]
    )


@pytest.mark.unit
class TestMergeDuplicates:
    def test_collapses_group_to_one_record(self, rumblesack_roster):
        output = merge_duplicates(rumblesack_roster)

        rumblesacks = output[output["canonical_id"] == "112-000351"]
        assert len(rumblesacks) == 1
        assert len(output) == 2

    def test_flags_use_union(self, rumblesack_roster):
        output = merge_duplicates(rumblesack_roster)

        merged = output[output["canonical_id"] == "112-000351"].iloc[0]
        assert bool(merged["hypertension"]) is True

    def test_missing_values_do_not_override(self, rumblesack_roster):
        output = merge_duplicates(rumblesack_roster)

        merged = output[output["canonical_id"] == "112-000351"].iloc[0]
        assert merged["birth_year"] == 2011
        assert merged["hypertension_date"] == "Fri May 19 00:00:00 CDT 2017"

    def test_origin_sites_in_order(self, rumblesack_roster):
        output = merge_duplicates(rumblesack_roster)

        merged = output[output["canonical_id"] == "112-000351"].iloc[0]
        assert merged["origin_sites"] == "Salvador,Soledad"

    def test_singletons_keep_own_site_and_come_first(self, rumblesack_roster):
        output = merge_duplicates(rumblesack_roster)

        assert output["canonical_id"].tolist() == ["200-000001", "112-000351"]
        assert output.iloc[0]["origin_sites"] == "Salvador"

    def test_origin_sites_deduplicated(self):
        roster = make_roster(
            [
                make_patient("3-0001", "Ana", "Ruiz", "Soledad", birth_year=1990),
                make_patient("3-0001", "Ana", "Ruiz", "Soledad", birth_year=1990),
                make_patient("3-0001", "Ana", "Ruiz", "Laguna"),
            ]
        )
        output = merge_duplicates(roster)

        assert output["origin_sites"].tolist() == ["Soledad,Laguna"]

    def test_conflict_keeps_first_and_reports(self):
        diagnostics = DiagnosticsLog()
        roster = make_roster(
            [
                make_patient("3-0002", "Luis", "Mora", "Laguna", birth_year=1980, birth_month=3),
                make_patient("3-0002", "Luis", "Mora", "Soledad", birth_year=1982, birth_month=3),
            ]
        )
        output = merge_duplicates(roster, diagnostics)

        assert output.iloc[0]["birth_year"] == 1980
        conflicts = diagnostics.of_type(MergeFieldConflict)
        assert len(conflicts) == 1
        assert conflicts[0].field == "birth_year"
        assert conflicts[0].values == ["1980", "1982"]
        assert conflicts[0].kept == "1980"
        assert conflicts[0].sites == ["Laguna", "Soledad"]
        assert conflicts[0].severity == "warning"

    def test_conflict_logged_without_diagnostics(self, caplog):
        roster = make_roster(
            [
                make_patient("3-0002", "Luis", "Mora", "Laguna", birth_year=1980),
                make_patient("3-0002", "Luis", "Mora", "Soledad", birth_year=1982),
            ]
        )

        with caplog.at_level(logging.WARNING, logger="patient_roster.core.merger"):
            output = merge_duplicates(roster)

        assert output.iloc[0]["birth_year"] == 1980
        warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "multiple values for birth_year" in warnings[0]
        assert "3-0002 Luis Mora" in warnings[0]
        assert "1980 1982" in warnings[0]

    def test_agreeing_values_raise_no_conflict(self, rumblesack_roster):
        diagnostics = DiagnosticsLog()
        merge_duplicates(rumblesack_roster, diagnostics)

        assert diagnostics.of_type(MergeFieldConflict) == []

    def test_different_names_are_not_merged(self):
        roster = make_roster(
            [
                make_patient("3-0003", "Rosa", "Lima", "Laguna"),
                make_patient("3-0003", "Rosa", "Lina", "Soledad"),
            ]
        )
        output = merge_duplicates(roster)

        assert len(output) == 2

    def test_no_duplicates_returns_all_rows(self):
        roster = make_roster(
            [make_patient("4-0001", "A", "B"), make_patient("4-0002", "C", "D")]
        )
        output = merge_duplicates(roster)

        assert output["canonical_id"].tolist() == ["4-0001", "4-0002"]
        assert output["origin_sites"].tolist() == ["Salvador", "Salvador"]


@pytest.mark.unit
class TestMergeGroup:
    def test_identity_conflict_is_flagged_for_review(self):
        """Disagreeing identity fields suggest a manual override."""
        diagnostics = DiagnosticsLog()
        group = prepare_for_resolution(
            make_roster(
                [
                    make_patient("5-0001", "Eva", "Paz", "Laguna"),
                    make_patient("5-0001X", "Eva", "Paz", "Soledad"),
                ]
            )
        )
        group["canonical_id"] = "5-0001"
        group["origin_sites"] = group["site"]

        merged = merge_group(group, diagnostics)

        assert merged.iloc[0]["local_id"] == "5-0001"
        conflicts = diagnostics.of_type(MergeFieldConflict)
        assert [c.field for c in conflicts] == ["local_id"]
        assert conflicts[0].severity == "review"
        assert "manual override" in conflicts[0].message()


@pytest.mark.unit
def test_unique_in_order():
    assert unique_in_order(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]
