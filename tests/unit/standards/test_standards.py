"""
Tests for the built-in standards catalog and custom standard loading.
"""

import pytest

from logaudit.rule_engine import (
    ComplianceStatus,
    StandardDefinitionError,
    StandardKind,
    StandardNotFoundError,
    rule_engine_service,
)
from logaudit.standards import (
    AI_STANDARD_ID,
    BITTORRENT_STANDARD_ID,
    GENERAL_STANDARD_ID,
    SECURITY_STANDARD_ID,
    XML_TDR_STANDARD_ID,
    get_standard,
    list_standards,
    load_standard,
)


def _statuses(standard_id, document, auxiliary=None):
    outcomes = rule_engine_service.evaluate_standard(
        get_standard(standard_id), document, auxiliary
    )
    return {o.rule_id: o.status for o in outcomes}


class TestCatalog:
    def test_catalog_order_and_ids(self):
        assert [s.id for s in list_standards()] == [
            "general",
            "bittorrent",
            "xml-tdr",
            "security",
            "ai",
        ]

    def test_ai_standard_is_summary_only(self):
        ai = get_standard(AI_STANDARD_ID)
        assert ai.kind == StandardKind.SUMMARY
        assert ai.rules == ()

    def test_unknown_standard(self):
        with pytest.raises(StandardNotFoundError, match="Standard 'nope' not found"):
            get_standard("nope")

    def test_general_clean_log(self, details_log):
        statuses = _statuses(GENERAL_STANDARD_ID, details_log)
        assert set(statuses.values()) == {ComplianceStatus.COMPLIANT}

    def test_general_error_line(self):
        statuses = _statuses(GENERAL_STANDARD_ID, "ok\nERROR: disk full\n")
        assert statuses["no-errors"] == ComplianceStatus.NON_COMPLIANT
        assert statuses["no-fatal-errors"] == ComplianceStatus.COMPLIANT

    def test_bittorrent_log(self, details_log):
        statuses = _statuses(BITTORRENT_STANDARD_ID, details_log)

        assert statuses["bep-03-handshake"] == ComplianceStatus.COMPLIANT
        assert statuses["download-complete"] == ComplianceStatus.COMPLIANT
        assert statuses["bep-05-dht-bootstrap"] == ComplianceStatus.WARNING
        assert statuses["critical-connection-established"] == ComplianceStatus.COMPLIANT
        assert statuses["uninitialized-file-creation"] == ComplianceStatus.NON_COMPLIANT

    def test_bittorrent_partial_seed(self):
        document = (
            "Remote client acknowledges that it has piece: 12 "
            "(possesses 40 of 64 pieces)\n"
        )
        outcomes = rule_engine_service.evaluate_standard(
            get_standard(BITTORRENT_STANDARD_ID), document
        )
        completion = next(o for o in outcomes if o.rule_id == "download-complete")

        assert completion.status == ComplianceStatus.NON_COMPLIANT
        assert completion.completion_details.possessed == 40
        assert completion.completion_details.total == 64

    def test_security_log(self, details_log, netstat_stable):
        outcomes = rule_engine_service.evaluate_standard(
            get_standard(SECURITY_STANDARD_ID), details_log, netstat_stable
        )
        by_id = {o.rule_id: o for o in outcomes}

        assert by_id["excessive-piece-requests"].finding_count == 16
        assert by_id["rapid-peer-churn"].finding_count == 2
        assert by_id["suspicious-state-cycling"].finding_count == 1
        assert all(o.status == ComplianceStatus.COMPLIANT for o in outcomes)

    def test_xml_report(self, tdr_xml):
        outcomes = rule_engine_service.evaluate_standard(
            get_standard(XML_TDR_STANDARD_ID), tdr_xml
        )
        by_id = {o.rule_id: o for o in outcomes}

        assert all(o.status == ComplianceStatus.COMPLIANT for o in outcomes)
        assert by_id["xml-timestamps-valid"].findings == [
            "Start time: 2023-11-14 22:13:20.000 UTC (1700000000000000000)",
            "End time: 2023-11-14 22:13:25.500 UTC (1700000005500000000)",
            "Calculated duration: 5.500 seconds",
        ]
        assert by_id["xml-all-files-are-foi"].findings == []

    def test_xml_report_with_non_foi_file(self, tdr_xml):
        document = tdr_xml.replace("movie.mkv (FOI)", "sample.txt (not a FOI)")
        statuses = _statuses(XML_TDR_STANDARD_ID, document)
        assert statuses["xml-all-files-are-foi"] == ComplianceStatus.NON_COMPLIANT


class TestLoadStandard:
    def test_load_from_plain_data(self):
        standard = load_standard(
            {
                "id": "custom",
                "name": "Custom",
                "rules": [
                    {"type": "presence", "id": "hello", "pattern": "(?i)hello"},
                    {
                        "type": "count",
                        "id": "retries",
                        "pattern": r"retry (\d+)",
                        "max_occurrences": 5,
                        "sum_capture_group_index": 1,
                    },
                ],
            }
        )
        outcomes = rule_engine_service.evaluate_standard(standard, "HELLO\nretry 2\nretry 4")

        assert outcomes[0].status == ComplianceStatus.COMPLIANT
        assert outcomes[1].finding_count == 6
        assert outcomes[1].status == ComplianceStatus.NON_COMPLIANT

    def test_malformed_pattern(self):
        with pytest.raises(StandardDefinitionError, match="Standard 'broken'"):
            load_standard(
                {
                    "id": "broken",
                    "name": "Broken",
                    "rules": [{"type": "presence", "id": "p", "pattern": "(oops"}],
                }
            )

    def test_unknown_rule_kind(self):
        with pytest.raises(StandardDefinitionError):
            load_standard(
                {
                    "id": "odd",
                    "name": "Odd",
                    "rules": [{"type": "teleport", "id": "t", "pattern": "x"}],
                }
            )

    def test_compound_of_compound(self):
        with pytest.raises(StandardDefinitionError, match="cannot depend on compound"):
            load_standard(
                {
                    "id": "nested",
                    "name": "Nested",
                    "rules": [
                        {"type": "presence", "id": "p", "pattern": "x"},
                        {"type": "compound", "id": "c1", "depends_on_rule_ids": ["p"]},
                        {"type": "compound", "id": "c2", "depends_on_rule_ids": ["c1"]},
                    ],
                }
            )
