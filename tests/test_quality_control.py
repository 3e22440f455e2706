"""
Tests for QualityControl batch rules.

Covers the positive, negative, NTC and internal control checks, their
accumulation, thresholds from configuration and the strict policy.
"""

import pytest

from hpvqpcr.aggregation import ResultAggregator
from hpvqpcr.enrichment import ReadingEnricher
from hpvqpcr.models import QcSeverity, QcStatus, RawRow
from hpvqpcr.quality_control import QualityControl


def enrich(*rows):
    raw = [RawRow(ch, {"Channel": ch, "Name": name, "Ct": ct}) for ch, name, ct in rows]
    return ReadingEnricher.enrich(raw)


class TestQualityControlPassing:
    def test_full_run_passes(self, full_run_readings):
        result = QualityControl.run_checks(full_run_readings)
        assert result.status is QcStatus.PASSED
        assert result.issues == []
        assert result.passed

    def test_precomputed_verdicts_give_same_result(self, full_run_readings):
        verdicts = ResultAggregator.aggregate(full_run_readings)
        assert QualityControl.run_checks(full_run_readings, verdicts) == QualityControl.run_checks(
            full_run_readings
        )


class TestPositiveControlCheck:
    def test_scenario_c_late_positive_control(self):
        readings = enrich(("Green", "POS-1", "38.0"), ("Green", "Sample1", "22.0"))
        result = QualityControl.run_checks(readings)

        assert result.status is QcStatus.FAILED
        assert len(result.issues) == 1
        issue = result.issues[0]
        assert issue.severity is QcSeverity.ERROR
        assert "POS-1" in issue.message
        assert "Green" in issue.message
        assert "38.0" in issue.message

    @pytest.mark.parametrize("ct", ["", "abc", "0"])
    def test_positive_control_not_amplified(self, ct):
        result = QualityControl.run_checks(enrich(("Yellow", "POS-2", ct)))
        assert len(result.issues) == 1
        assert "POS-2" in result.issues[0].message

    def test_missing_ct_uses_placeholder(self):
        result = QualityControl.run_checks(enrich(("Yellow", "POS-2", "")))
        assert "Ct N/A" in result.issues[0].message

    def test_at_threshold_passes(self):
        result = QualityControl.run_checks(enrich(("Green", "POS-1", "35")))
        assert result.passed

    def test_internal_control_position_is_still_checked(self):
        # POS-7 on Red resolves to POS-IC, which is not the bare IC marker
        result = QualityControl.run_checks(enrich(("Red", "POS-7", "36.2")))
        assert len(result.issues) == 1
        assert "POS-7" in result.issues[0].message


class TestNegativeControlCheck:
    def test_amplified_negative_control_fails(self):
        readings = enrich(("Green", "POS-1", "20.0"), ("Green", "NEG Cont", "30.5"))
        result = QualityControl.run_checks(readings)
        assert len(result.issues) == 1
        assert "Negative control" in result.issues[0].message
        assert "30.5" in result.issues[0].message

    def test_negative_control_on_internal_control_is_exempt(self):
        readings = enrich(("Red", "POS-7", "22.0"), ("Red", "NEG Cont", "28.0"))
        assert QualityControl.run_checks(readings).passed

    def test_negative_control_without_prior_positive_still_fails(self):
        result = QualityControl.run_checks(enrich(("Green", "NEG Cont", "30.5")))
        assert len(result.issues) == 1


class TestNtcCheck:
    def test_scenario_d_ntc_amplified(self):
        readings = enrich(("Green", "POS-1", "20.0"), ("Green", "NTC", "25.0"))
        assert str(readings[1].resolved_type) == "N/A (NTC Detected)"

        result = QualityControl.run_checks(readings)
        assert len(result.issues) == 1
        assert "Green" in result.issues[0].message
        assert "25.0" in result.issues[0].message

    def test_ntc_name_must_be_exact(self):
        readings = enrich(("Green", "POS-1", "20.0"), ("Green", "NTC-2", "25.0"))
        assert QualityControl.check_ntc(readings) == []


class TestInternalControlCheck:
    def test_negative_patient_with_late_internal_control_fails(self):
        readings = enrich(("Red", "POS-7", "22.0"), ("Red", "Sample1", "37.0"))
        result = QualityControl.run_checks(readings)
        assert len(result.issues) == 1
        assert "Internal control" in result.issues[0].message
        assert "Sample1" in result.issues[0].message

    def test_positive_patient_is_exempt(self):
        readings = enrich(
            ("Green", "POS-1", "20.0"), ("Green", "Sample1", "22.0"),
            ("Red", "POS-7", "22.0"), ("Red", "Sample1", "37.0"),
        )
        assert QualityControl.run_checks(readings).passed

    def test_control_with_late_internal_control_fails(self):
        readings = enrich(("Red", "POS-7", "22.0"), ("Red", "NEG Cont", "36.0"))
        issues = QualityControl.run_checks(readings).issues
        assert len(issues) == 1
        assert "NEG Cont" in issues[0].message

    def test_internal_control_within_threshold_passes(self):
        readings = enrich(("Red", "POS-7", "22.0"), ("Red", "Sample1", "29.0"))
        assert QualityControl.run_checks(readings).passed


class TestAccumulation:
    def test_rules_do_not_short_circuit(self):
        readings = enrich(
            ("Green", "POS-1", "38.0"),
            ("Green", "NTC", "25.0"),
        )
        result = QualityControl.run_checks(readings)
        assert result.status is QcStatus.FAILED
        assert len(result.issues) == 2

    def test_issue_order_follows_rule_order(self):
        readings = enrich(
            ("Red", "POS-7", "22.0"),
            ("Red", "Sample1", "37.0"),
            ("Green", "NTC", "25.0"),
            ("Green", "NEG Cont", "31.0"),
            ("Green", "POS-1", "38.0"),
        )
        messages = [i.message for i in QualityControl.run_checks(readings).issues]
        assert len(messages) == 4
        assert messages[0].startswith("Positive control POS-1")
        assert messages[1].startswith("Negative control")
        assert messages[2].startswith("No-template control")
        assert messages[3].startswith("Internal control")

    def test_to_dict(self):
        result = QualityControl.run_checks(enrich(("Green", "NTC", "25.0")))
        d = result.to_dict()
        assert d["status"] == "Failed"
        assert d["issues"][0]["type"] == "error"


class TestConfigurationAndStrictPolicy:
    def test_threshold_override(self):
        readings = enrich(("Green", "POS-1", "33.0"))
        config = {"QC_THRESHOLDS": {"POS_CT_THRESHOLD": 32.0}}
        result = QualityControl.run_checks(readings, config=config)
        assert len(result.issues) == 1
        assert "32" in result.issues[0].message

    def test_unresolved_detected_reading_ignored_by_default(self):
        readings = enrich(("Green", "Sample1", "22.0"))
        assert QualityControl.run_checks(readings).passed

    def test_strict_policy_warns_on_unresolved(self):
        readings = enrich(("Green", "Sample1", "22.0"))
        result = QualityControl.run_checks(readings, strict=True)
        assert result.status is QcStatus.FAILED
        assert result.issues[0].severity is QcSeverity.WARNING
        assert "Sample1" in result.issues[0].message

    def test_strict_policy_from_config(self):
        readings = enrich(("Green", "Sample1", "22.0"))
        result = QualityControl.run_checks(readings, config={"STRICT_QC": True})
        assert len(result.issues) == 1


class TestQcSummaryStats:
    def test_summary(self, full_run_readings):
        result = QualityControl.run_checks(full_run_readings)
        stats = QualityControl.get_qc_summary_stats(full_run_readings, result)
        assert stats["total_readings"] == 20
        assert stats["n_samples"] == 6
        assert stats["control_readings"] == 12
        assert stats["errors"] == 0
        assert stats["status"] == "Passed"
