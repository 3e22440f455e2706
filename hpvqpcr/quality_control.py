"""QualityControl — batch-level run control checks.

Evaluates positive control, negative control, NTC and internal control rules
over enriched readings. Every rule runs; issues accumulate in rule order and
then input order. No exception is raised for a failing batch.
"""

from typing import Dict, List, Optional

from hpvqpcr.aggregation import ResultAggregator
from hpvqpcr.config import get_config
from hpvqpcr.constants import QC_MESSAGES, AnalysisConstants
from hpvqpcr.models import (
    DetectionStatus,
    EnrichedReading,
    QcIssue,
    QcResult,
    QcSeverity,
    QcStatus,
    SampleRole,
    SampleVerdict,
)
from hpvqpcr.utils import display_ct, is_negative_control, parse_ct


class QualityControl:
    POS_CT_THRESHOLD = AnalysisConstants.POS_CT_THRESHOLD
    IC_CT_THRESHOLD = AnalysisConstants.IC_CT_THRESHOLD

    @staticmethod
    def _amplified_within(reading: EnrichedReading, threshold: float) -> bool:
        ct = parse_ct(reading.ct)
        return (
            ct is not None
            and ct <= threshold
            and reading.detection_status is DetectionStatus.DETECTED
        )

    @staticmethod
    def check_positive_controls(
        readings: List[EnrichedReading], threshold: float = POS_CT_THRESHOLD
    ) -> List[QcIssue]:
        issues = []
        for r in readings:
            if r.role is not SampleRole.POSITIVE_CONTROL or r.resolved_type.is_internal_control:
                continue
            if not QualityControl._amplified_within(r, threshold):
                issues.append(QcIssue(
                    QcSeverity.ERROR,
                    QC_MESSAGES["positive_control"].format(
                        name=r.sample_name, channel=r.channel,
                        ct=display_ct(r.ct), threshold=threshold,
                    ),
                ))
        return issues

    @staticmethod
    def check_negative_controls(readings: List[EnrichedReading]) -> List[QcIssue]:
        issues = []
        for r in readings:
            if not is_negative_control(r.sample_name) or r.resolved_type.is_internal_control:
                continue
            if r.detected:
                issues.append(QcIssue(
                    QcSeverity.ERROR,
                    QC_MESSAGES["negative_control"].format(
                        name=r.sample_name, channel=r.channel, ct=display_ct(r.ct)
                    ),
                ))
        return issues

    @staticmethod
    def check_ntc(readings: List[EnrichedReading]) -> List[QcIssue]:
        return [
            QcIssue(
                QcSeverity.ERROR,
                QC_MESSAGES["ntc"].format(channel=r.channel, ct=display_ct(r.ct)),
            )
            for r in readings
            if r.role is SampleRole.NTC and r.detected
        ]

    @staticmethod
    def check_internal_controls(
        readings: List[EnrichedReading],
        verdicts: Dict[str, SampleVerdict],
        threshold: float = IC_CT_THRESHOLD,
    ) -> List[QcIssue]:
        """Internal control must amplify for controls and HPV-negative samples.

        HPV-positive patient samples are exempt.
        """
        negative_names = {
            name for name, v in verdicts.items()
            if v.hpv_detection is DetectionStatus.NOT_DETECTED
        }
        control_names = {
            r.sample_name for r in readings
            if r.role in (SampleRole.POSITIVE_CONTROL, SampleRole.NEGATIVE_CONTROL)
        }

        issues = []
        for r in readings:
            if not r.resolved_type.is_internal_control:
                continue
            if r.sample_name not in negative_names and r.sample_name not in control_names:
                continue
            if not QualityControl._amplified_within(r, threshold):
                issues.append(QcIssue(
                    QcSeverity.ERROR,
                    QC_MESSAGES["internal_control"].format(
                        name=r.sample_name, channel=r.channel,
                        ct=display_ct(r.ct), threshold=threshold,
                    ),
                ))
        return issues

    @staticmethod
    def check_unresolved(readings: List[EnrichedReading]) -> List[QcIssue]:
        return [
            QcIssue(
                QcSeverity.WARNING,
                QC_MESSAGES["unresolved"].format(
                    name=r.sample_name, channel=r.channel, ct=display_ct(r.ct)
                ),
            )
            for r in readings
            if r.unresolved
        ]

    @staticmethod
    def run_checks(
        readings: List[EnrichedReading],
        verdicts: Optional[Dict[str, SampleVerdict]] = None,
        config: Optional[Dict] = None,
        strict: Optional[bool] = None,
    ) -> QcResult:
        """Run every QC rule over one batch.

        Args:
            readings: Enriched readings, before aggregation
            verdicts: Aggregated verdicts for the same readings; recomputed
                when omitted
            config: Optional overrides for ``QC_THRESHOLDS`` and ``STRICT_QC``
            strict: Also warn about detected readings with no genotype;
                defaults to the ``STRICT_QC`` setting

        Returns:
            QcResult, Failed when any issue was raised
        """
        settings = get_config(config)
        thresholds = settings["QC_THRESHOLDS"]
        if strict is None:
            strict = settings["STRICT_QC"]
        if verdicts is None:
            verdicts = ResultAggregator.aggregate(readings)

        issues = []
        issues += QualityControl.check_positive_controls(readings, thresholds["POS_CT_THRESHOLD"])
        issues += QualityControl.check_negative_controls(readings)
        issues += QualityControl.check_ntc(readings)
        issues += QualityControl.check_internal_controls(
            readings, verdicts, thresholds["IC_CT_THRESHOLD"]
        )
        if strict:
            issues += QualityControl.check_unresolved(readings)

        return QcResult(
            status=QcStatus.FAILED if issues else QcStatus.PASSED,
            issues=issues,
        )

    @staticmethod
    def get_qc_summary_stats(readings: List[EnrichedReading], qc_result: QcResult) -> dict:
        """Calculate overall QC summary statistics for the batch."""
        return {
            "total_readings": len(readings),
            "n_samples": len({r.sample_name for r in readings}),
            "control_readings": sum(1 for r in readings if r.role.is_control),
            "detected_readings": sum(1 for r in readings if r.detected),
            "unresolved_readings": sum(1 for r in readings if r.unresolved),
            "errors": sum(1 for i in qc_result.issues if i.severity is QcSeverity.ERROR),
            "warnings": sum(1 for i in qc_result.issues if i.severity is QcSeverity.WARNING),
            "status": qc_result.status.value,
        }
