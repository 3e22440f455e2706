"""ResultAggregator — per-sample HPV verdicts across all four channels.

Also reconciles verdicts against the registered patient list and maps a
verdict to its clinical interpretation category.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional

import pandas as pd

from hpvqpcr.models import (
    DetectedGenotype,
    DetectionStatus,
    EnrichedReading,
    SampleVerdict,
)
from hpvqpcr.utils import is_control


def _status(flag: bool) -> DetectionStatus:
    return DetectionStatus.DETECTED if flag else DetectionStatus.NOT_DETECTED


def _unique_in_order(values: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(v for v in values if v))


class ResultAggregator:
    @staticmethod
    def aggregate(readings: List[EnrichedReading]) -> Dict[str, SampleVerdict]:
        """Group readings by exact sample name into one verdict per sample.

        Genotype lists keep first-seen order. Detailed lists keep one entry per
        flagged reading, so a genotype seen in two channels appears twice.
        """
        grouped: Dict[str, List[EnrichedReading]] = {}
        for reading in readings:
            grouped.setdefault(reading.sample_name, []).append(reading)

        verdicts = {}
        for name, group in grouped.items():
            high = [r for r in group if r.high_risk]
            low = [r for r in group if r.low_risk]

            verdicts[name] = SampleVerdict(
                sample_name=name,
                hpv_detection=_status(bool(high or low)),
                high_risk_status=_status(bool(high)),
                high_risk_types=", ".join(_unique_in_order(r.high_risk_genotype for r in high)),
                low_risk_status=_status(bool(low)),
                low_risk_types=", ".join(_unique_in_order(r.low_risk_genotype for r in low)),
                high_risk_genotypes_detailed=[
                    DetectedGenotype(genotype=r.high_risk_genotype, ct=r.ct) for r in high
                ],
                low_risk_genotypes_detailed=[
                    DetectedGenotype(genotype=r.low_risk_genotype, ct=r.ct) for r in low
                ],
            )
        return verdicts

    @staticmethod
    def to_dataframe(verdicts: Dict[str, SampleVerdict]) -> pd.DataFrame:
        columns = ["name", "hpvDetection", "highRiskStatus", "highRiskTypes",
                   "lowRiskStatus", "lowRiskTypes"]
        rows = [{k: v.to_dict()[k] for k in columns} for v in verdicts.values()]
        return pd.DataFrame(rows, columns=columns)


# ==================== RECONCILIATION ====================
class ReconciliationStatus(Enum):
    MATCHED = "Matched"
    UNMATCHED = "Unmatched"
    CONTROL = "Control"


@dataclass(frozen=True)
class ReconciledSample:
    verdict: SampleVerdict
    status: ReconciliationStatus
    matched_patient_name: Optional[str] = None

    @property
    def name(self) -> str:
        return self.verdict.sample_name


def reconcile(
    verdicts: Dict[str, SampleVerdict], registered_names: Iterable[str]
) -> List[ReconciledSample]:
    """Match each verdict to a registered patient by exact name.

    Controls are never matched against patients.
    """
    registered = set(registered_names)
    reconciled = []
    for name, verdict in verdicts.items():
        if is_control(name):
            reconciled.append(ReconciledSample(verdict, ReconciliationStatus.CONTROL))
        elif name in registered:
            reconciled.append(ReconciledSample(verdict, ReconciliationStatus.MATCHED, name))
        else:
            reconciled.append(ReconciledSample(verdict, ReconciliationStatus.UNMATCHED))
    return reconciled


# ==================== INTERPRETATION ====================
class Interpretation(Enum):
    HR_16_18 = "hr_16_18"
    HR_OTHER = "hr_other"
    LR_ONLY = "lr_only"
    NEGATIVE = "negative"


PRIORITY_GENOTYPES = ("16", "18")


def interpret(verdict: SampleVerdict) -> Interpretation:
    high_codes = {g.genotype for g in verdict.high_risk_genotypes_detailed}
    if high_codes.intersection(PRIORITY_GENOTYPES):
        return Interpretation.HR_16_18
    if verdict.high_risk_status is DetectionStatus.DETECTED:
        return Interpretation.HR_OTHER
    if verdict.low_risk_status is DetectionStatus.DETECTED:
        return Interpretation.LR_ONLY
    return Interpretation.NEGATIVE
