"""Data types for the HPV interpretation pipeline.

Statuses and resolved types are enums internally; the exact strings used by
reports and history records are produced only by ``str()`` and ``to_dict()``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from hpvqpcr.constants import (
    DETECTED,
    INTERNAL_CONTROL_NAME,
    NOT_APPLICABLE,
    NOT_DETECTED,
    NTC_DETECTED,
    POSITIVE_CONTROL_PREFIX,
    POSITIVE_UNKNOWN,
)
from hpvqpcr.utils import is_negative_control, is_ntc, is_positive_control


class DetectionStatus(Enum):
    DETECTED = DETECTED
    NOT_DETECTED = NOT_DETECTED

    def __str__(self):
        return self.value


class SampleRole(Enum):
    NTC = "ntc"
    POSITIVE_CONTROL = "positive_control"
    NEGATIVE_CONTROL = "negative_control"
    SAMPLE = "sample"

    @classmethod
    def of(cls, name: str) -> "SampleRole":
        """Classify a sample name; NTC wins over POS- which wins over NEG Cont."""
        if is_ntc(name):
            return cls.NTC
        if is_positive_control(name):
            return cls.POSITIVE_CONTROL
        if is_negative_control(name):
            return cls.NEGATIVE_CONTROL
        return cls.SAMPLE

    @property
    def is_control(self) -> bool:
        return self is not SampleRole.SAMPLE


class ResolvedKind(Enum):
    GENOTYPE = "genotype"
    POSITIVE_CONTROL = "positive_control"
    NOT_APPLICABLE = "not_applicable"
    NTC_DETECTED = "ntc_detected"
    INTERNAL_CONTROL = "internal_control"


@dataclass(frozen=True)
class ResolvedType:
    kind: ResolvedKind
    code: Optional[str] = None

    @classmethod
    def genotype(cls, code: str) -> "ResolvedType":
        if code == INTERNAL_CONTROL_NAME:
            return cls(ResolvedKind.INTERNAL_CONTROL)
        return cls(ResolvedKind.GENOTYPE, code)

    @classmethod
    def positive_control(cls, code: Optional[str]) -> "ResolvedType":
        return cls(ResolvedKind.POSITIVE_CONTROL, code)

    @classmethod
    def not_applicable(cls) -> "ResolvedType":
        return cls(ResolvedKind.NOT_APPLICABLE)

    @classmethod
    def ntc_detected(cls) -> "ResolvedType":
        return cls(ResolvedKind.NTC_DETECTED)

    @classmethod
    def internal_control(cls) -> "ResolvedType":
        return cls(ResolvedKind.INTERNAL_CONTROL)

    @property
    def is_internal_control(self) -> bool:
        return self.kind is ResolvedKind.INTERNAL_CONTROL

    def __str__(self):
        if self.kind is ResolvedKind.GENOTYPE:
            return self.code
        if self.kind is ResolvedKind.POSITIVE_CONTROL:
            return f"{POSITIVE_CONTROL_PREFIX}{self.code}" if self.code else POSITIVE_UNKNOWN
        if self.kind is ResolvedKind.NTC_DETECTED:
            return NTC_DETECTED
        if self.kind is ResolvedKind.INTERNAL_CONTROL:
            return INTERNAL_CONTROL_NAME
        return NOT_APPLICABLE


class RiskTier(Enum):
    HIGH = "high"
    LOW = "low"


@dataclass(frozen=True)
class RawRow:
    """One instrument-reported row, keyed by the section header."""

    channel: str
    fields: Dict[str, str]

    def get(self, column: Optional[str], default: str = "") -> str:
        if column is None:
            return default
        return self.fields.get(column, default)


@dataclass(frozen=True)
class EnrichedReading:
    channel: str
    sample_name: str
    ct: str
    detection_status: DetectionStatus
    resolved_type: ResolvedType
    high_risk_genotype: str = ""
    low_risk_genotype: str = ""

    @property
    def role(self) -> SampleRole:
        return SampleRole.of(self.sample_name)

    @property
    def detected(self) -> bool:
        return self.detection_status is DetectionStatus.DETECTED

    @property
    def high_risk(self) -> bool:
        return bool(self.high_risk_genotype)

    @property
    def low_risk(self) -> bool:
        return bool(self.low_risk_genotype)

    @property
    def unresolved(self) -> bool:
        """Detected signal on a non-NTC, non-positive row that got no genotype."""
        return (
            self.detected
            and self.role in (SampleRole.SAMPLE, SampleRole.NEGATIVE_CONTROL)
            and self.resolved_type.kind is ResolvedKind.NOT_APPLICABLE
        )

    def to_dict(self) -> dict:
        return {
            "Channel": self.channel,
            "Name": self.sample_name,
            "Ct": self.ct,
            "Detection Status": str(self.detection_status),
            "HPV Type": str(self.resolved_type),
            "HighR": DETECTED if self.high_risk else NOT_DETECTED,
            "LowR": DETECTED if self.low_risk else NOT_DETECTED,
            "HType": self.high_risk_genotype,
            "LType": self.low_risk_genotype,
        }


@dataclass(frozen=True)
class DetectedGenotype:
    genotype: str
    ct: str


@dataclass(frozen=True)
class SampleVerdict:
    sample_name: str
    hpv_detection: DetectionStatus
    high_risk_status: DetectionStatus
    high_risk_types: str
    low_risk_status: DetectionStatus
    low_risk_types: str
    high_risk_genotypes_detailed: List[DetectedGenotype] = field(default_factory=list)
    low_risk_genotypes_detailed: List[DetectedGenotype] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "name": self.sample_name,
            "hpvDetection": str(self.hpv_detection),
            "highRiskStatus": str(self.high_risk_status),
            "highRiskTypes": self.high_risk_types,
            "lowRiskStatus": str(self.low_risk_status),
            "lowRiskTypes": self.low_risk_types,
            "highRiskGenotypesDetailed": [
                {"genotype": g.genotype, "ct": g.ct} for g in self.high_risk_genotypes_detailed
            ],
            "lowRiskGenotypesDetailed": [
                {"genotype": g.genotype, "ct": g.ct} for g in self.low_risk_genotypes_detailed
            ],
        }


class QcSeverity(Enum):
    ERROR = "error"
    WARNING = "warning"


class QcStatus(Enum):
    PASSED = "Passed"
    FAILED = "Failed"


@dataclass(frozen=True)
class QcIssue:
    severity: QcSeverity
    message: str

    def to_dict(self) -> dict:
        return {"type": self.severity.value, "message": self.message}


@dataclass(frozen=True)
class QcResult:
    status: QcStatus
    issues: List[QcIssue] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.status is QcStatus.PASSED

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "issues": [issue.to_dict() for issue in self.issues],
        }
