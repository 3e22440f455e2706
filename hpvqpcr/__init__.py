"""HPV Genotyping qPCR Interpretation Package.

Interprets Rotor-Gene multi-channel exports for HPV genotyping. Provides:
- GenotypeRegistry: channel/position genotype lookup and risk tiers
- RotorGeneParser: multi-section export parsing
- ReadingEnricher: detection status, genotype and risk per reading
- ResultAggregator: per-sample verdicts, reconciliation and interpretation
- QualityControl: batch QC rules for run controls
- analyze: end-to-end pipeline with test-credit gating
- GraphGenerator / export_to_excel: Ct heatmap and Excel export
- generate_final_list / generate_sample_xml: Rotor-Gene run setup
"""

from hpvqpcr.constants import (
    HPV_LOOKUP_TABLE,
    HIGH_RISK_GENOTYPES,
    LOW_RISK_GENOTYPES,
    INTERNAL_CONTROL_NAME,
    CHANNEL_NAME_MAP,
    AnalysisConstants,
)
from hpvqpcr.config import DEFAULT_CONFIG, load_config, save_config
from hpvqpcr.errors import (
    AnalysisError,
    InvalidFileFormat,
    EmptyDataSet,
    MissingNameColumn,
    FileTooLarge,
    InsufficientTestCredits,
    RegistryError,
)
from hpvqpcr.models import (
    DetectionStatus,
    ResolvedKind,
    ResolvedType,
    SampleRole,
    RawRow,
    EnrichedReading,
    DetectedGenotype,
    SampleVerdict,
    QcSeverity,
    QcStatus,
    QcIssue,
    QcResult,
)
from hpvqpcr.utils import natural_sort_key, parse_ct
from hpvqpcr.registry import GenotypeRegistry
from hpvqpcr.parser import RotorGeneParser
from hpvqpcr.enrichment import ReadingEnricher
from hpvqpcr.aggregation import (
    ResultAggregator,
    ReconciliationStatus,
    ReconciledSample,
    Interpretation,
    reconcile,
    interpret,
)
from hpvqpcr.quality_control import QualityControl
from hpvqpcr.pipeline import AnalysisResult, analyze, select_samples, unique_sample_names
from hpvqpcr.run_setup import generate_final_list, generate_sample_xml
from hpvqpcr.graph import GraphGenerator
from hpvqpcr.export import export_to_excel

__all__ = [
    "HPV_LOOKUP_TABLE",
    "HIGH_RISK_GENOTYPES",
    "LOW_RISK_GENOTYPES",
    "INTERNAL_CONTROL_NAME",
    "CHANNEL_NAME_MAP",
    "AnalysisConstants",
    "DEFAULT_CONFIG",
    "load_config",
    "save_config",
    "AnalysisError",
    "InvalidFileFormat",
    "EmptyDataSet",
    "MissingNameColumn",
    "FileTooLarge",
    "InsufficientTestCredits",
    "RegistryError",
    "DetectionStatus",
    "ResolvedKind",
    "ResolvedType",
    "SampleRole",
    "RawRow",
    "EnrichedReading",
    "DetectedGenotype",
    "SampleVerdict",
    "QcSeverity",
    "QcStatus",
    "QcIssue",
    "QcResult",
    "natural_sort_key",
    "parse_ct",
    "GenotypeRegistry",
    "RotorGeneParser",
    "ReadingEnricher",
    "ResultAggregator",
    "ReconciliationStatus",
    "ReconciledSample",
    "Interpretation",
    "reconcile",
    "interpret",
    "QualityControl",
    "AnalysisResult",
    "analyze",
    "select_samples",
    "unique_sample_names",
    "generate_final_list",
    "generate_sample_xml",
    "GraphGenerator",
    "export_to_excel",
]
