"""End-to-end analysis of one instrument export.

Parsing and enrichment always run over the whole file so that positive
control carry-forward sees every row. Sample selection is applied only to the
enriched readings, before aggregation and QC.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from hpvqpcr.aggregation import ResultAggregator
from hpvqpcr.config import get_config
from hpvqpcr.enrichment import ReadingEnricher
from hpvqpcr.errors import EmptyDataSet, InsufficientTestCredits
from hpvqpcr.models import EnrichedReading, QcResult, RawRow, SampleVerdict
from hpvqpcr.parser import RotorGeneParser
from hpvqpcr.quality_control import QualityControl
from hpvqpcr.registry import GenotypeRegistry

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    readings: List[EnrichedReading]
    verdicts: Dict[str, SampleVerdict]
    qc_result: Optional[QcResult]
    sample_count: int
    all_sample_names: List[str] = field(default_factory=list)
    rows: List[RawRow] = field(default_factory=list)


def unique_sample_names(readings: Iterable[EnrichedReading]) -> List[str]:
    """Unique trimmed sample names in first-seen order."""
    return list(dict.fromkeys(r.sample_name.strip() for r in readings))


def select_samples(
    readings: List[EnrichedReading], selected: Iterable[str]
) -> List[EnrichedReading]:
    wanted = {name.strip() for name in selected}
    return [r for r in readings if r.sample_name.strip() in wanted]


def analyze(
    content: str,
    registry: GenotypeRegistry = None,
    selected_samples: Optional[Iterable[str]] = None,
    remaining_tests: Optional[int] = None,
    qc_enabled: bool = True,
    strict: Optional[bool] = None,
    config: Optional[Dict] = None,
) -> AnalysisResult:
    """Parse, enrich, filter, aggregate and QC one export.

    Args:
        content: Full text of the instrument export
        registry: Genotype lookup; the built-in table when omitted
        selected_samples: Sample names to keep; all samples when None
        remaining_tests: Test credits available; unlimited when None
        qc_enabled: Skip QC entirely when False
        strict: Passed to ``QualityControl.run_checks``
        config: Configuration overrides

    Raises:
        InvalidFileFormat, EmptyDataSet, MissingNameColumn: structural errors
        InsufficientTestCredits: more samples than ``remaining_tests``
    """
    settings = get_config(config)
    registry = registry or GenotypeRegistry.default()

    rows = RotorGeneParser.parse(content)
    readings = ReadingEnricher.enrich(rows, registry)
    all_names = unique_sample_names(readings)
    if not all_names:
        raise EmptyDataSet("No samples were found in the export.")

    if selected_samples is not None:
        readings = select_samples(readings, selected_samples)

    names = unique_sample_names(readings)
    if remaining_tests is not None and len(names) > remaining_tests:
        raise InsufficientTestCredits(len(names), remaining_tests, names)

    verdicts = ResultAggregator.aggregate(readings)
    qc_result = None
    if qc_enabled:
        qc_result = QualityControl.run_checks(readings, verdicts, settings, strict)
        if not qc_result.passed:
            logger.warning(f"QC failed with {len(qc_result.issues)} issue(s)")

    logger.info(f"Analyzed {len(names)} samples from {len(readings)} readings")
    return AnalysisResult(
        readings=readings,
        verdicts=verdicts,
        qc_result=qc_result,
        sample_count=len(names),
        all_sample_names=all_names,
        rows=rows,
    )
