"""ReadingEnricher — detection status, genotype and risk tier per raw row.

The instrument does not report a genotype for ordinary samples. A channel's
genotype for a sample row is taken from the most recent positive control seen
in that channel, so rows must be processed in their original order.
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd

from hpvqpcr.constants import COLUMN_ALIASES
from hpvqpcr.errors import MissingNameColumn
from hpvqpcr.models import (
    DetectionStatus,
    EnrichedReading,
    RawRow,
    ResolvedKind,
    ResolvedType,
    RiskTier,
    SampleRole,
)
from hpvqpcr.registry import GenotypeRegistry
from hpvqpcr.utils import leading_genotype_code, parse_ct

logger = logging.getLogger(__name__)


class ReadingEnricher:
    @staticmethod
    def resolve_columns(columns: Iterable[str]) -> Tuple[str, Optional[str]]:
        """Find the name and Ct columns by case-insensitive alias.

        Returns:
            Tuple of (name_column, ct_column); ct_column is None when absent

        Raises:
            MissingNameColumn: no column matches a name alias
        """
        columns = list(columns)
        resolved = {}
        for field, aliases in COLUMN_ALIASES.items():
            resolved[field] = next(
                (c for c in columns if c.strip().lower() in aliases), None
            )

        if resolved["name"] is None:
            raise MissingNameColumn(
                f"No sample name column found (expected one of: {', '.join(COLUMN_ALIASES['name'])})."
            )
        if resolved["ct"] is None:
            logger.warning("No Ct column found; every reading will be Not Detected")
        return resolved["name"], resolved["ct"]

    @staticmethod
    def determine_detection_status(ct: str) -> DetectionStatus:
        value = parse_ct(ct)
        if value is None or value <= 0:
            return DetectionStatus.NOT_DETECTED
        return DetectionStatus.DETECTED

    @staticmethod
    def determine_hpv_type(
        name: str,
        channel: str,
        status: DetectionStatus,
        last_positive_control: Optional[str],
        registry: GenotypeRegistry,
    ) -> ResolvedType:
        role = SampleRole.of(name)

        if role is SampleRole.NTC:
            if status is DetectionStatus.DETECTED:
                return ResolvedType.ntc_detected()
            return ResolvedType.not_applicable()

        if role is SampleRole.POSITIVE_CONTROL:
            return ResolvedType.positive_control(registry.genotype_for(channel, name))

        if status is DetectionStatus.DETECTED:
            code = registry.genotype_for(channel, last_positive_control)
            if code is not None:
                return ResolvedType.genotype(code)

        # TODO: surface "detected but unresolved" as its own kind once history
        # records can store it; QualityControl(strict=True) flags it for now
        return ResolvedType.not_applicable()

    @staticmethod
    def classify_risk(resolved: ResolvedType, registry: GenotypeRegistry) -> Tuple[str, str]:
        """Return (high_risk_genotype, low_risk_genotype); at most one is set."""
        if resolved.kind is not ResolvedKind.GENOTYPE:
            return "", ""
        code = leading_genotype_code(resolved.code)
        tier = registry.risk_tier(code)
        if tier is RiskTier.HIGH:
            return code, ""
        if tier is RiskTier.LOW:
            return "", code
        return "", ""

    @staticmethod
    def enrich(
        rows: List[RawRow], registry: GenotypeRegistry = None
    ) -> List[EnrichedReading]:
        """Classify every raw row in input order.

        Args:
            rows: Raw rows exactly as parsed, across all channels
            registry: Genotype lookup; the built-in table when omitted

        Returns:
            One reading per row with a non-blank name, in the same order
        """
        if not rows:
            return []

        registry = registry or GenotypeRegistry.default()
        name_col, ct_col = ReadingEnricher.resolve_columns(rows[0].fields)

        last_positive_control: Dict[str, str] = {}
        readings = []
        skipped = 0

        for row in rows:
            name = row.get(name_col)
            if not name:
                skipped += 1
                continue

            ct = row.get(ct_col)
            status = ReadingEnricher.determine_detection_status(ct)
            resolved = ReadingEnricher.determine_hpv_type(
                name, row.channel, status, last_positive_control.get(row.channel), registry
            )
            high, low = ReadingEnricher.classify_risk(resolved, registry)

            if SampleRole.of(name) is SampleRole.POSITIVE_CONTROL:
                last_positive_control[row.channel] = name

            readings.append(
                EnrichedReading(
                    channel=row.channel,
                    sample_name=name,
                    ct=ct,
                    detection_status=status,
                    resolved_type=resolved,
                    high_risk_genotype=high,
                    low_risk_genotype=low,
                )
            )

        if skipped:
            logger.info(f"Note: {skipped} rows without a sample name were skipped.")

        return readings

    @staticmethod
    def to_dataframe(readings: List[EnrichedReading]) -> pd.DataFrame:
        return pd.DataFrame(
            [r.to_dict() for r in readings],
            columns=["Channel", "Name", "Ct", "Detection Status", "HPV Type",
                     "HighR", "LowR", "HType", "LType"],
        )
