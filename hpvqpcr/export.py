"""Export functions for HPV genotyping results.

Provides multi-sheet Excel export with analysis parameters, raw instrument
rows, per-channel readings, per-sample verdicts and the QC report.
"""

import io
from typing import Dict, List, Optional

import pandas as pd

from hpvqpcr.aggregation import ResultAggregator, interpret
from hpvqpcr.enrichment import ReadingEnricher
from hpvqpcr.models import EnrichedReading, QcResult, RawRow, SampleVerdict
from hpvqpcr.parser import RotorGeneParser
from hpvqpcr.quality_control import QualityControl
from hpvqpcr.utils import natural_sort_key


def export_to_excel(
    readings: List[EnrichedReading],
    verdicts: Dict[str, SampleVerdict],
    qc_result: Optional[QcResult] = None,
    params: dict = None,
    raw_rows: Optional[List[RawRow]] = None,
) -> bytes:
    """Export an Excel workbook with readings, sample results and QC report.

    Args:
        readings: Enriched readings for the batch.
        verdicts: Aggregated verdicts keyed by sample name.
        qc_result: Optional QC result; the QC sheet is omitted when None.
        params: Optional analysis parameters (file name, operator, ...).
        raw_rows: Optional parsed instrument rows; written to a Raw_Data sheet.
    """
    output = io.BytesIO()

    with pd.ExcelWriter(output, engine="xlsxwriter") as writer:
        pd.DataFrame([params or {}]).to_excel(
            writer, sheet_name="Analysis_Parameters", index=False
        )

        if raw_rows:
            RotorGeneParser.to_dataframe(raw_rows).to_excel(
                writer, sheet_name="Raw_Data", index=False
            )

        ReadingEnricher.to_dataframe(readings).to_excel(
            writer, sheet_name="Readings", index=False
        )

        ordered = {name: verdicts[name] for name in sorted(verdicts, key=natural_sort_key)}
        results = ResultAggregator.to_dataframe(ordered)
        results["interpretation"] = [interpret(v).value for v in ordered.values()]
        results.to_excel(writer, sheet_name="Sample_Results", index=False)

        _write_qc_sheet(writer, readings, qc_result)

    return output.getvalue()


def _write_qc_sheet(writer, readings: List[EnrichedReading], qc_result: Optional[QcResult]):
    """Write QC Report sheet with summary stats and the itemized issues."""
    if qc_result is None:
        return

    stats = QualityControl.get_qc_summary_stats(readings, qc_result)
    rows = [
        {"Metric": "QC Status", "Value": stats["status"]},
        {"Metric": "Total Readings", "Value": stats["total_readings"]},
        {"Metric": "Samples", "Value": stats["n_samples"]},
        {"Metric": "Control Readings", "Value": stats["control_readings"]},
        {"Metric": "Detected Readings", "Value": stats["detected_readings"]},
        {"Metric": "Unresolved Detected Readings", "Value": stats["unresolved_readings"]},
        {"Metric": "Errors", "Value": stats["errors"]},
        {"Metric": "Warnings", "Value": stats["warnings"]},
    ]
    pd.DataFrame(rows).to_excel(writer, sheet_name="QC_Report", index=False, startrow=0)

    if qc_result.issues:
        issues = pd.DataFrame([issue.to_dict() for issue in qc_result.issues])
        issues.to_excel(
            writer, sheet_name="QC_Report", index=False, startrow=len(rows) + 3
        )
