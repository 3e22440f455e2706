#!/usr/bin/env python3
"""
HPV Run Validation Script
=========================
Checks the genotype calls for one Rotor-Gene export against reference results.

Usage:
    python validate_run.py <export.csv> [expected.json]

The expected file maps sample names to the reference calls, e.g.
``{"Sample1": {"highRiskTypes": "51", "lowRiskTypes": ""}}``. Without it the
script only prints the verdicts and the QC outcome.

This script will:
1. Parse and analyze the export with the same pipeline as the application
2. Print each sample verdict and every QC issue
3. Compare verdicts against the reference calls, when given
"""

import json
import sys
from pathlib import Path

from hpvqpcr import AnalysisError, RotorGeneParser, analyze
from hpvqpcr.utils import natural_sort_key

COMPARED_FIELDS = ("hpvDetection", "highRiskTypes", "lowRiskTypes")


def validate_run(export_path, expected_path=None):
    """Main validation function."""

    print("=" * 100)
    print("HPV Genotyping Run Validation")
    print("=" * 100)

    export_file = Path(export_path)
    if not export_file.exists():
        print(f"❌ ERROR: Export file not found: {export_file}")
        return False

    print(f"\n✓ Loading export: {export_file}")
    try:
        content = RotorGeneParser.decode(export_file.read_bytes())
        result = analyze(content)
    except AnalysisError as e:
        print(f"❌ ERROR: {e}")
        return False

    print(f"✓ Parsed {len(result.readings)} readings from {result.sample_count} samples")

    expected = {}
    if expected_path:
        with open(expected_path, "r") as f:
            expected = json.load(f)
        print(f"✓ Reference calls for {len(expected)} samples")

    print(f"\n{'=' * 100}")
    print("Sample verdicts")
    print(f"{'=' * 100}")

    all_match = True
    for name in sorted(result.verdicts, key=natural_sort_key):
        verdict = result.verdicts[name].to_dict()
        reference = expected.get(name)

        if reference is None:
            print(f"\nSample {name}:")
        else:
            mismatches = [
                key for key in COMPARED_FIELDS
                if key in reference and reference[key] != verdict[key]
            ]
            all_match = all_match and not mismatches
            print(f"\nSample {name}: {'❌' if mismatches else '✅'}")
            for key in mismatches:
                print(f"  ⚠ {key}: {verdict[key]!r} (Expected: {reference[key]!r})")

        print(f"  HPV: {verdict['hpvDetection']}")
        print(f"  High risk: {verdict['highRiskStatus']} {verdict['highRiskTypes']}".rstrip())
        print(f"  Low risk: {verdict['lowRiskStatus']} {verdict['lowRiskTypes']}".rstrip())

    missing = sorted(set(expected) - set(result.verdicts), key=natural_sort_key)
    for name in missing:
        print(f"\nSample {name}: ❌ not found in export")
    all_match = all_match and not missing

    qc = result.qc_result
    print(f"\n{'=' * 100}")
    print(f"QC: {qc.status.value}")
    for issue in qc.issues:
        print(f"  [{issue.severity.value}] {issue.message}")

    passed = all_match and qc.passed
    print(f"\n{'=' * 100}")
    if passed:
        print("✅ VALIDATION PASSED - Verdicts match the reference and QC passed")
    else:
        print("❌ VALIDATION FAILED - See the discrepancies above")
    print(f"{'=' * 100}\n")

    return passed


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(2)
    success = validate_run(sys.argv[1], sys.argv[2] if len(sys.argv) > 2 else None)
    sys.exit(0 if success else 1)
