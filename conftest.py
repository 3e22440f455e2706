"""
Pytest configuration and fixtures for HPV qPCR interpretation tests.

Provides Rotor-Gene export text in the layouts seen in the lab, plus
pre-parsed and pre-enriched data built from it.
"""

import pytest

from hpvqpcr.enrichment import ReadingEnricher
from hpvqpcr.parser import RotorGeneParser
from hpvqpcr.registry import GenotypeRegistry

HEADER = "No.,Colour,Name,Type,Ct,Given Conc (copies/reaction),Calc Conc (copies/reaction),% Var"


def make_section(channel_title, rows, header=HEADER):
    """Build one export section: title, threshold lines, header and rows.

    ``rows`` is a list of (name, ct) pairs.
    """
    lines = [
        f"Quantitative analysis of {channel_title}",
        "Threshold,0.05",
        "Left Threshold,1.000",
        "Start normalising from cycle,1",
        "",
        header,
    ]
    for i, (name, ct) in enumerate(rows, start=1):
        lines.append(f"{i},,{name},Unknown,{ct},,,")
    lines.append("")
    return "\n".join(lines)


def make_export(*sections):
    preamble = "\n".join([
        "Experiment Information,",
        "Run Name,HPV Genotyping 2024-05-14",
        "Operator,lab",
        "",
    ])
    return preamble + "\n" + "\n".join(sections)


@pytest.fixture
def registry():
    return GenotypeRegistry.default()


@pytest.fixture
def scenario_a_content():
    """One Green section: POS-1 then a sample detected at Ct 22."""
    return make_export(
        make_section("Cycling A.Green (Page 1)", [("POS-1", "20.0"), ("Sample1", "22.0")])
    )


@pytest.fixture
def full_run_content():
    """Four channels, one positive control each, two patients and controls.

    Sample1 is HPV 51 (Green), Sample2 is HPV 16 (Yellow). Red carries the
    internal control after POS-7 and every sample amplifies it.
    """
    return make_export(
        make_section("Cycling A.Green (Page 1)", [
            ("POS-1", "20.51"), ("NEG Cont", ""), ("Sample1", "22.10"),
            ("Sample2", ""), ("NTC", ""),
        ]),
        make_section("Cycling A.Yellow (Page 2)", [
            ("POS-1", "21.02"), ("NEG Cont", ""), ("Sample1", ""),
            ("Sample2", "24.30"), ("NTC", ""),
        ]),
        make_section("Cycling A.Orange (Page 3)", [
            ("POS-1", "19.80"), ("NEG Cont", ""), ("Sample1", ""),
            ("Sample2", ""), ("NTC", ""),
        ]),
        make_section("Cycling A.Red (Page 4)", [
            ("POS-7", "23.00"), ("NEG Cont", "28.40"), ("Sample1", "27.00"),
            ("Sample2", "26.50"), ("NTC", ""),
        ]),
    )


@pytest.fixture
def full_run_rows(full_run_content):
    return RotorGeneParser.parse(full_run_content)


@pytest.fixture
def full_run_readings(full_run_rows, registry):
    return ReadingEnricher.enrich(full_run_rows, registry)
