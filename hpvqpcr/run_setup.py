"""Run setup for the Rotor-Gene: tube order and the .smp sample sheet."""

from typing import List
from xml.sax.saxutils import escape

from hpvqpcr.constants import (
    NEGATIVE_CONTROL_TOKEN,
    NTC_NAME,
    POSITIVE_CONTROL_PREFIX,
    AnalysisConstants,
)

# Colour sequence taken from a valid .smp file; cycled over the 72 positions.
ROTOR_GENE_COLORS = [
    255, 51400, 16711680, 8388736, 16744703, 16744448, 8421376, 8421631, 1677088, 16711935,
    197379, 13158400, 8504538, 8510085, 13491072, 14395776, 14450322, 14515654, 11893982,
    174, 96685, 109955, 10267905, 11433472, 11403264, 11338136, 6553774, 14013909, 12566463,
    9803157, 7697781, 5526612,
]

SAMPLE_TEMPLATE = """
<Sample>
<ID>{position}</ID>
<Name>{name}</Name>
<Type>2</Type>
<GivenConc>0</GivenConc>
<Selected>{selected}</Selected>
<Color>{color}</Color>
<TubePosition>{position}</TubePosition>
<LinePattern>0</LinePattern>
<ReadOnly>False</ReadOnly>
</Sample>"""

SHEET_TEMPLATE = """<?xml version='1.0' encoding='utf-8'?>
<ExperimentSamples>
<RexHeader>3.15</RexHeader>
<Samples>
<TranslatedRows>False</TranslatedRows>
<Format>General Number</Format>
<ConcentrationUnit>copies/ul</ConcentrationUnit>
<IDFormat>1</IDFormat>
<SyncPages>False</SyncPages>
<ReadOnly>False</ReadOnly>
<Page>
<Name>{page_name}</Name>
<Suitabilities>
<SuitableForAll>True</SuitableForAll>
</Suitabilities>{samples}
</Page>
<Groups />
<CustomColumns />
<HiddenColumns />
</Samples>
</ExperimentSamples>"""


def generate_final_list(
    patient_samples: List[str],
    positive: bool = False,
    negative: bool = False,
    ntc: bool = False,
    mixes: int = AnalysisConstants.NUMBER_OF_MIXES,
) -> List[str]:
    """Build the tube order for every genotyping mix.

    With any control selected each mix is ``POS-i``, ``NEG Cont``, the
    patients and ``NTC`` (controls only where selected). Without controls the
    first patient of each mix gets a ``-Mix i`` suffix.

    Args:
        patient_samples: Patient sample names in loading order
        positive: Include a positive control per mix
        negative: Include a negative control per mix
        ntc: Include a no-template control per mix
        mixes: Number of mixes on the run

    Returns:
        Flat list of tube names
    """
    any_control = positive or negative or ntc
    if not patient_samples and not any_control:
        return []

    final_list = []
    for i in range(1, mixes + 1):
        if any_control:
            if positive:
                final_list.append(f"{POSITIVE_CONTROL_PREFIX}{i}")
            if negative:
                final_list.append(NEGATIVE_CONTROL_TOKEN)
            final_list.extend(patient_samples)
            if ntc:
                final_list.append(NTC_NAME)
        else:
            final_list.append(f"{patient_samples[0]}-Mix {i}")
            final_list.extend(patient_samples[1:])
    return final_list


def generate_sample_xml(
    sample_names: List[str],
    page_name: str = "HPV",
    max_samples: int = AnalysisConstants.MAX_RUN_POSITIONS,
) -> str:
    """Render the Rotor-Gene sample sheet (.smp) for the given tube order."""
    tags = []
    for index in range(max_samples):
        name = sample_names[index] if index < len(sample_names) else ""
        tags.append(SAMPLE_TEMPLATE.format(
            position=index + 1,
            name=escape(name),
            selected="True" if name else "False",
            color=ROTOR_GENE_COLORS[index % len(ROTOR_GENE_COLORS)],
        ))
    return SHEET_TEMPLATE.format(page_name=escape(page_name), samples="".join(tags)).strip()
