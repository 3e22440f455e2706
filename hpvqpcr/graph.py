"""GraphGenerator — Plotly overview of Ct values by sample and channel."""

from typing import List

import numpy as np
import plotly.graph_objects as go

from hpvqpcr.constants import HPV_LOOKUP_TABLE
from hpvqpcr.models import EnrichedReading
from hpvqpcr.utils import natural_sort_key, parse_ct


class GraphGenerator:
    @staticmethod
    def create_ct_heatmap(readings: List[EnrichedReading], title: str = "Ct by Sample and Channel") -> go.Figure:
        """Heatmap of Ct per sample (rows) and channel (columns).

        Repeated readings of the same sample/channel show the earliest Ct.
        Cells without amplification stay blank.
        """
        if not readings:
            fig = go.Figure()
            fig.add_annotation(text="No data available", showarrow=False)
            return fig

        channels = list(HPV_LOOKUP_TABLE)
        samples = sorted({r.sample_name for r in readings}, key=natural_sort_key)
        s_idx = {name: i for i, name in enumerate(samples)}
        c_idx = {name: i for i, name in enumerate(channels)}

        values = np.full((len(samples), len(channels)), np.nan)
        text = [["" for _ in channels] for _ in samples]

        for r in readings:
            if r.channel not in c_idx:
                continue
            ct = parse_ct(r.ct)
            if ct is None or not r.detected:
                continue
            i, j = s_idx[r.sample_name], c_idx[r.channel]
            if np.isnan(values[i, j]) or ct < values[i, j]:
                values[i, j] = ct
                text[i][j] = f"{r.sample_name}<br>{r.channel}<br>{r.resolved_type}<br>Ct: {ct:.1f}"

        fig = go.Figure(
            data=go.Heatmap(
                z=values,
                x=channels,
                y=samples,
                text=text,
                hoverinfo="text",
                colorscale=[[0, "#2ecc71"], [0.5, "#f1c40f"], [1, "#e74c3c"]],
                zmin=15,
                zmax=40,
                colorbar=dict(title="Ct Value"),
            )
        )

        fig.update_layout(
            title=title,
            xaxis=dict(title="Channel", side="top"),
            yaxis=dict(title="Sample", autorange="reversed"),
            height=max(400, 22 * len(samples)),
            width=700,
        )
        return fig
