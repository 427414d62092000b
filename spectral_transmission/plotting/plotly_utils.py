import numpy as np
import plotly.graph_objects as go

from spectral_transmission.color import hsla, trace_colors, wavelength_to_hue
from spectral_transmission.constants import DASH_STYLES, TRANSMITTED_KEY


class DashCycler:
    """Hands out dash patterns in order, wrapping around after the last one."""

    def __init__(self, styles=None):
        self.styles = list(styles if styles is not None else DASH_STYLES)
        self.index = -1

    def __iter__(self):
        return self

    def __next__(self):
        self.index = (self.index + 1) % len(self.styles)
        return self.styles[self.index]

    def reset(self):
        self.index = -1


def dash_to_plotly(pattern) -> str:
    # [8, 4] -> "8px,4px"; an empty pattern is a solid line
    if not pattern:
        return "solid"
    return ",".join(f"{n}px" for n in pattern)


def add_spectrum_trace(fig, spectrum, dash=None, width=2):
    fill, line = trace_colors(spectrum.peak_wavelength())
    fig.add_trace(go.Scatter(
        x=spectrum.wavelengths,
        y=np.asarray(spectrum.samples) * 100,
        name=spectrum.name,
        mode="lines",
        fill="tozeroy",
        fillcolor=fill,
        line=dict(width=width, color=line, dash=dash_to_plotly(dash)),
    ))


#BLOCK --- Transmission plot ---
def create_transmission_plot(dye, filters, transmitted, grid) -> go.Figure:
    """
    Plotly figure with the dye (solid), each filter (cycling dash styles) and the
    transmitted result (thick, filled by its peak hue).
    """
    fig = go.Figure()
    dashes = DashCycler()

    if dye is not None:
        add_spectrum_trace(fig, dye)
    for spectrum in filters:
        add_spectrum_trace(fig, spectrum, dash=next(dashes))

    if transmitted is not None:
        hue = wavelength_to_hue(transmitted.peak_wavelength())
        fig.add_trace(go.Scatter(
            x=transmitted.wavelengths,
            y=np.asarray(transmitted.samples) * 100,
            name=TRANSMITTED_KEY,
            mode="lines",
            fill="tozeroy",
            fillcolor=hsla(hue, 0.9),
            line=dict(width=4, color="rgba(0, 0, 0, 0.5)"),
        ))

    fig.update_layout(
        xaxis_title="Wavelength (nm)",
        yaxis_title="Transmission / Emission (%)",
        xaxis_range=(grid.wlmin, grid.wlmax),
        yaxis_range=(0, 105),
        showlegend=True,
        height=550,
    )
    return fig
