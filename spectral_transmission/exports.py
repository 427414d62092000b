import io
import os

import numpy as np
import pandas as pd
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.gridspec import GridSpec

from .constants import DASH_STYLES
from .file_utils import sanitize_filename_component
from .log import get_logger
from .plotting.mpl_utils import add_spectrum_curve_to_matplotlib
from .plotting.plotly_utils import DashCycler

logger = get_logger(__name__)


#BLOCK: Tables
def spectra_to_dataframe(spectra) -> pd.DataFrame:
    """One 'Wavelength (nm)' column plus one column per spectrum, in the order given."""
    spectra = [s for s in spectra if s is not None]
    if not spectra:
        return pd.DataFrame(columns=["Wavelength (nm)"])

    grid = spectra[0].grid
    data = {"Wavelength (nm)": grid.wavelengths}
    for s in spectra:
        if s.grid != grid:
            raise ValueError(f"Spectrum '{s.name}' is not on the same grid as '{spectra[0].name}'")
        data[s.name] = np.asarray(s.samples)
    return pd.DataFrame(data)


def to_csv_bytes(df: pd.DataFrame) -> bytes:
    return df.to_csv(index=False).encode("utf-8")


#BLOCK: PNG report
def setup_matplotlib_style():
    try:
        plt.style.use("seaborn-v0_8-whitegrid")
    except OSError:
        plt.style.use("seaborn-whitegrid")
    plt.rcParams.update({
        "font.family": "DejaVu Sans",
        "axes.facecolor": "white",
        "axes.edgecolor": "#CCCCCC",
        "axes.grid": True,
        "grid.color": "#EEEEEE",
        "axes.spines.top": False,
        "axes.spines.right": False,
        "axes.titleweight": "bold",
        "axes.titlesize": 14,
        "axes.labelsize": 12,
        "legend.frameon": False,
        "legend.fontsize": 8,
    })


def report_filename(dye, filters) -> str:
    parts = [dye.name if dye is not None else "no-dye"]
    parts += [f"{s.name}({mode})" for s, mode in filters]
    return sanitize_filename_component("_".join(parts)) + ".png"


def generate_report_png(dye, filters, transmitted, grid, output_dir=None):
    """
    Render the dye, the filter chain and the transmitted spectrum to a PNG.

    `filters` is a list of (Spectrum, mode) pairs in chain order.
    Returns (file name, PNG bytes); the file is also written under `output_dir` if given.
    """
    setup_matplotlib_style()
    fig = plt.figure(figsize=(9, 7), dpi=150)
    gs = GridSpec(2, 1, figure=fig, height_ratios=[0.8, 4])

    # 1: Summary text
    ax0 = fig.add_subplot(gs[0])
    ax0.axis('off')
    lines = []
    if dye is not None:
        lines.append(f"Dye: {dye.name} (peak {dye.peak_wavelength():.0f} nm)")
    chain = ", ".join(f"{s.name} [{mode}]" for s, mode in filters) or "none"
    lines.append(f"Filters: {chain}")
    if transmitted is not None:
        lines.append(
            f"Transmitted peak: {transmitted.peak_wavelength():.0f} nm "
            f"({np.max(transmitted.samples) * 100:.1f}%)"
        )
    ax0.text(0.01, 0.9, "\n".join(lines), fontsize=10, va='top', transform=ax0.transAxes)

    # 2: Spectra
    ax1 = fig.add_subplot(gs[1])
    dashes = DashCycler(DASH_STYLES)
    if dye is not None:
        add_spectrum_curve_to_matplotlib(ax1, dye)
    for s, _mode in filters:
        add_spectrum_curve_to_matplotlib(ax1, s, dash=next(dashes), fill_alpha=0)
    if transmitted is not None:
        add_spectrum_curve_to_matplotlib(ax1, transmitted, linewidth=2.5, fill_alpha=0.6)
    ax1.set_xlabel('Wavelength (nm)')
    ax1.set_ylabel('Transmission / Emission (%)')
    ax1.set_xlim(grid.wlmin, grid.wlmax)
    ax1.set_ylim(0, 105)
    if ax1.get_legend_handles_labels()[0]:
        ax1.legend(loc='upper right')

    fig.suptitle("Spectral Transmission Report", fontsize=16, fontweight='bold')
    fig.tight_layout()

    buf = io.BytesIO()
    fig.savefig(buf, format='png', bbox_inches='tight')
    plt.close(fig)

    fname = report_filename(dye, filters)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
        output_path = os.path.join(output_dir, fname)
        with open(output_path, "wb") as f:
            f.write(buf.getvalue())
        logger.info("Report written to %s", output_path)

    return fname, buf.getvalue()
