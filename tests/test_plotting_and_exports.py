import io

import numpy as np
import pandas as pd
import pytest

from spectral_transmission.constants import DASH_STYLES
from spectral_transmission.exports import (
    generate_report_png,
    report_filename,
    spectra_to_dataframe,
    to_csv_bytes,
)
from spectral_transmission.file_utils import sanitize_filename_component
from spectral_transmission.filter_math import FilterEntry, combine_transmission
from spectral_transmission.plotting.plotly_utils import DashCycler, create_transmission_plot, dash_to_plotly
from spectral_transmission.spectrum import Spectrum


@pytest.fixture
def chain(dye: Spectrum, make_flat):
    spectra = {"dye": dye, "bp": make_flat("bp", 0.9), "dichroic": make_flat("dichroic", 0.1)}
    entries = [FilterEntry("bp", "t"), FilterEntry("dichroic", "r")]
    transmitted = combine_transmission("dye", entries, spectra)
    return spectra, entries, transmitted


def test_dash_cycler_wraps_around() -> None:
    dashes = DashCycler()
    seen = [next(dashes) for _ in range(len(DASH_STYLES) + 1)]
    assert seen[:-1] == DASH_STYLES
    assert seen[-1] == DASH_STYLES[0]
    dashes.reset()
    assert next(dashes) == DASH_STYLES[0]


def test_dash_to_plotly() -> None:
    assert dash_to_plotly([8, 4]) == "8px,4px"
    assert dash_to_plotly([]) == "solid"
    assert dash_to_plotly(None) == "solid"


def test_transmission_plot_traces(chain, grid) -> None:
    spectra, entries, transmitted = chain
    fig = create_transmission_plot(
        spectra["dye"], [spectra[e.key] for e in entries], transmitted, grid
    )

    names = [trace.name for trace in fig.data]
    assert names == ["dye", "bp", "dichroic", "transmitted"]
    assert fig.data[0].line.dash == "solid"
    assert fig.data[1].line.dash == "8px,4px"
    assert fig.data[2].line.dash == "16px,4px"
    assert fig.data[1].fillcolor.startswith("hsla(")
    np.testing.assert_allclose(fig.data[3].y, transmitted.samples * 100)


def test_spectra_to_dataframe(chain) -> None:
    spectra, _, transmitted = chain
    df = spectra_to_dataframe([spectra["dye"], None, transmitted])

    assert list(df.columns) == ["Wavelength (nm)", "dye", "transmitted"]
    assert len(df) == transmitted.grid.size
    assert df["Wavelength (nm)"].iloc[-1] == 800.0

    parsed = pd.read_csv(io.BytesIO(to_csv_bytes(df)))
    np.testing.assert_allclose(parsed["transmitted"], transmitted.samples)


def test_spectra_to_dataframe_requires_one_grid(dye, small_grid) -> None:
    other = Spectrum("other", small_grid, np.zeros(small_grid.size))
    with pytest.raises(ValueError):
        spectra_to_dataframe([dye, other])
    assert list(spectra_to_dataframe([]).columns) == ["Wavelength (nm)"]


def test_report_png(chain, grid, tmp_path) -> None:
    spectra, entries, transmitted = chain
    filters = [(spectra[e.key], e.mode) for e in entries]

    fname, png = generate_report_png(spectra["dye"], filters, transmitted, grid, output_dir=str(tmp_path))

    assert fname == "dye_bp(t)_dichroic(r).png"
    assert png.startswith(b"\x89PNG")
    assert (tmp_path / fname).read_bytes() == png


def test_report_filename_without_dye(make_flat) -> None:
    assert report_filename(None, [(make_flat("a b", 0.5), "t")]) == "no-dye_a-b(t).png"


def test_sanitize_filename_component() -> None:
    assert sanitize_filename_component('Di 505/LP: "x"?') == "Di-505-LP-x"
    assert sanitize_filename_component("ABCDEF", lowercase=True, max_len=3) == "abc"
