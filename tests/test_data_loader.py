import numpy as np
import pytest

from spectral_transmission import data_loader
from spectral_transmission.constants import WavelengthGrid
from spectral_transmission.data_loader import (
    fetch_raw_spectra,
    list_sources,
    load_raw_spectrum,
    load_spectra,
    normalize_percent,
    parse_sources,
    parse_spectrum_text,
    raw_from_text,
)
from spectral_transmission.spectrum import MalformedInput

NOISY = """Wavelength (nm),Emission
# exported by a spectrometer
400,0.5
410;0.6
420\t0.7
430 : 0.8
  440 0.9 extra-column
not a number, 1.0

1e3,5e-1
"""


@pytest.fixture
def warnings(monkeypatch):
    messages = []
    monkeypatch.setattr(data_loader.st, "warning", messages.append)
    return messages


def test_parse_skips_unparsable_lines() -> None:
    pairs = parse_spectrum_text(NOISY)
    assert pairs == [
        (400.0, 0.5), (410.0, 0.6), (420.0, 0.7), (430.0, 0.8), (440.0, 0.9), (1000.0, 0.5),
    ]


def test_parse_signed_and_decimal_numbers() -> None:
    assert parse_spectrum_text("-.5,+2.5\n.25:3") == [(-0.5, 2.5), (0.25, 3.0)]


@pytest.mark.parametrize(
    "values, expected",
    [([0.0, 50.0, 100.0], [0.0, 0.5, 1.0]), ([0.0, 5.0], [0.0, 5.0]), ([10.0, 1.0], [10.0, 1.0])],
)
def test_percent_heuristic(values, expected) -> None:
    np.testing.assert_allclose(normalize_percent(np.array(values)), expected)


def test_percent_heuristic_on_empty_values() -> None:
    assert normalize_percent(np.array([])).size == 0


def test_raw_from_text_normalizes_percent() -> None:
    raw = raw_from_text("500,20\n510,80\n")
    np.testing.assert_allclose(raw.values, [0.2, 0.8])


def test_raw_from_text_without_pairs_is_empty() -> None:
    assert raw_from_text("header only\n").is_empty


def test_parse_sources_strips_excluded_fragments() -> None:
    listing = "EGFP.csv\nTexas Red.Csv\nindex.html\nx.csv\n\nFF01-525_50.csv"
    assert parse_sources(listing) == {
        "EGFP": "EGFP.csv",
        "Texas Red": "Texas Red.Csv",
        "FF01-525_50": "FF01-525_50.csv",
    }


def test_parse_sources_skips_reserved_name() -> None:
    assert parse_sources("transmitted.csv\nEGFP.csv") == {"EGFP": "EGFP.csv"}


def test_list_sources(tmp_path) -> None:
    (tmp_path / "EGFP.csv").write_text("500,1\n510,0.5\n")
    (tmp_path / "index.html").write_text("<html></html>")
    (tmp_path / "sub").mkdir()

    found = list_sources(str(tmp_path))
    assert found == {"EGFP": str(tmp_path / "EGFP.csv")}


def test_load_raw_spectrum_rejects_duplicate_wavelengths(tmp_path) -> None:
    path = tmp_path / "dup.csv"
    path.write_text("400,0.1\n400,0.2\n410,0.3\n")
    with pytest.raises(MalformedInput):
        load_raw_spectrum(str(path))


def test_fetch_replaces_failed_sources_with_empty(tmp_path, warnings) -> None:
    good = tmp_path / "good.csv"
    good.write_text("400,0.1\n500,0.9\n")
    dup = tmp_path / "dup.csv"
    dup.write_text("400,0.1\n400,0.2\n")

    raw = fetch_raw_spectra({
        "good": str(good),
        "dup": str(dup),
        "missing": str(tmp_path / "missing.csv"),
    })

    assert set(raw) == {"good", "dup", "missing"}
    assert len(raw["good"]) == 2
    assert raw["dup"].is_empty
    assert raw["missing"].is_empty
    assert len(warnings) == 2


def test_fetch_nothing() -> None:
    assert fetch_raw_spectra({}) == {}


def test_load_spectra_resamples_every_source(tmp_path, warnings) -> None:
    (tmp_path / "ramp.csv").write_text("wl,T\n300,0\n500,100\n")
    (tmp_path / "junk.csv").write_text("nothing useful here\n")
    grid = WavelengthGrid(300.0, 500.0, 2.0)

    spectra = load_spectra(
        {"ramp": str(tmp_path / "ramp.csv"), "junk": str(tmp_path / "junk.csv")}, grid
    )

    assert spectra["ramp"].name == "ramp"
    assert spectra["ramp"].grid == grid
    assert spectra["ramp"].peak_wavelength() == 500.0
    assert spectra["ramp"].samples[-1] == pytest.approx(1.0)
    assert not np.any(spectra["junk"].samples)
    assert warnings == []
