import numpy as np
import pytest

from spectral_transmission.constants import DEFAULT_GRID, WavelengthGrid
from spectral_transmission.spectrum import RawSpectrum, Spectrum, resample


@pytest.fixture
def grid() -> WavelengthGrid:
    return DEFAULT_GRID


@pytest.fixture
def small_grid() -> WavelengthGrid:
    return WavelengthGrid(300.0, 500.0, 2.0)


@pytest.fixture
def triangle() -> RawSpectrum:
    return RawSpectrum.from_pairs([(300.0, 0.0), (400.0, 1.0), (500.0, 0.0)])


@pytest.fixture
def dye(grid: WavelengthGrid) -> Spectrum:
    raw = RawSpectrum.from_pairs([(450.0, 0.0), (520.0, 0.8), (600.0, 0.0)])
    return resample(raw, grid, name="dye")


@pytest.fixture
def make_flat(grid: WavelengthGrid):
    def _make(name: str, value: float) -> Spectrum:
        return Spectrum(name, grid, np.full(grid.size, value))
    return _make
