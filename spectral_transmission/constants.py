# Basic Grid
"""
constants.py

Defines shared constants used across modules.

Constants:
- WLMIN, WLMAX, WLSTEP: bounds and step (nm) of the wavelength grid every spectrum is resampled onto.
  Defaults 300, 800, 2. Read once at import from SPECTRAL_WLMIN / SPECTRAL_WLMAX / SPECTRAL_WLSTEP.
- DEFAULT_GRID: WavelengthGrid built from the triple above, shared process-wide.
- DATA_DIR, DYES_DIR, FILTERS_DIR: where dye and filter source files are discovered.
- FN_EXCLUDE: fragments stripped from source file names to build display keys.
- PERCENT_THRESHOLD: sources whose maximum value exceeds this are treated as percent.
- DASH_STYLES: line dash patterns cycled over filter traces.
"""

import os
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class WavelengthGrid:
    """
    Uniform wavelength grid from wlmin to wlmax inclusive, step wlstep.

    Two grids compare equal when their triples are equal, which is what makes
    element-wise combination of spectra on the same grid valid.
    """
    wlmin: float = 300.0
    wlmax: float = 800.0
    wlstep: float = 2.0

    def __post_init__(self):
        if self.wlstep <= 0:
            raise ValueError(f"Grid step must be positive, got {self.wlstep}")
        if self.wlmax < self.wlmin:
            raise ValueError(f"Grid maximum {self.wlmax} is below minimum {self.wlmin}")

    @property
    def size(self) -> int:
        # last point is the largest wlmin + k*step not above wlmax
        return int(np.floor((self.wlmax - self.wlmin) / self.wlstep + 1e-9)) + 1

    @property
    def wavelengths(self) -> np.ndarray:
        # wlmin + k*step keeps both endpoints exact, unlike repeated addition
        return self.wlmin + np.arange(self.size, dtype=float) * self.wlstep


WLMIN = float(os.environ.get("SPECTRAL_WLMIN", 300.0))
WLMAX = float(os.environ.get("SPECTRAL_WLMAX", 800.0))
WLSTEP = float(os.environ.get("SPECTRAL_WLSTEP", 2.0))

DEFAULT_GRID = WavelengthGrid(WLMIN, WLMAX, WLSTEP)

DATA_DIR = os.environ.get("SPECTRAL_DATA_DIR", "data")
DYES_DIR = os.path.join(DATA_DIR, "dyes")
FILTERS_DIR = os.path.join(DATA_DIR, "filters")

# Extensions to strip from source filenames, and files to exclude.
FN_EXCLUDE = [".csv", ".Csv", "CSV", "index.html"]

PERCENT_THRESHOLD = 10.0

TRANSMITTED_KEY = "transmitted"

DASH_STYLES = [[8, 4], [16, 4], [4, 8, 4], [4, 8, 8]]
