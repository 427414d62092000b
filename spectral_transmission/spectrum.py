"""
spectrum.py

Spectrum value types and the resampling step.

- RawSpectrum: wavelength/value pairs as read from a source file, strictly ascending.
- Spectrum: samples on a fixed WavelengthGrid. Samples are exposed read-only;
  multiply_by is the only operation that changes them.
- resample(): piecewise-linear interpolation of a RawSpectrum (or another Spectrum)
  onto a grid, zero outside the measured domain.

Errors:
- MalformedInput: raw data violates ordering/length rules, or an interval has zero width.
- GridMismatch: operands of a multiplication do not share a grid.
- EmptySpectrum: peak/points queried on a spectrum without samples.
"""

from __future__ import annotations

from dataclasses import dataclass
from numbers import Number

import numpy as np

from .constants import DEFAULT_GRID, WavelengthGrid


class MalformedInput(ValueError):
    pass


class GridMismatch(ValueError):
    pass


class EmptySpectrum(ValueError):
    pass


def _readonly(arr: np.ndarray) -> np.ndarray:
    view = arr.view()
    view.flags.writeable = False
    return view


#BLOCK: Raw data
@dataclass(frozen=True, eq=False)
class RawSpectrum:
    """
    Irregularly sampled (wavelength, value) data, sorted ascending by wavelength.

    Needs at least two pairs unless it is empty; an empty RawSpectrum stands for
    a source that produced no usable pairs and resamples to all zeros.
    """
    wavelengths: np.ndarray
    values: np.ndarray

    def __post_init__(self):
        wls = np.array(self.wavelengths, dtype=float).ravel()
        vals = np.array(self.values, dtype=float).ravel()

        if wls.shape != vals.shape:
            raise MalformedInput(
                f"Wavelengths and values differ in length ({wls.size} vs {vals.size})"
            )
        if wls.size == 1:
            raise MalformedInput("A raw spectrum needs at least two points")
        if not (np.all(np.isfinite(wls)) and np.all(np.isfinite(vals))):
            raise MalformedInput("Raw spectrum contains non-finite numbers")

        steps = np.diff(wls)
        if np.any(steps <= 0):
            bad = int(np.argmax(steps <= 0)) + 1
            raise MalformedInput(
                f"Wavelengths must be strictly ascending; {wls[bad]} follows {wls[bad - 1]}"
            )

        object.__setattr__(self, "wavelengths", _readonly(wls))
        object.__setattr__(self, "values", _readonly(vals))

    @classmethod
    def empty(cls) -> RawSpectrum:
        return cls(np.empty(0), np.empty(0))

    @classmethod
    def from_pairs(cls, pairs) -> RawSpectrum:
        pairs = list(pairs)
        if not pairs:
            return cls.empty()
        wls, vals = zip(*pairs)
        return cls(np.asarray(wls, dtype=float), np.asarray(vals, dtype=float))

    def __len__(self):
        return int(self.wavelengths.size)

    @property
    def is_empty(self) -> bool:
        return self.wavelengths.size == 0


#BLOCK: Fixed-grid spectrum
class Spectrum:
    """
    Intensities sampled on a fixed WavelengthGrid.

    Attributes:
        name: lookup key and display label
        grid: the WavelengthGrid shared by every spectrum in a session
        samples: read-only view of the intensities, len(samples) == grid.size
    """
    def __init__(self, name: str, grid: WavelengthGrid, samples):
        samples = np.array(samples, dtype=float).ravel()
        if samples.size != grid.size:
            raise GridMismatch(
                f"Spectrum '{name}' has {samples.size} samples but its grid has {grid.size} points"
            )
        self.name = name
        self.grid = grid
        self._samples = samples

    def __repr__(self):
        return f"Spectrum(name={self.name!r}, grid={self.grid!r})"

    @property
    def samples(self) -> np.ndarray:
        return _readonly(self._samples)

    @property
    def wavelengths(self) -> np.ndarray:
        return self.grid.wavelengths

    def __len__(self):
        return int(self._samples.size)

    def copy(self, name: str | None = None) -> Spectrum:
        return Spectrum(self.name if name is None else name, self.grid, self._samples.copy())

    def to_raw(self) -> RawSpectrum:
        return RawSpectrum(self.wavelengths, self._samples)

    def multiply_by(self, other) -> None:
        """
        Multiply samples in place by another Spectrum, an equal-length sequence, or a scalar.
        """
        if isinstance(other, Spectrum):
            if other.grid != self.grid:
                raise GridMismatch(
                    f"Cannot combine '{self.name}' ({self.grid}) with '{other.name}' ({other.grid})"
                )
            factor = other._samples
        elif isinstance(other, Number):
            factor = float(other)
        else:
            factor = np.asarray(other, dtype=float).ravel()
            if factor.size != self._samples.size:
                raise GridMismatch(
                    f"Cannot combine '{self.name}' ({self._samples.size} samples) "
                    f"with a sequence of length {factor.size}"
                )
        self._samples *= factor

    def peak_wavelength(self) -> float:
        """Grid wavelength of the maximum sample; the lowest wavelength wins ties."""
        if self._samples.size == 0:
            raise EmptySpectrum(f"Spectrum '{self.name}' has no samples")
        # np.argmax returns the first occurrence
        return float(self.wavelengths[int(np.argmax(self._samples))])

    def points(self) -> list[dict[str, float]]:
        if self._samples.size == 0:
            raise EmptySpectrum(f"Spectrum '{self.name}' has no samples")
        return [
            {"wavelength": float(wl), "intensity": float(v)}
            for wl, v in zip(self.wavelengths, self._samples)
        ]


#BLOCK: Resampling
def resample(source, grid: WavelengthGrid = DEFAULT_GRID, name: str | None = None) -> Spectrum:
    """
    Resample onto `grid` by linear interpolation, 0.0 outside the source's domain.

    `source` is a RawSpectrum, or a Spectrum; a Spectrum already on `grid` is
    returned as a fresh copy with identical samples.
    """
    if isinstance(source, Spectrum):
        if source.grid == grid:
            return source.copy(name)
        name = source.name if name is None else name
        source = source.to_raw()

    grid_wls = grid.wavelengths
    out = np.zeros(grid.size, dtype=float)
    if source.is_empty:
        return Spectrum(name or "", grid, out)

    wls, vals = source.wavelengths, source.values
    inside = (grid_wls >= wls[0]) & (grid_wls <= wls[-1])
    wl = grid_wls[inside]

    # Upper end of the bracketing interval: first raw index with wls[i] >= wl, at least 1.
    # Bracketing is monotone in wl and computed fresh for each call.
    i = np.clip(np.searchsorted(wls, wl, side="left"), 1, wls.size - 1)
    width = wls[i] - wls[i - 1]
    # RawSpectrum rejects these; guards arrays swapped in after construction
    if np.any(width == 0):
        raise MalformedInput(f"Zero-width interval at {wls[i][width == 0][0]} nm")

    out[inside] = vals[i - 1] + (wl - wls[i - 1]) * (vals[i] - vals[i - 1]) / width
    return Spectrum(name or "", grid, out)
