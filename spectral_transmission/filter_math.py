"""
filter_math.py

Dye-through-filter-chain light transmission math.

- FilterEntry: one filter in the active chain (spectrum key + transmission/reflectance mode).
- reflectance(): 1 - value for a filter used in reflection.
- combine_transmission(): folds the dye and each filter, in listed order, into a new
  "transmitted" Spectrum. Source spectra are never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

import numpy as np

from .constants import TRANSMITTED_KEY
from .log import get_logger
from .spectrum import Spectrum

logger = get_logger(__name__)

TRANSMISSION = "t"
REFLECTANCE = "r"

_MODE_ALIASES = {
    "t": TRANSMISSION,
    "transmission": TRANSMISSION,
    "r": REFLECTANCE,
    "reflectance": REFLECTANCE,
    "reflection": REFLECTANCE,
}


def normalize_mode(mode: str) -> str:
    try:
        return _MODE_ALIASES[str(mode).strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown filter mode {mode!r}; expected 't' or 'r'") from None


def toggle_mode(mode: str) -> str:
    return REFLECTANCE if normalize_mode(mode) == TRANSMISSION else TRANSMISSION


@dataclass(frozen=True)
class FilterEntry:
    key: str
    mode: str = TRANSMISSION

    def __post_init__(self):
        object.__setattr__(self, "mode", normalize_mode(self.mode))

    @property
    def is_reflectance(self) -> bool:
        return self.mode == REFLECTANCE


def reflectance(spectrum: Spectrum) -> np.ndarray:
    """Return 1 - samples as a new array; the spectrum itself is left untouched."""
    return 1.0 - spectrum.samples


#def calculate combined transmission
def combine_transmission(
    dye: Optional[str],
    filters: Sequence[FilterEntry],
    spectra: Mapping[str, Spectrum],
    name: str = TRANSMITTED_KEY,
) -> Optional[Spectrum]:
    """
    Multiply the dye spectrum by every filter in the chain.

    With no dye, the first filter seeds the result (its mode is not applied).
    Returns None when there is neither a dye nor any filter.
    Raises KeyError for a key missing from `spectra` and GridMismatch if the
    spectra do not share a grid.
    """
    filters = list(filters)
    if dye:
        transmitted = spectra[dye].copy(name)
        chain = filters
    elif filters:
        transmitted = spectra[filters[0].key].copy(name)
        chain = filters[1:]
    else:
        return None

    for entry in chain:
        source = spectra[entry.key]
        if entry.is_reflectance:
            transmitted.multiply_by(reflectance(source))
        else:
            transmitted.multiply_by(source)

    logger.debug(
        "Combined dye=%s with %d filter(s); peak at %.1f nm",
        dye, len(filters), transmitted.peak_wavelength(),
    )
    return transmitted
