import os
import glob
import re
from concurrent.futures import ThreadPoolExecutor, as_completed

import numpy as np
import streamlit as st

from .constants import DEFAULT_GRID, DYES_DIR, FILTERS_DIR, FN_EXCLUDE, PERCENT_THRESHOLD, TRANSMITTED_KEY, WavelengthGrid
from .log import get_logger
from .spectrum import RawSpectrum, resample

logger = get_logger(__name__)

_NUMBER = r"[-+]?[0-9]*\.?[0-9]+(?:[eE][-+]?[0-9]+)?"
# wavelength, separator(s), value; anything after the value is ignored
CSVMATCH = re.compile(rf"^({_NUMBER})[,;:\s]+({_NUMBER})")


#BLOCK: Source discovery
def source_name(filename: str) -> str:
    name = filename
    for excl in FN_EXCLUDE:
        name = name.replace(excl, "")
    return name


def parse_sources(sources: str) -> dict[str, str]:
    """Map display keys to file names for a newline-separated listing of source files."""
    found = {}
    for file in sources.split("\n"):
        file = file.strip()
        name = source_name(file)
        if len(name) <= 1:
            continue
        if name == TRANSMITTED_KEY:
            # reserved for the combined result
            logger.warning("Ignoring source %s: '%s' is a reserved name", file, name)
            continue
        found[name] = file
    return found


def list_sources(folder: str) -> dict[str, str]:
    """Map display keys to full paths for every source file in `folder`."""
    os.makedirs(folder, exist_ok=True)
    files = sorted(
        os.path.basename(p) for p in glob.glob(os.path.join(folder, "*"))
        if os.path.isfile(p)
    )
    found = {key: os.path.join(folder, fn) for key, fn in parse_sources("\n".join(files)).items()}
    logger.info("Found %d source(s) in %s", len(found), folder)
    return found


@st.cache_data
def load_source_index(dyes_dir: str = DYES_DIR, filters_dir: str = FILTERS_DIR):
    return list_sources(dyes_dir), list_sources(filters_dir)


#BLOCK: Parsing
def parse_spectrum_text(text: str) -> list[tuple[float, float]]:
    """
    Extract (wavelength, value) pairs from delimited text.

    Lines that do not start with two numbers (headers, comments, blanks) are skipped.
    """
    pairs = []
    for line in text.splitlines():
        match = CSVMATCH.match(line.strip())
        if match is None:
            continue
        pairs.append((float(match.group(1)), float(match.group(2))))
    return pairs


def normalize_percent(values: np.ndarray, threshold: float = PERCENT_THRESHOLD) -> np.ndarray:
    # Heuristic: a maximum above the threshold means the source is probably in percent.
    values = np.asarray(values, dtype=float)
    if values.size and values.max() > threshold:
        return values / 100.0
    return values


def raw_from_text(text: str) -> RawSpectrum:
    pairs = parse_spectrum_text(text)
    if not pairs:
        return RawSpectrum.empty()
    wls, vals = np.array(pairs, dtype=float).T
    return RawSpectrum(wls, normalize_percent(vals))


#BLOCK: Loaders
def load_raw_spectrum(path: str) -> RawSpectrum:
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return raw_from_text(f.read())


def fetch_raw_spectra(paths: dict[str, str], max_workers: int = 8) -> dict[str, RawSpectrum]:
    """
    Load several sources concurrently and wait for all of them.

    A source that cannot be read or parsed is logged and replaced by an empty
    RawSpectrum, which resamples to all zeros.
    """
    results = {}
    if not paths:
        return results

    with ThreadPoolExecutor(max_workers=min(max_workers, len(paths))) as executor:
        future_to_key = {executor.submit(load_raw_spectrum, path): key for key, path in paths.items()}
        for future in as_completed(future_to_key):
            key = future_to_key[future]
            try:
                results[key] = future.result()
            except (OSError, ValueError) as e:
                logger.warning("Failed to load spectrum '%s' from %s: %s", key, paths[key], e)
                st.warning(f"⚠️ Failed to load spectrum '{key}': {e}")
                results[key] = RawSpectrum.empty()
    return results


def load_spectra(paths: dict[str, str], grid: WavelengthGrid = DEFAULT_GRID) -> dict:
    """Fetch and resample every source in `paths`, keyed like `paths`."""
    raw = fetch_raw_spectra(paths)
    return {key: resample(raw[key], grid, name=key) for key in paths}


@st.cache_data
def load_spectra_cached(paths: dict[str, str], wlmin: float, wlmax: float, wlstep: float) -> dict:
    return load_spectra(paths, WavelengthGrid(wlmin, wlmax, wlstep))
