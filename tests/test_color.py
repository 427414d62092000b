import pytest

from spectral_transmission.color import hsla, hue_to_rgb, trace_colors, wavelength_to_hue


@pytest.mark.parametrize(
    "wl, hue",
    [(650.0, 0.0), (700.0, 0.0), (500.0, 144.0), (350.0, 288.0), (300.0, 288.0)],
)
def test_wavelength_to_hue(wl, hue) -> None:
    assert wavelength_to_hue(wl) == pytest.approx(hue)


def test_hsla_strings() -> None:
    assert hsla(144.0, 0.2) == "hsla(144.0, 100%, 50%, 0.2)"
    fill, line = trace_colors(500.0)
    assert fill == "hsla(144.0, 100%, 50%, 0.2)"
    assert line == "hsla(144.0, 100%, 50%, 0.5)"


def test_hue_to_rgb_red_and_blue() -> None:
    assert hue_to_rgb(0.0) == pytest.approx((1.0, 0.0, 0.0))
    assert hue_to_rgb(240.0) == pytest.approx((0.0, 0.0, 1.0))
