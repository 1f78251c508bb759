"""Tests for palette_checker.core.cvd: colour-vision-deficiency simulation."""

import pytest
from palette_checker.core.colour import is_valid_hex
from palette_checker.core.cvd import CVD_LABELS, CVD_TYPES, simulate_cvd, simulate_hex
from palette_checker.core.types import Rgb

DEFICIENCIES = [k for k in CVD_TYPES if k != 'normal']


class TestSimulateCvd:
    def test_normal_is_identity(self):
        rgb = Rgb(0.2, 0.5, 0.9)
        assert simulate_cvd(rgb, 'normal') == rgb

    @pytest.mark.parametrize('kind', DEFICIENCIES)
    def test_black_and_white_preserved(self, kind):
        assert simulate_cvd(Rgb(0.0, 0.0, 0.0), kind) == pytest.approx((0.0, 0.0, 0.0), abs=1e-6)
        assert simulate_cvd(Rgb(1.0, 1.0, 1.0), kind) == pytest.approx((1.0, 1.0, 1.0), abs=1e-3)

    @pytest.mark.parametrize('kind', DEFICIENCIES)
    def test_output_clamped(self, kind):
        for rgb in (Rgb(1.0, 0.0, 0.0), Rgb(0.0, 1.0, 0.0), Rgb(0.0, 0.0, 1.0)):
            assert all(0.0 <= c <= 1.0 for c in simulate_cvd(rgb, kind))

    def test_unknown_kind(self):
        with pytest.raises(KeyError):
            simulate_cvd(Rgb(0.5, 0.5, 0.5), 'achromatopsia')


class TestSimulateHex:
    def test_normal_normalises(self):
        assert simulate_hex('#3b82f6', 'normal') == '#3B82F6'

    @pytest.mark.parametrize('kind', DEFICIENCIES)
    def test_red_changes(self, kind):
        out = simulate_hex('#FF0000', kind)
        assert is_valid_hex(out)
        assert out != '#FF0000'

    @pytest.mark.parametrize('kind', DEFICIENCIES)
    def test_white_unchanged(self, kind):
        assert simulate_hex('#FFFFFF', kind) == '#FFFFFF'

    def test_labels_cover_types(self):
        assert set(CVD_LABELS) == set(CVD_TYPES)
