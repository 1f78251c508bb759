"""Tests for palette_checker.core.cam16: CAM16 hue and hue-preserving retargeting."""

import pytest
from palette_checker.core.cam16 import (
    DEFAULT_VIEWING_CONDITIONS,
    MAX_HUE_DRIFT,
    ViewingConditions,
    cam16_hue,
    corrected_hue,
)
from palette_checker.core.colour import hue_delta


class TestViewingConditions:
    def test_default_is_average_surround_d65(self):
        vc = DEFAULT_VIEWING_CONDITIONS
        assert vc.adapting_luminance == 64.0
        assert vc.background == 20.0
        assert 0.0 < vc.d <= 1.0
        assert vc.fl > 0

    def test_frozen(self):
        with pytest.raises(AttributeError):
            DEFAULT_VIEWING_CONDITIONS.fl = 2.0

    def test_make_is_deterministic(self):
        assert ViewingConditions.make() == DEFAULT_VIEWING_CONDITIONS


class TestCam16Hue:
    def test_range(self):
        for H in range(0, 360, 15):
            h = cam16_hue(0.6, 0.1, H)
            assert 0 <= h < 360

    def test_tracks_oklch_hue_order(self):
        # red, green and blue land in their own regions of the CAM16 wheel
        red = cam16_hue(0.63, 0.25, 29)
        green = cam16_hue(0.87, 0.29, 142)
        blue = cam16_hue(0.45, 0.31, 264)
        assert hue_delta(red, green) > 90
        assert hue_delta(green, blue) > 60
        assert hue_delta(blue, red) > 60


class TestCorrectedHue:
    def test_same_point_keeps_hue(self):
        assert corrected_hue(200.0, 0.6, 0.1, 0.6, 0.1) == pytest.approx(200.0, abs=0.5)

    def test_achromatic_anchor_bypass(self):
        assert corrected_hue(120.0, 0.5, 0.003, 0.8, 0.1) == 120.0

    def test_achromatic_target_bypass(self):
        assert corrected_hue(120.0, 0.5, 0.1, 0.8, 0.004) == 120.0

    @pytest.mark.parametrize('hue', [30.0, 100.0, 160.0, 264.0, 320.0])
    def test_drift_capped(self, hue):
        for target_l in (0.3, 0.9, 0.95):
            out = corrected_hue(hue, 0.54, 0.15, target_l, 0.04)
            assert hue_delta(out, hue) <= MAX_HUE_DRIFT + 1e-9
            assert 0 <= out < 360

    def test_wraps_near_zero(self):
        out = corrected_hue(2.0, 0.55, 0.15, 0.85, 0.05)
        assert hue_delta(out, 2.0) <= MAX_HUE_DRIFT + 1e-9
