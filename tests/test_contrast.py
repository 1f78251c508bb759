"""Tests for palette_checker.core.contrast and apca_fonts: WCAG, APCA, solver, compositing."""

import pytest
from palette_checker.core.apca_fonts import font_lookup_apca, font_summary
from palette_checker.core.colour import hex_to_rgb, oklch_to_rgb
from palette_checker.core.config import GREY_50, GREY_750
from palette_checker.core.contrast import (
    alpha_composite,
    apca_contrast,
    apca_level,
    best_text_color,
    contrast_ratio,
    relative_luminance,
    solve_l_for_apca,
    wcag_badge,
    wcag_level,
)
from palette_checker.core.types import Rgb

WHITE = Rgb(1.0, 1.0, 1.0)
BLACK = Rgb(0.0, 0.0, 0.0)


class TestWcag:
    def test_black_on_white(self):
        assert contrast_ratio(relative_luminance(*BLACK), relative_luminance(*WHITE)) == pytest.approx(21.0)

    def test_symmetric(self):
        a, b = relative_luminance(0.2, 0.4, 0.6), relative_luminance(0.9, 0.8, 0.1)
        assert contrast_ratio(a, b) == contrast_ratio(b, a)

    def test_same_colour_is_one(self):
        lum = relative_luminance(0.5, 0.5, 0.5)
        assert contrast_ratio(lum, lum) == 1.0

    def test_levels(self):
        assert wcag_level(7.0) == 'aaa'
        assert wcag_level(4.5) == 'aa'
        assert wcag_level(3.0) == 'aa-large'
        assert wcag_level(2.99) == 'fail'

    def test_badge_prefers_white(self):
        assert wcag_badge(8.0, 8.0) == {'label': 'AAA', 'background': 'white', 'level': 'aaa'}
        assert wcag_badge(2.0, 5.0)['background'] == 'black'
        assert wcag_badge(1.5, 2.0) == {'label': 'Fails', 'background': None, 'level': 'fail'}

    def test_best_text_color(self):
        assert best_text_color(Rgb(0.1, 0.1, 0.4)) == 'white'
        assert best_text_color(Rgb(0.95, 0.9, 0.6)) == 'dark'


class TestApca:
    @pytest.mark.parametrize(
        ('text', 'bg', 'expected'),
        [
            ('#888888', '#FFFFFF', 63.06),
            ('#FFFFFF', '#888888', -68.54),
            ('#000000', '#AAAAAA', 58.15),
            ('#AAAAAA', '#000000', -56.24),
            ('#112233', '#DDEEFF', 91.67),
            ('#DDEEFF', '#112233', -93.07),
            ('#112233', '#444444', 8.32),
            ('#444444', '#112233', -7.53),
        ],
    )
    def test_reference_vectors(self, text, bg, expected):
        assert apca_contrast(hex_to_rgb(text), hex_to_rgb(bg)) == pytest.approx(expected, abs=0.5)

    def test_identical_colours_zero(self):
        grey = Rgb(0.5, 0.5, 0.5)
        assert apca_contrast(grey, grey) == 0.0

    def test_polarity(self):
        assert apca_contrast(BLACK, WHITE) > 100
        assert apca_contrast(WHITE, BLACK) < -100

    def test_levels(self):
        assert apca_level(-80) == 'excellent'
        assert apca_level(60) == 'good'
        assert apca_level(45) == 'min'
        assert apca_level(44.9) == 'poor'


class TestSolver:
    @pytest.mark.parametrize('target', [45.0, 60.0, 75.0, 90.0])
    def test_light_fill_accuracy(self, target):
        L = solve_l_for_apca(GREY_750, target, 'light-fill')
        lc = abs(apca_contrast(GREY_750, oklch_to_rgb(L, 0, 0)))
        assert lc == pytest.approx(target, abs=0.5)
        assert 0.3 <= L <= 1.0

    @pytest.mark.parametrize('target', [60.0, 75.0, 90.0])
    def test_dark_fill_accuracy(self, target):
        L = solve_l_for_apca(GREY_50, target, 'dark-fill')
        lc = abs(apca_contrast(GREY_50, oklch_to_rgb(L, 0, 0)))
        assert lc == pytest.approx(target, abs=0.5)
        assert 0.0 <= L <= 0.7

    def test_light_floor_meets_target(self):
        # the upper bound is returned, so the fill never falls short
        L = solve_l_for_apca(GREY_750, 75.0, 'light-fill')
        assert abs(apca_contrast(GREY_750, oklch_to_rgb(L, 0, 0))) >= 75.0 - 1e-6

    def test_higher_target_lighter_fill(self):
        assert solve_l_for_apca(GREY_750, 80, 'light-fill') > solve_l_for_apca(GREY_750, 60, 'light-fill')
        assert solve_l_for_apca(GREY_50, 80, 'dark-fill') < solve_l_for_apca(GREY_50, 60, 'dark-fill')

    def test_unknown_direction(self):
        with pytest.raises(ValueError):
            solve_l_for_apca(GREY_750, 75, 'sideways')


class TestAlphaComposite:
    def test_opaque(self):
        assert alpha_composite(Rgb(0.2, 0.3, 0.4), 1.0, WHITE) == Rgb(0.2, 0.3, 0.4)

    def test_transparent(self):
        assert alpha_composite(Rgb(0.2, 0.3, 0.4), 0.0, WHITE) == WHITE

    def test_half(self):
        out = alpha_composite(BLACK, 0.5, WHITE)
        assert out == Rgb(0.5, 0.5, 0.5)


class TestFontLookup:
    def test_prohibited_below_15(self):
        out = font_lookup_apca(10)
        assert out['level'] == 'prohibited'
        assert out['recommendations'] == []
        assert out['best_weight'] is None

    def test_non_text_band_unusable(self):
        out = font_lookup_apca(20)
        assert out['level'] == 'non-text'
        assert not any(r['usable'] for r in out['recommendations'])
        assert out['best_min_size'] is None

    def test_body_text(self):
        out = font_lookup_apca(-90)
        assert out['lc'] == 90
        assert out['level'] == 'body-text'
        assert out['best_weight'] == 700
        assert out['best_min_size'] == 14

    def test_uses_row_below(self):
        assert font_summary(62) == font_summary(60) == {'regular': 24, 'bold': 16}

    def test_fractional_sizes_round_up(self):
        sizes = {r['weight']: r['min_size'] for r in font_lookup_apca(65)['recommendations']}
        assert sizes[400] == 22
