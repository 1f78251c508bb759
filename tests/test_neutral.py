"""Tests for palette_checker.core.neutral: grey-scale spacing, clusters and tint naming."""

import pytest
from palette_checker.core.colour import oklch_to_rgb, rgb_to_hex
from palette_checker.core.neutral import (
    IDEAL_LIGHTNESS,
    analyse_neutral_shade,
    analyse_neutrals,
    distribution_score,
    tint_threshold,
)
from palette_checker.core.types import InvalidHexError

NEUTRAL = {
    50: '#FAFAFA',
    100: '#F5F5F5',
    200: '#E5E5E5',
    300: '#D4D4D4',
    400: '#A3A3A3',
    500: '#737373',
    600: '#525252',
    700: '#404040',
    800: '#262626',
    900: '#171717',
    950: '#0A0A0A',
}

SLATE = {500: '#64748B', 600: '#475569', 700: '#334155'}


def grey(L):
    return rgb_to_hex(*oklch_to_rgb(L, 0.0, 0.0))


@pytest.fixture(scope='module')
def neutral():
    return analyse_neutrals('Neutral', NEUTRAL)


class TestTintThreshold:
    @pytest.mark.parametrize('L, expected', [(0.95, 0.0015), (0.05, 0.0015), (0.9, 0.003), (0.1, 0.003), (0.5, 0.005)])
    def test_bands(self, L, expected):
        assert tint_threshold(L) == expected


class TestShade:
    def test_pure_grey_untinted(self):
        s = analyse_neutral_shade(500, '#737373')
        assert not s.is_tinted
        assert s.tint_matches == ()

    def test_tinted_matches_each_system(self):
        s = analyse_neutral_shade(500, '#64748b')
        assert s.hex == '#64748B'
        assert s.is_tinted
        assert [(m.source, m.name) for m in s.tint_matches] == [('Tailwind', 'Slate'), ('Radix', 'Slate')]
        assert all(isinstance(m.hue_delta, int) for m in s.tint_matches)

    def test_contrast_is_unsigned(self):
        s = analyse_neutral_shade(900, '#171717')
        assert s.apca_on_white > 90
        assert s.apca_on_dark >= 0

    def test_invalid_hex(self):
        with pytest.raises(InvalidHexError):
            analyse_neutral_shade(100, 'grey')


class TestPureNeutralScale:
    def test_sorted_light_to_dark(self, neutral):
        Ls = [s.oklch.L for s in neutral.shades]
        assert Ls == sorted(Ls, reverse=True)
        assert neutral.shades[0].hex == '#FAFAFA'

    def test_readability_rises_with_darkness(self, neutral):
        on_white = [s.apca_on_white for s in neutral.shades]
        on_dark = [s.apca_on_dark for s in neutral.shades]
        assert all(a <= b for a, b in zip(on_white, on_white[1:]))
        assert all(a >= b for a, b in zip(on_dark, on_dark[1:]))

    def test_no_tint(self, neutral):
        assert neutral.stats.tinted_count == 0
        assert neutral.avg_tint_hue is None
        assert neutral.avg_tint_chroma == 0.0
        assert neutral.tint_consistent

    def test_matches_every_plain_grey(self, neutral):
        assert [(m.source, m.name) for m in neutral.name_matches] == [
            ('Tailwind', 'Neutral'),
            ('Radix', 'Gray'),
            ('Spectrum', 'Gray'),
        ]
        assert all(m.is_achromatic and m.hue_delta == 0 for m in neutral.name_matches)

    def test_no_clusters(self, neutral):
        assert neutral.clusters == ()
        assert neutral.stats.clustered_count == 0

    def test_consolidation_maps_existing_shades(self, neutral):
        ideal = {shade: (L, role) for shade, L, role in IDEAL_LIGHTNESS}
        assert neutral.consolidated
        assert neutral.stats.consolidated_count == len(neutral.consolidated)
        for c in neutral.consolidated:
            L, role = ideal[c.shade]
            assert c.role == role
            assert abs(c.L - L) < 0.08
            assert NEUTRAL[c.original_shade] == c.hex

    def test_score_in_range(self, neutral):
        assert 0 <= neutral.distribution_score <= 100
        assert neutral.stats.total_shades == len(NEUTRAL)


class TestClusters:
    def test_indistinguishable_run(self):
        result = analyse_neutrals('Grey', {100: '#808080', 150: '#818181', 200: '#828282', 300: '#404040'})
        [cluster] = result.clusters
        assert cluster.shades == (200, 150, 100)
        assert cluster.keep_shade == 100
        assert cluster.drop_shades == (200, 150)
        assert cluster.reason.startswith('Visually indistinguishable')
        assert cluster.max_delta_l == pytest.approx(max(cluster.lightnesses) - min(cluster.lightnesses))
        assert result.stats.clustered_count == 3

    def test_close_but_visible(self):
        result = analyse_neutrals('Grey', {100: '#828282', 150: '#808080'})
        [cluster] = result.clusters
        assert cluster.reason.startswith('Very close')
        assert cluster.keep_shade == 100

    def test_fifty_beats_odd_numbers(self):
        result = analyse_neutrals('Grey', {50: '#808080', 75: '#818181'})
        assert result.clusters[0].keep_shade == 50

    def test_distinct_shades_not_clustered(self):
        assert analyse_neutrals('Grey', {100: '#808080', 200: '#404040'}).clusters == ()


class TestDistribution:
    def test_fewer_than_three_is_perfect(self):
        assert analyse_neutrals('Grey', {100: '#EEEEEE', 900: '#111111'}).distribution_score == 100

    def test_even_steps_score_high(self):
        shades = {i * 100: grey(L) for i, L in enumerate((0.9, 0.7, 0.5, 0.3, 0.1), start=1)}
        assert analyse_neutrals('Grey', shades).distribution_score >= 95

    def test_uneven_steps_score_low(self):
        shades = {100: grey(0.9), 200: grey(0.88), 300: grey(0.1)}
        assert analyse_neutrals('Grey', shades).distribution_score < 20

    def test_flat_scale_scores_zero(self):
        shades = [analyse_neutral_shade(s, '#808080') for s in (100, 200, 300)]
        assert distribution_score(shades) == 0


class TestTintNaming:
    def test_slate_family(self):
        result = analyse_neutrals('Slate', SLATE)
        assert result.stats.tinted_count == 3
        assert result.tint_consistent
        assert result.avg_tint_hue == pytest.approx(257, abs=3)
        assert [(m.source, m.name, m.is_achromatic) for m in result.name_matches] == [
            ('Tailwind', 'Slate', False),
            ('Radix', 'Slate', False),
            ('Spectrum', 'Gray', True),
        ]

    def test_drifting_tint(self):
        result = analyse_neutrals('Mixed', {500: '#64748B', 600: '#78716C'})
        assert not result.tint_consistent
        names = {m.name for s in result.shades for m in s.tint_matches if m.source == 'Tailwind'}
        assert names == {'Slate', 'Stone'}


class TestFamily:
    def test_empty(self):
        result = analyse_neutrals('Empty', {})
        assert result.shades == ()
        assert result.distribution_score == 100
        assert result.consolidated == ()
        assert len(result.name_matches) == 3

    def test_alpha_family(self):
        result = analyse_neutrals('Grey Alpha', {100: '#0000001A'}, is_alpha=True)
        assert result.is_alpha
        assert result.shades[0].hex == '#000000'

    def test_string_shade_keys(self):
        result = analyse_neutrals('Grey', {'100': '#EEEEEE'})
        assert result.shades[0].shade == 100
