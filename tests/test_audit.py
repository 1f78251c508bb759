"""Tests for palette_checker.audit and the checks it runs."""

import pytest
from palette_checker.audit import families_from_hex, run_palette_audit
from palette_checker.checks.anchor import compute_anchor_tweaks
from palette_checker.checks.chroma import analyse_chroma
from palette_checker.checks.proximity import analyse_proximity
from palette_checker.core.colour import oklch_to_rgb, rgb_to_hex
from palette_checker.core.config import default_target_curve
from palette_checker.core.types import SEVERITY_ORDER, Family, InvalidHexError, Oklch


def fam(name, H, C=0.1, L=None):
    L = default_target_curve().anchor_l if L is None else L
    return Family(name=name, hex=rgb_to_hex(*oklch_to_rgb(L, C, H)), oklch=Oklch(L, C, H))


def reasons(result):
    return [adj.reason for adj in result.breakdown]


class TestFamiliesFromHex:
    def test_builds_families(self):
        families = families_from_hex({'Blue': '#3b82f6', 'Red': '#EF4444'})
        assert [f.name for f in families] == ['Blue', 'Red']
        assert families[0].hex == '#3B82F6'
        assert families[0].oklch.H == pytest.approx(259.8, abs=1.0)

    def test_invalid_hex(self):
        with pytest.raises(InvalidHexError):
            families_from_hex({'Bad': 'blue'})


class TestEmptyPalette:
    def test_score_and_findings(self):
        result = run_palette_audit([])
        assert result.family_count == 0
        assert result.findings == []
        # fewer than 12 families is the only adjustment
        assert result.score == 95
        assert [adj.delta for adj in result.breakdown] == [-5]

    def test_all_checks_run_in_order(self):
        assert run_palette_audit([]).checks_run == ['chroma', 'proximity', 'anchor', 'gaps']


class TestAchromatic:
    def test_grey_is_skipped(self):
        result = run_palette_audit(families_from_hex({'Grey': '#808080', 'Blue': '#3B82F6'}))
        assert [f.name for f in result.families] == ['Blue']
        assert all(a.family != 'Grey' for a in result.chroma_analysis)


class TestProximity:
    def test_critical_pair_sorted_first(self):
        result = run_palette_audit([fam('Blue', 250.0), fam('Azure', 252.0)])
        assert result.findings[0].severity == 'critical'
        assert result.findings[0].type == 'proximity'
        assert sum(f.severity == 'critical' for f in result.findings) == 1
        assert -15 in [adj.delta for adj in result.breakdown]

    def test_two_families_one_pair(self):
        warnings = analyse_proximity([fam('A', 10.0), fam('B', 13.0)])
        assert len(warnings) == 1

    def test_warning_shifts_roomier_family(self):
        warnings = analyse_proximity([fam('A', 100.0), fam('B', 107.0), fam('C', 250.0)])
        assert len(warnings) == 1
        w = warnings[0]
        assert w.severity == 'warning'
        assert (w.family_a, w.family_b) == ('A', 'B')
        # A has 210° behind it, B only 143° ahead, so A moves back by half its room
        assert w.shift_family == 'A'
        assert w.shifted_hue == pytest.approx(355.0)
        assert w.shifted_hex.startswith('#')

    def test_tie_moves_second(self):
        warnings = analyse_proximity([fam('A', 0.0), fam('B', 6.0), fam('C', 183.0)])
        assert warnings[0].shift_family == 'B'
        assert warnings[0].shifted_hue == pytest.approx(94.5)

    def test_distant_families_clean(self):
        assert analyse_proximity([fam('A', 0.0), fam('B', 120.0), fam('C', 240.0)]) == []

    def test_warning_penalty(self):
        result = run_palette_audit([fam('A', 100.0), fam('B', 107.0), fam('C', 250.0)])
        prox = [f for f in result.findings if f.type == 'proximity']
        assert [f.severity for f in prox] == ['warning']
        assert prox[0].family == 'B'
        assert -5 in [adj.delta for adj in result.breakdown]


class TestChroma:
    def test_muted_family_flagged(self):
        families = [fam('Blue', 250.0, 0.12), fam('Purple', 290.0, 0.12), fam('Pink', 330.0, 0.03)]
        analyses = {a.family: a for a in analyse_chroma(families, default_target_curve())}
        pink = analyses['Pink']
        assert pink.flagged
        assert pink.deviation < -0.10
        assert pink.suggested_c > 0.03
        assert pink.suggested_hex != pink.hex

    def test_single_family_is_its_own_median(self):
        [a] = analyse_chroma([fam('Blue', 250.0)], default_target_curve())
        assert not a.flagged
        assert a.deviation == 0.0
        assert a.suggested_hex == a.hex

    def test_finding_and_penalty(self):
        families = [fam('Blue', 250.0, 0.12), fam('Purple', 290.0, 0.12), fam('Pink', 330.0, 0.03)]
        result = run_palette_audit(families)
        chroma = [f for f in result.findings if f.type == 'chroma-imbalance' and f.family == 'Pink']
        assert chroma[0].severity == 'warning'
        assert 'undersaturated' in chroma[0].message
        assert any(r.startswith('Pink chroma deviation') for r in reasons(result))
        # a flagged chroma without a lightness problem is an info-level tweak
        tweak = next(t for t in result.anchor_tweaks if t.family == 'Pink')
        assert tweak.chroma_changed and not tweak.lightness_changed


class TestAnchor:
    def test_light_anchor_pulled_to_target(self):
        curve = default_target_curve()
        result = run_palette_audit([fam('Sky', 250.0, 0.05, L=0.8)])
        [tweak] = result.anchor_tweaks
        assert tweak.lightness_changed
        assert not tweak.chroma_changed
        assert tweak.suggested_oklch.L == pytest.approx(curve.anchor_l)
        assert tweak.delta_e == pytest.approx(0.8 - curve.anchor_l, abs=1e-3)
        finding = next(f for f in result.findings if f.type == 'shade300-tweak')
        assert finding.severity == 'warning'
        assert 'significantly' in finding.message
        assert 'Sky anchor lightness off target' in reasons(result)

    def test_within_tolerance_untouched(self):
        curve = default_target_curve()
        families = [fam('Blue', 250.0, L=curve.anchor_l + 0.05)]
        chroma = analyse_chroma(families, curve)
        assert compute_anchor_tweaks(families, chroma, curve) == []


class TestGaps:
    def test_large_gap_warning(self):
        result = run_palette_audit([fam('Red', 25.0), fam('Orange', 50.0), fam('Yellow', 85.0)])
        gaps = [f for f in result.findings if f.type == 'hue-gap']
        assert gaps
        assert gaps[0].severity == 'warning'
        assert 'Yellow and Red' in gaps[0].message
        assert result.gap_suggestions
        assert result.coverage.family_count == 3

    def test_temperature_imbalance(self):
        families = [fam(f'W{i}', h) for i, h in enumerate((0.0, 20.0, 40.0, 320.0, 340.0))]
        result = run_palette_audit(families)
        temp = [f for f in result.findings if f.type == 'temperature']
        assert len(temp) == 1
        assert 'warm-heavy' in temp[0].message
        assert 'palette is warm-heavy' in reasons(result)


class TestScoring:
    def test_score_is_clamped_sum(self):
        families = [fam('A', 0.0, 0.03), fam('B', 3.0), fam('C', 8.0), fam('D', 200.0, L=0.75)]
        result = run_palette_audit(families)
        raw = 100 + sum(adj.delta for adj in result.breakdown)
        assert result.score == int(round(max(0.0, min(100.0, raw))))
        assert isinstance(result.score, int)

    def test_findings_sorted_by_severity(self):
        families = [fam('A', 0.0, 0.03), fam('B', 3.0), fam('C', 8.0), fam('D', 200.0, L=0.75)]
        ranks = [SEVERITY_ORDER[f.severity] for f in run_palette_audit(families).findings]
        assert ranks == sorted(ranks)

    def test_never_below_zero(self):
        # every neighbour is a critical collision
        families = [fam(f'F{i}', i * 2.0) for i in range(10)]
        assert run_palette_audit(families).score == 0

    def test_ideal_family_count_bonus(self):
        families = [fam(f'F{i}', i * 22.5, 0.08) for i in range(16)]
        result = run_palette_audit(families)
        assert '16 families (ideal 16–20)' in reasons(result)
        assert not any(f.type == 'hue-gap' for f in result.findings)

    def test_sparse_penalty(self):
        result = run_palette_audit([fam('A', 0.0), fam('B', 120.0), fam('C', 240.0)])
        assert 'only 3 families (fewer than 12)' in reasons(result)

    def test_checks_filter(self):
        result = run_palette_audit([fam('A', 0.0), fam('B', 2.0)], checks=['gaps'])
        assert result.checks_run == ['gaps']
        assert not any(f.type == 'proximity' for f in result.findings)

    def test_fresh_result_each_call(self):
        families = [fam('A', 0.0), fam('B', 2.0)]
        first = run_palette_audit(families)
        second = run_palette_audit(families)
        assert first is not second
        assert len(first.findings) == len(second.findings)
        assert first.checks_run == second.checks_run


class TestToDict:
    def test_keys(self):
        data = run_palette_audit([fam('A', 0.0), fam('B', 180.0)]).to_dict()
        assert data['family_count'] == 2
        assert data['checks_run'] == ['chroma', 'proximity', 'anchor', 'gaps']
        assert data['coverage']['family_count'] == 2
        assert {'score', 'breakdown', 'findings', 'gaps', 'gap_suggestions', 'anchor_tweaks'} <= set(data)
