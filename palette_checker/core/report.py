"""Report builder: text and JSON output for scales, neutral analyses and palette audits."""

import json
from dataclasses import asdict, is_dataclass
from typing import Any

from palette_checker.core.types import AuditResult, NeutralAnalysis, ScaleResult

SEVERITY_MARK = {'critical': '✗', 'warning': '!', 'info': '·'}


def format_scale_text(scale: ScaleResult) -> str:
    """Format a generated scale as human-readable text."""
    lines = []
    header = f'{scale.name}: {scale.input_hex} (H {scale.hue:.1f}°)'
    if scale.is_achromatic:
        header += ' (achromatic)'
    lines.append(header)
    lines.append('')

    for s in scale.shades:
        L, C, H = s.oklch
        active = s.active_group
        primary = active.levels[0]
        flags = []
        if s.is_anchor:
            flags.append('anchor')
        if s.was_l_adjusted:
            flags.append('L adjusted')
        if s.was_gamut_reduced:
            flags.append('gamut reduced')
        mark = '✓' if primary.apca_level in ('good', 'excellent') else '✗'
        lines.append(
            f'  {s.shade:>3}  {s.hex}  L={L:.3f} C={C:.3f} H={H:.1f}  '
            f'{active.token} Lc={primary.apca_lc:.1f} {mark}  {s.mode_label}'
            + (f'  [{", ".join(flags)}]' if flags else '')
        )
    return '\n'.join(lines)


def format_audit_text(audit: AuditResult) -> str:
    """Format an audit result as human-readable text."""
    lines = [f'palette audit: {audit.family_count} families  score {audit.score}/100', '']

    if audit.findings:
        for f in audit.sorted_findings():
            lines.append(f'  {SEVERITY_MARK.get(f.severity, "?")} [{f.type}] {f.message}')
        lines.append('')

    if audit.breakdown:
        lines.append('score breakdown:')
        for adj in audit.breakdown:
            lines.append(f'  {adj.delta:+.1f}  {adj.reason}')
        lines.append('')

    if audit.coverage is not None:
        cov = audit.coverage
        lines.append(
            f'coverage: largest gap {cov.largest_gap:.0f}°, ideal {cov.ideal_gap:.1f}°, '
            f'{cov.warm_count} warm / {cov.cool_count} cool / {cov.neutral_count} neutral ({cov.balance}), '
            f'room for {cov.remaining_capacity} more'
        )
    return '\n'.join(lines).rstrip('\n')


def format_neutral_text(analysis: NeutralAnalysis) -> str:
    """Format a grey-scale analysis as human-readable text."""
    kind = ' (alpha)' if analysis.is_alpha else ''
    lines = [f'{analysis.family_name}{kind}: distribution {analysis.distribution_score}/100', '']

    for s in analysis.shades:
        tint = ', '.join(f'{m.source} {m.name}' for m in s.tint_matches)
        lines.append(
            f'  {s.shade:>3}  {s.hex}  L={s.oklch.L:.3f} C={s.oklch.C:.4f}  '
            f'Lc white={s.apca_on_white:.1f} dark={s.apca_on_dark:.1f}' + (f'  tint: {tint}' if tint else '')
        )

    if analysis.clusters:
        lines.append('')
        for c in analysis.clusters:
            shades = ', '.join(str(s) for s in c.shades)
            lines.append(f'  ! {shades}: {c.reason}; keep {c.keep_shade}')

    if analysis.name_matches:
        lines.append('')
        names = ', '.join(f'{m.source} {m.name}' for m in analysis.name_matches)
        lines.append(f'closest named greys: {names}' + ('' if analysis.tint_consistent else ' (tint drifts)'))
    return '\n'.join(lines)


def _jsonable(obj: Any) -> Any:
    if isinstance(obj, AuditResult):
        return obj.to_dict()
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    if isinstance(obj, tuple) and hasattr(obj, '_asdict'):
        return obj._asdict()
    if isinstance(obj, (list, tuple)):
        return [_jsonable(o) for o in obj]
    if isinstance(obj, dict):
        return {str(k): _jsonable(v) for k, v in obj.items()}
    return obj


def format_json(obj: Any) -> str:
    """Format a ScaleResult, AuditResult or other result record as JSON."""
    return json.dumps(_jsonable(obj), indent=2)
