"""
Small explainability formatting helpers.

Used by the CLI to print compact summaries of ranked spots.
"""

from __future__ import annotations

from wanderer.domain.models import SpotScore


def one_line_summary(score: SpotScore) -> str:
    """Render a compact single-line summary for a spot score."""
    if score.random_fallback:
        return f"total={score.total_score:.3f} (random)"
    parts = [f"total={score.total_score:.1f}"]
    for signal in score.signals:
        if signal.contribution:
            parts.append(f"{signal.name}=+{signal.contribution:g}")
    return " | ".join(parts)
