"""Text report for a critical path."""

from __future__ import annotations

from pcritical.models import CriticalPath


def format_critical_path(path: CriticalPath) -> str:
    """One line per segment, root first."""
    return "".join(
        f"{seg.identity} [weight:{seg.cost} nfuncs:{seg.function_count}]\n"
        for seg in path.segments
    )


def critical_path_to_dict(path: CriticalPath) -> dict:
    return {
        "target": path.segments[0].identity if path.segments else None,
        "total_cost": path.total_cost,
        "segments": [
            {
                "identity": seg.identity,
                "cost": seg.cost,
                "function_count": seg.function_count,
            }
            for seg in path.segments
        ],
    }
