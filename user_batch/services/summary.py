from __future__ import annotations

from ..models.processing_result import IngestionResult, MutationResult

"""SUMMARY line rendering.

Format:
SUMMARY action={action} rows={rows} accepted={accepted} rejected={rejected}
count={count} elapsed_sec={elapsed}
"""

__all__ = [
    "format_seconds",
    "render_summary_line",
    "summarize_ingestion",
    "summarize_mutation",
]


def format_seconds(value: float) -> str:
    """Integral values without decimals, tiny values without scientific notation."""
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(round(value, 4))


def render_summary_line(
    action: str,
    *,
    rows: int = 0,
    accepted: int = 0,
    rejected: int = 0,
    count: int = 0,
    elapsed_seconds: float = 0.0,
) -> str:
    """
    >>> render_summary_line("import", rows=3, accepted=2, rejected=1, count=2, elapsed_seconds=2.0)
    'SUMMARY action=import rows=3 accepted=2 rejected=1 count=2 elapsed_sec=2'
    """
    return (
        f"SUMMARY action={action} "
        f"rows={rows} "
        f"accepted={accepted} "
        f"rejected={rejected} "
        f"count={count} "
        f"elapsed_sec={format_seconds(elapsed_seconds)}"
    )


def summarize_ingestion(action: str, result: IngestionResult) -> str:
    return render_summary_line(
        action,
        rows=result.total_rows,
        accepted=len(result.accepted),
        rejected=len(result.rejected),
        count=result.inserted,
        elapsed_seconds=result.elapsed_seconds,
    )


def summarize_mutation(action: str, result: MutationResult) -> str:
    return render_summary_line(
        action,
        rows=result.count,
        accepted=result.count,
        count=result.count,
        elapsed_seconds=result.elapsed_seconds,
    )
