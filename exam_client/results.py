"""Plain-text rendering of an exam result (submit or results endpoint payload)."""

from __future__ import annotations

from typing import Any, Mapping

from grades import grade_for, passed


def format_duration(seconds: int | None) -> str:
    mins, secs = divmod(int(seconds or 0), 60)
    return f"{mins}m {secs}s"


def summarize(result: Mapping[str, Any]) -> str:
    pct = result.get("percentage", 0)
    lines = [
        f"Grade: {grade_for(pct)} ({pct}%)",
        f"Status: {'Pass' if passed(pct) else 'Fail'}",
        f"Score: {result.get('score', 0)}/{result.get('totalQuestions', 0)}",
        f"Time taken: {format_duration(result.get('timeTaken'))}",
    ]
    if result.get("completedAt"):
        lines.append(f"Completed at: {result['completedAt']}")
    return "\n".join(lines)
