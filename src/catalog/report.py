"""Markdown error report written next to the catalog after every run."""

from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

REPORT_HEADING = "# ❗ Error Report"
FATAL_HEADING = "# ❌ Fatal Error"
CLEAN_MESSAGE = "✅ No errors or warnings detected"


def _bullets(lines: Sequence[str]) -> str:
    return "\n".join(f"- {line}" for line in lines)


def build_error_report(issues: Sequence[str], blocked: Sequence[str], manual_run: bool) -> str:
    """Render issues, plus blocked repositories on manual runs, as markdown."""
    sections: List[str] = [REPORT_HEADING, ""]
    show_blocked = manual_run and bool(blocked)

    if not issues and not show_blocked:
        sections.append(CLEAN_MESSAGE)
        return "\n".join(sections)

    if issues:
        sections.append(f"### ⚠️ {len(issues)} Metadata / Processing Issues")
        sections.append(_bullets(issues))
        sections.append("")
    if show_blocked:
        sections.append(f"### 🛑 {len(blocked)} Blocked Repositories")
        sections.append(_bullets(blocked))
    return "\n".join(sections)


def build_fatal_report(message: str) -> str:
    return f"{FATAL_HEADING}\n\n{message}"


def write_report(path: str | Path, text: str) -> None:
    report_path = Path(path)
    if report_path.parent and not report_path.parent.exists():
        report_path.parent.mkdir(parents=True, exist_ok=True)
    report_path.write_text(text, encoding="utf-8")


__all__ = [
    "REPORT_HEADING",
    "FATAL_HEADING",
    "CLEAN_MESSAGE",
    "build_error_report",
    "build_fatal_report",
    "write_report",
]
