"""Contradiction detection.

Flags a user denial ("I don't have any work experience") that conflicts
with entries already collected for that section. Placeholder entries
(``{"id": ...}`` only, or all-empty values) do not count as data.

Detection never clears anything; the orchestrator asks the user whether
to keep or remove the existing entries.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

_BARE_NO = re.compile(r"^(no|nope|nah|none|nothing|skip|n/a)\.?$", re.IGNORECASE)


def _patterns(*patterns: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


# Record array key -> denial patterns
CONTRADICTION_PATTERNS: dict[str, tuple[re.Pattern[str], ...]] = {
    "volunteering": _patterns(
        r"i (don'?t|do not|dont) have (any )?(volunteer|volunteering)",
        r"i have no volunteer",
        r"no volunteer experience",
        r"actually.*(don'?t|no).*(volunteer)",
        r"remove.*(volunteer|volunteering)",
        r"delete.*(volunteer|volunteering)",
    ),
    "workExperience": _patterns(
        r"i (don'?t|do not|dont) have (any )?(work|job) experience",
        r"i have no work experience",
        r"no (work|job) experience",
        r"never (worked|had a job)",
        r"actually.*(don'?t|no).*(work|job)",
        r"remove.*(work|job)",
        r"delete.*(work|job)",
    ),
    "education": _patterns(
        r"i (don'?t|do not|dont) have (any )?(education|degree)",
        r"i have no education",
        r"actually.*(don'?t|no).*(education|school)",
        r"remove.*(education|school)",
        r"delete.*(education|school)",
    ),
    "references": _patterns(
        r"i (don'?t|do not|dont) have (any )?reference",
        r"i have no reference",
        r"actually.*(don'?t|no).*reference",
        r"remove.*reference",
        r"delete.*reference",
    ),
}


@dataclass
class ContradictionResult:
    """Outcome of ``detect_contradiction``.

    Attributes:
        is_contradiction: True when a denial conflicts with existing data.
        section: Record array key of the conflicting section.
        existing_data: The conflicting entries as stored in the record.
        existing_data_summary: Short digest for the clarification prompt.
    """

    is_contradiction: bool = False
    section: str | None = None
    existing_data: list[dict[str, Any]] | None = None
    existing_data_summary: str | None = None


def _is_meaningful_value(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, (list, tuple, dict)):
        return len(value) > 0
    return bool(value)


def is_meaningful_entry(entry: Any) -> bool:
    """An entry is meaningful if any non-id key holds a non-empty value."""
    if not isinstance(entry, dict):
        return False
    return any(key != "id" and _is_meaningful_value(value) for key, value in entry.items())


def has_meaningful_data(entries: Any) -> bool:
    """Check whether a section array holds at least one meaningful entry."""
    if not isinstance(entries, list):
        return False
    return any(is_meaningful_entry(entry) for entry in entries)


def _summarize_work(entry: dict[str, Any]) -> str | None:
    if not (entry.get("companyName") or entry.get("jobTitle")):
        return None
    summary = entry.get("companyName") or "Unknown company"
    if entry.get("jobTitle"):
        summary += f" as {entry['jobTitle']}"
    return summary


def _summarize_education(entry: dict[str, Any]) -> str | None:
    if not (entry.get("schoolName") or entry.get("degree")):
        return None
    summary = entry.get("schoolName") or "Unknown school"
    if entry.get("degree"):
        summary += f" ({entry['degree']})"
    return summary


def _summarize_volunteering(entry: dict[str, Any]) -> str | None:
    organization = entry.get("organizationName") or entry.get("organization")
    if not (organization or entry.get("role")):
        return None
    summary = organization or "Unknown organization"
    if entry.get("role"):
        summary += f" as {entry['role']}"
    return summary


def _summarize_reference(entry: dict[str, Any]) -> str | None:
    title = entry.get("jobTitle") or entry.get("title")
    if not (entry.get("name") or title):
        return None
    summary = entry.get("name") or "Unknown reference"
    if title:
        summary += f" ({title})"
    return summary


_SUMMARIZERS: dict[str, Callable[[dict[str, Any]], str | None]] = {
    "workExperience": _summarize_work,
    "education": _summarize_education,
    "volunteering": _summarize_volunteering,
    "references": _summarize_reference,
}


def summarize_entries(section: str, entries: list[Any]) -> str:
    """Digest the identifying fields of ``entries``, comma-joined."""
    summarize = _SUMMARIZERS[section]
    parts = [
        part
        for part in (summarize(entry) for entry in entries if isinstance(entry, dict))
        if part
    ]
    return ", ".join(parts)


def check_existing_entries(section: str, record: dict[str, Any]) -> ContradictionResult:
    """Report the entries a denial of ``section`` would conflict with.

    Args:
        section: Record array key (``workExperience``, ``education``, ...).
        record: Current partial resume record.

    Returns:
        ContradictionResult flagged when the array holds meaningful,
        summarizable entries.
    """
    entries = record.get(section)
    if not has_meaningful_data(entries):
        return ContradictionResult()
    summary = summarize_entries(section, entries)
    if not summary:
        return ContradictionResult()
    return ContradictionResult(
        is_contradiction=True,
        section=section,
        existing_data=entries,
        existing_data_summary=summary,
    )


def detect_contradiction(text: str, record: dict[str, Any]) -> ContradictionResult:
    """Compare a denial in ``text`` against data already in ``record``.

    Args:
        text: User reply.
        record: Current partial resume record.

    Returns:
        ContradictionResult; ``is_contradiction`` is False for bare "no"
        replies, for replies matching no denial pattern, and when the
        denied section holds no meaningful, summarizable entries.
    """
    if _BARE_NO.match((text or "").strip()):
        return ContradictionResult()

    for section, patterns in CONTRADICTION_PATTERNS.items():
        if not any(pattern.search(text) for pattern in patterns):
            continue
        result = check_existing_entries(section, record)
        if result.is_contradiction:
            return result

    return ContradictionResult()
