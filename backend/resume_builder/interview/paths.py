"""Field paths and the merge engine.

Field proposals address the resume record with dotted/bracket paths such
as ``workExperience[0].jobTitle`` or ``skills.technicalSkills``. A path is
parsed once into typed segments and a single generic setter walks them,
creating missing objects/arrays on the way.

Merging is copy-on-write: only containers along a touched path are copied,
so the caller's record is never mutated.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict

from resume_builder.interview.contradiction import has_meaningful_data
from resume_builder.interview.sections import SECTION_ARRAY_KEYS, SECTION_FLAG_MAP

logger = logging.getLogger(__name__)

# =============================================================================
# Types
# =============================================================================


class FieldProposal(TypedDict):
    """A proposed value for one record field.

    Created per turn by the extraction engine, consumed once by the merge.
    A proposal with ``clear`` set replaces a whole section array (the user
    chose to remove previously collected entries).
    """

    path: str
    value: Any
    confidence: float
    clear: NotRequired[bool]


@dataclass(frozen=True)
class KeySegment:
    """Object key access (``personalInfo``)."""

    name: str


@dataclass(frozen=True)
class IndexSegment:
    """Array index access (``[0]``)."""

    index: int


PathSegment = KeySegment | IndexSegment

DEFAULT_CONFIDENCE_THRESHOLD = 0.7

# A key optionally followed by one or more [n] accessors
_SEGMENT = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)((?:\[\d+\])*)$")
_INDEX = re.compile(r"\[(\d+)\]")


class InvalidPathError(ValueError):
    """Raised by ``parse_path`` for malformed paths."""


# =============================================================================
# Parsing
# =============================================================================


def parse_path(path: str) -> list[PathSegment]:
    """Parse a dotted/bracket path into segments.

    Args:
        path: Path such as ``references[1].phone``.

    Returns:
        Segments, e.g. ``[KeySegment("references"), IndexSegment(1),
        KeySegment("phone")]``.

    Raises:
        InvalidPathError: If the path is empty or a part is malformed.
    """
    if not path or not path.strip():
        raise InvalidPathError("Field path is empty")

    segments: list[PathSegment] = []
    for part in path.strip().split("."):
        match = _SEGMENT.match(part)
        if not match:
            raise InvalidPathError(f"Malformed field path segment {part!r} in {path!r}")
        segments.append(KeySegment(match.group(1)))
        segments.extend(IndexSegment(int(i)) for i in _INDEX.findall(match.group(2)))
    return segments


def format_path(segments: list[PathSegment]) -> str:
    """Render segments back to path text (inverse of ``parse_path``)."""
    text = ""
    for segment in segments:
        if isinstance(segment, IndexSegment):
            text += f"[{segment.index}]"
        else:
            text += f".{segment.name}" if text else segment.name
    return text


def with_entry_index(path: str, index: int) -> str:
    """Rewrite every array index in ``path`` to ``index``.

    Guided-mode question definitions point at entry 0; the current entry
    of a multi-entry loop is substituted at answer time.
    """
    return _INDEX.sub(f"[{index}]", path)


# =============================================================================
# Reading
# =============================================================================


def get_value(record: dict[str, Any], path: str | list[PathSegment]) -> Any:
    """Read the value at ``path``, or None if any step is missing."""
    segments = parse_path(path) if isinstance(path, str) else path
    current: Any = record
    for segment in segments:
        if isinstance(segment, IndexSegment):
            if not isinstance(current, list) or segment.index >= len(current):
                return None
            current = current[segment.index]
        else:
            if not isinstance(current, dict):
                return None
            current = current.get(segment.name)
    return current


# =============================================================================
# Writing
# =============================================================================


def _empty_container(next_segment: PathSegment) -> dict[str, Any] | list[Any]:
    return [] if isinstance(next_segment, IndexSegment) else {}


def _copy_container(value: Any, next_segment: PathSegment) -> dict[str, Any] | list[Any]:
    """Shallow-copy ``value`` if it fits ``next_segment``, else start fresh."""
    if isinstance(next_segment, IndexSegment):
        return list(value) if isinstance(value, list) else []
    return dict(value) if isinstance(value, dict) else {}


def _assign(container: dict[str, Any] | list[Any], segment: PathSegment, value: Any) -> None:
    if isinstance(segment, IndexSegment):
        assert isinstance(container, list)
        # Pad with empty entries so that index i denotes the i-th entry
        while len(container) <= segment.index:
            container.append({})
        container[segment.index] = value
    else:
        assert isinstance(container, dict)
        container[segment.name] = value


def _read(container: dict[str, Any] | list[Any], segment: PathSegment) -> Any:
    if isinstance(segment, IndexSegment):
        assert isinstance(container, list)
        return container[segment.index] if segment.index < len(container) else None
    assert isinstance(container, dict)
    return container.get(segment.name)


def set_value(
    record: dict[str, Any], path: str | list[PathSegment], value: Any
) -> dict[str, Any]:
    """Return a copy of ``record`` with ``value`` stored at ``path``.

    Intermediate objects/arrays are created on demand; containers not on
    the path are shared with the original.

    Args:
        record: Source record (not mutated).
        path: Path text or pre-parsed segments.
        value: Leaf value to store.

    Returns:
        The updated record.

    Raises:
        InvalidPathError: If the path is malformed or starts with an index.
    """
    segments = parse_path(path) if isinstance(path, str) else path
    if not segments or not isinstance(segments[0], KeySegment):
        raise InvalidPathError("Field path must start with an object key")

    root = dict(record)
    container: dict[str, Any] | list[Any] = root
    for segment, next_segment in zip(segments, segments[1:]):
        existing = _read(container, segment)
        child = (
            _copy_container(existing, next_segment)
            if existing is not None
            else _empty_container(next_segment)
        )
        _assign(container, segment, child)
        container = child
    _assign(container, segments[-1], value)
    return root


_ARRAY_FLAGS: dict[str, str] = {
    array_key: SECTION_FLAG_MAP[section] for section, array_key in SECTION_ARRAY_KEYS.items()
}
_FLAG_ARRAYS: dict[str, str] = {flag: array_key for array_key, flag in _ARRAY_FLAGS.items()}


def clear_section(record: dict[str, Any], array_key: str, value: Any = None) -> dict[str, Any]:
    """Return a copy of ``record`` with a section array replaced.

    The section's gate flag follows the new array: False when it is left
    empty, True when the replacement still holds entries.
    """
    updated = dict(record)
    updated[array_key] = value if value is not None else []
    flag = _ARRAY_FLAGS.get(array_key)
    if flag:
        updated[flag] = has_meaningful_data(updated[array_key])
    return updated


def _denies_existing_entries(record: dict[str, Any], proposal: FieldProposal) -> bool:
    array_key = _FLAG_ARRAYS.get(proposal.get("path", ""))
    return (
        array_key is not None
        and proposal.get("value") is False
        and has_meaningful_data(record.get(array_key))
    )


def apply_extracted_fields(
    record: dict[str, Any],
    proposals: list[FieldProposal],
    threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
) -> dict[str, Any]:
    """Merge proposals at or above ``threshold`` into a copy of ``record``.

    Proposals below the threshold, or with a malformed path, are dropped
    without error. Clear proposals are applied first and regardless of
    confidence. A gate flag is never set to False while its section
    array still holds meaningful entries; removing them takes a clear
    proposal.

    Args:
        record: Current partial resume record (not mutated).
        proposals: Field proposals from this turn.
        threshold: Minimum confidence to merge.

    Returns:
        The updated record.
    """
    updated = record
    for proposal in proposals:
        if not proposal.get("clear"):
            continue
        try:
            root = parse_path(proposal.get("path", ""))[0]
        except InvalidPathError:
            continue
        if isinstance(root, KeySegment):
            updated = clear_section(updated, root.name, proposal.get("value"))

    for proposal in proposals:
        if proposal.get("clear") or proposal.get("confidence", 0) < threshold:
            continue
        if _denies_existing_entries(updated, proposal):
            logger.debug("Keeping %s: section still has entries", proposal.get("path"))
            continue
        try:
            updated = set_value(updated, proposal.get("path", ""), proposal.get("value"))
        except InvalidPathError:
            logger.debug("Dropping proposal with malformed path %r", proposal.get("path"))
    return updated
