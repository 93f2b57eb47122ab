"""Rule-based Markdown → Spec parser.

Recognizes one document dialect: a ``# Agent Spec: <name>`` title, a
``> Version: X | Status: Y | Domain: Z`` blockquote, and eight ``##``
sections (Identity, Capabilities, Knowledge, Constraints, Interaction Style,
Success Criteria, Interfaces, Version History). Each section has its own
micro-parser built from a handful of shared ones: bold key-value pairs,
pipe tables, bullet lists and numbered lists.

Parsing never fails. Missing sections become empty defaults and lines that
do not quite match their expected shape are dropped.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, TypeVar

from .log import logger
from .schema import (
    Capability,
    Constraints,
    HardConstraint,
    Identity,
    InteractionStyle,
    Interfaces,
    Knowledge,
    Metric,
    SoftConstraint,
    Spec,
    SuccessCriteria,
    VersionEntry,
    VersionHeader,
)

if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T")

__all__ = [
    "parse_bullet_list",
    "parse_capabilities",
    "parse_constraints",
    "parse_hard_constraints",
    "parse_identity",
    "parse_interaction_style",
    "parse_interfaces",
    "parse_key_value_pairs",
    "parse_knowledge",
    "parse_soft_constraints",
    "parse_spec",
    "parse_success_criteria",
    "parse_table",
    "parse_title",
    "parse_version_header",
    "parse_version_history",
    "split_sections",
]


_SECTION_SPLIT = re.compile(r"^##[ \t]+", re.MULTILINE)
_TITLE = re.compile(r"^#[ \t]+Agent Spec:[ \t]*(.+)$", re.MULTILINE)
_VERSION_HEADER = re.compile(
    r"^>[ \t]*Version:[ \t]*([^|\n]+)\|[ \t]*Status:[ \t]*([^|\n]+)\|[ \t]*Domain:[ \t]*(.+)$",
    re.MULTILINE,
)
_KEY_VALUE = re.compile(r"\*\*([^:*\n]+):\*\*[ \t]*(\S.*)")
_BULLET = re.compile(r"^[-*][ \t]+(.+)$", re.MULTILINE)
_NUMBERED_ITEM = re.compile(r"^\d+\.[ \t]+(.+)$", re.MULTILINE)
# 1. **Statement** - rationale (hyphen, en dash or em dash)
_HARD_CONSTRAINT = re.compile(r"^\d+\.[ \t]+\*\*(.+?)\*\*[ \t]*[-–—][ \t]*(.+)$", re.MULTILINE)
_TRAILING_REASON = re.compile(r"(.+?)\s*\(([^)]+)\)")
_SUBSECTION = re.compile(r"###[ \t]*([^\n]+)(.*?)(?=###|\Z)", re.DOTALL)


def _subsection_pattern(title: str) -> re.Pattern[str]:
    """Body of a ``### <title>...`` subsection, up to the next ``###``."""
    return re.compile(rf"###[ \t]*{re.escape(title)}[^\n]*(.*?)(?=###|\Z)", re.IGNORECASE | re.DOTALL)


def _handoff_pattern(label: str) -> re.Pattern[str]:
    """Text after a bold ``**<label>:**``, up to the next bold label."""
    return re.compile(
        rf"\*\*{re.escape(label)}:\*\*(.*?)(?=\*\*[^*\n]+:\*\*|\Z)",
        re.IGNORECASE | re.DOTALL,
    )


_IN_SCOPE = _subsection_pattern("In Scope")
_OUT_OF_SCOPE = _subsection_pattern("Out of Scope")
_HARD_CONSTRAINTS = _subsection_pattern("Hard Constraints")
_SOFT_CONSTRAINTS = _subsection_pattern("Soft Constraints")
_ACCEPTS_HANDOFFS = _handoff_pattern("Accepts handoffs from")
_HANDS_OFF = _handoff_pattern("Hands off to")


def _normalize_key(text: str) -> str:
    """'Delegates To' → 'delegates_to'."""
    return re.sub(r"\s+", "_", text.strip().lower())


def _subsection_body(pattern: re.Pattern[str], text: str) -> str | None:
    match = pattern.search(text)
    return match.group(1) if match else None


# ---------------------------------------------------------------------------
# Document structure
# ---------------------------------------------------------------------------


def split_sections(content: str) -> tuple[str, dict[str, str]]:
    """Split a document on ``##`` headers.

    Args:
        content: Full Markdown document.

    Returns:
        ``(preamble, sections)`` where ``preamble`` is the text before the
        first ``##`` header and ``sections`` maps normalized section names
        (``"interaction_style"``) to their raw bodies.
    """
    parts = _SECTION_SPLIT.split(content)
    sections: dict[str, str] = {}

    for part in parts[1:]:
        header, newline, body = part.partition("\n")
        if not newline:
            logger.debug("Skipping section header without body: %r", header)
            continue
        sections[_normalize_key(header)] = body

    return parts[0], sections


def parse_title(content: str) -> str | None:
    """Agent name from the ``# Agent Spec: <name>`` line."""
    match = _TITLE.search(content)
    return (match.group(1).strip() or None) if match else None


def parse_version_header(content: str) -> VersionHeader:
    """Extract the ``> Version: X | Status: Y | Domain: Z`` line.

    All three fields are ``None`` unless the whole line matches; a blank
    field is ``None`` too.
    """
    match = _VERSION_HEADER.search(content)
    if not match:
        return VersionHeader()
    version, status, domain = (group.strip() or None for group in match.groups())
    return VersionHeader(version=version, status=status, domain=domain)


# ---------------------------------------------------------------------------
# Shared micro-parsers
# ---------------------------------------------------------------------------


def parse_key_value_pairs(section: str) -> dict[str, str]:
    """Parse ``**Key:** value`` lines into ``{"key": "value"}``."""
    return {_normalize_key(m.group(1)): m.group(2).strip() for m in _KEY_VALUE.finditer(section)}


def _table_cells(line: str) -> list[str]:
    # Drop the fragments outside the outer pipes
    return line.split("|")[1:-1]


def parse_table(section: str) -> list[dict[str, str | None]]:
    """Parse a pipe-delimited Markdown table.

    The first pipe-prefixed line is the header and the second the separator.
    Data rows whose cell count differs from the header are dropped, and a
    cell containing only ``-`` becomes ``None``.

    Args:
        section: Text containing the table; non-table lines are ignored.

    Returns:
        One dict per data row, keyed by normalized header names.
    """
    lines = [line for line in section.split("\n") if line.strip().startswith("|")]
    if len(lines) < 3:
        return []

    headers = [_normalize_key(cell) for cell in _table_cells(lines[0])]
    rows: list[dict[str, str | None]] = []

    for line in lines[2:]:
        cells = [cell.strip() for cell in _table_cells(line)]
        if len(cells) != len(headers):
            logger.debug("Dropping table row with %d cells (expected %d): %r", len(cells), len(headers), line)
            continue
        rows.append({header: None if cell == "-" else cell for header, cell in zip(headers, cells)})

    return rows


def parse_bullet_list(section: str) -> list[str]:
    """Single-line ``-``/``*`` items, in document order."""
    items: list[str] = []
    for match in _BULLET.finditer(section):
        item = match.group(1).strip()
        if item:
            items.append(item)
    return items


def _numbered_items(text: str) -> list[str]:
    return [m.group(1).strip() for m in _NUMBERED_ITEM.finditer(text)]


# ---------------------------------------------------------------------------
# Section parsers
# ---------------------------------------------------------------------------


def parse_identity(section: str) -> Identity:
    pairs = parse_key_value_pairs(section)
    return Identity(
        name=pairs.get("name") or None,
        role=pairs.get("role") or None,
        personality=pairs.get("personality") or None,
    )


def parse_capabilities(section: str) -> list[Capability]:
    return [
        Capability(
            capability=row.get("capability") or None,
            description=row.get("description") or None,
            delegates_to=row.get("delegates_to") or None,
        )
        for row in parse_table(section)
    ]


def parse_knowledge(section: str) -> Knowledge:
    """In Scope / Out of Scope bullet lists."""
    in_scope = _subsection_body(_IN_SCOPE, section)
    out_of_scope = _subsection_body(_OUT_OF_SCOPE, section)
    return Knowledge(
        in_scope=parse_bullet_list(in_scope) if in_scope is not None else [],
        out_of_scope=parse_bullet_list(out_of_scope) if out_of_scope is not None else [],
    )


def parse_hard_constraints(section: str) -> list[HardConstraint]:
    """Parse ``N. **Statement** - rationale`` lines; anything else is skipped."""
    return [
        HardConstraint(statement=m.group(1).strip(), rationale=m.group(2).strip())
        for m in _HARD_CONSTRAINT.finditer(section)
    ]


def parse_soft_constraints(section: str) -> list[SoftConstraint]:
    """Parse ``N. Statement (reason)`` lines; the reason is optional."""
    constraints: list[SoftConstraint] = []
    for text in _numbered_items(section):
        if match := _TRAILING_REASON.fullmatch(text):
            constraints.append(SoftConstraint(statement=match.group(1).strip(), rationale=match.group(2).strip()))
        else:
            constraints.append(SoftConstraint(statement=text))
    return constraints


def parse_constraints(section: str) -> Constraints:
    hard = _subsection_body(_HARD_CONSTRAINTS, section)
    soft = _subsection_body(_SOFT_CONSTRAINTS, section)
    return Constraints(
        hard=parse_hard_constraints(hard) if hard is not None else [],
        soft=parse_soft_constraints(soft) if soft is not None else [],
    )


def parse_interaction_style(section: str) -> InteractionStyle:
    pairs = parse_key_value_pairs(section)
    return InteractionStyle(
        tone=pairs.get("tone") or None,
        verbosity=pairs.get("verbosity") or None,
        initiative=pairs.get("initiative") or None,
        clarification=pairs.get("clarification") or None,
    )


def parse_success_criteria(section: str) -> SuccessCriteria:
    """Metrics table plus numbered notes from every ``###`` subsection.

    Every ``###`` header in the section is scanned as a notes subsection,
    including one placed above the metrics table. Subsections without
    numbered items produce no entry.
    """
    metrics = [
        Metric(
            metric=row.get("metric") or None,
            target=row.get("target") or None,
            tool=row.get("tool") or None,
        )
        for row in parse_table(section)
    ]

    notes: dict[str, list[str]] = {}
    pos = 0
    while (match := _SUBSECTION.search(section, pos)) is not None:
        items = _numbered_items(match.group(2).strip())
        if items:
            notes[_normalize_key(match.group(1))] = items
        pos = match.end()

    return SuccessCriteria(metrics=metrics, notes=notes)


def parse_interfaces(section: str) -> Interfaces:
    pairs = parse_key_value_pairs(section)
    accepts = _subsection_body(_ACCEPTS_HANDOFFS, section)
    hands_off = _subsection_body(_HANDS_OFF, section)
    return Interfaces(
        standalone=pairs.get("standalone") or None,
        accepts_handoffs_from=parse_bullet_list(accepts) if accepts is not None else [],
        hands_off_to=parse_bullet_list(hands_off) if hands_off is not None else [],
    )


def parse_version_history(section: str) -> list[VersionEntry]:
    return [
        VersionEntry(
            version=row.get("version") or None,
            date=row.get("date") or None,
            changes=row.get("changes") or None,
        )
        for row in parse_table(section)
    ]


def _section(sections: dict[str, str], name: str, parse: Callable[[str], T]) -> T | None:
    """Run ``parse`` on a section if the document has it."""
    return parse(sections[name]) if name in sections else None


def parse_spec(content: str) -> Spec:
    """Parse a Markdown agent spec into a Spec record.

    Args:
        content: Raw Markdown content of the spec.

    Returns:
        A frozen Spec. Absent record-valued sections are ``None`` and absent
        list-valued sections are empty tuples. Never raises on malformed input.
    """
    _, sections = split_sections(content)
    header = parse_version_header(content)

    return Spec(
        name=parse_title(content),
        version=header.version,
        status=header.status,
        domain=header.domain,
        identity=_section(sections, "identity", parse_identity),
        capabilities=_section(sections, "capabilities", parse_capabilities) or (),
        knowledge=_section(sections, "knowledge", parse_knowledge),
        constraints=_section(sections, "constraints", parse_constraints),
        interaction_style=_section(sections, "interaction_style", parse_interaction_style),
        success_criteria=_section(sections, "success_criteria", parse_success_criteria),
        interfaces=_section(sections, "interfaces", parse_interfaces),
        version_history=_section(sections, "version_history", parse_version_history) or (),
    )
