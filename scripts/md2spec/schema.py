"""Pydantic schema for parsed agent specs.

Attributes are snake_case in Python; serialized keys are camelCase via the
alias generator (``delegatesTo``, ``inScope``, ``versionHistory`` ...).
Every section is optional: record-valued sections default to ``None`` and
list-valued ones to an empty tuple. Records are frozen and sequences are
tuples, so a parsed Spec is hashable and cannot be changed in place. The
one mapping, ``SuccessCriteria.notes``, is a plain dict with tuple values.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

__all__ = [
    "Capability",
    "Constraints",
    "HardConstraint",
    "Identity",
    "InteractionStyle",
    "Interfaces",
    "Knowledge",
    "Metric",
    "SoftConstraint",
    "Spec",
    "SuccessCriteria",
    "VersionEntry",
    "VersionHeader",
]


class _Record(BaseModel):
    """Base for all spec records: frozen, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class VersionHeader(_Record):
    """Fields of the ``> Version: X | Status: Y | Domain: Z`` line."""

    version: str | None = None
    status: str | None = None
    domain: str | None = None


class Identity(_Record):
    """Who the agent is."""

    name: str | None = None
    role: str | None = None
    personality: str | None = None


class Capability(_Record):
    """A row of the Capabilities table."""

    capability: str | None = None
    description: str | None = None
    delegates_to: str | None = Field(default=None, description="Agent the work is handed to, if any")


class Knowledge(_Record):
    in_scope: tuple[str, ...] = ()
    out_of_scope: tuple[str, ...] = ()


class HardConstraint(_Record):
    """A non-negotiable rule. The rationale is always present."""

    statement: str
    rationale: str


class SoftConstraint(_Record):
    """A preference. The rationale is optional."""

    statement: str
    rationale: str | None = None


class Constraints(_Record):
    hard: tuple[HardConstraint, ...] = ()
    soft: tuple[SoftConstraint, ...] = ()


class InteractionStyle(_Record):
    tone: str | None = None
    verbosity: str | None = None
    initiative: str | None = None
    clarification: str | None = None


class Metric(_Record):
    """A row of the Success Criteria table."""

    metric: str | None = None
    target: str | None = None
    tool: str | None = None


class SuccessCriteria(_Record):
    metrics: tuple[Metric, ...] = ()
    notes: dict[str, tuple[str, ...]] = Field(
        default_factory=dict,
        description="Numbered items keyed by normalized subsection title",
    )

    def __hash__(self) -> int:
        return hash((self.metrics, tuple(self.notes.items())))


class Interfaces(_Record):
    standalone: str | None = None
    accepts_handoffs_from: tuple[str, ...] = ()
    hands_off_to: tuple[str, ...] = ()


class VersionEntry(_Record):
    """A row of the Version History table."""

    version: str | None = None
    date: str | None = None
    changes: str | None = None


class Spec(_Record):
    """Structured representation of one Markdown agent spec.

    Fields are declared in output order: header metadata first, then the
    eight sections in the order they appear in a well-formed document.
    """

    name: str | None = Field(default=None, description="Agent name from the '# Agent Spec:' title")
    version: str | None = None
    status: str | None = None
    domain: str | None = None
    identity: Identity | None = None
    capabilities: tuple[Capability, ...] = ()
    knowledge: Knowledge | None = None
    constraints: Constraints | None = None
    interaction_style: InteractionStyle | None = None
    success_criteria: SuccessCriteria | None = None
    interfaces: Interfaces | None = None
    version_history: tuple[VersionEntry, ...] = ()

    def to_dict(self) -> dict:
        """Plain JSON-compatible dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)

