"""Conversion result data model.

Diagnostic       – one structured warning or error
ConversionResult – output graphs plus everything that went wrong
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from rdflib import Graph


# --------------------------------------------------------------------------- #
# Enumerations
# --------------------------------------------------------------------------- #


class ConversionStatus(str, Enum):
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"


class DiagnosticKind(str, Enum):
    PARSE_ERROR = "parse_error"
    UNSUPPORTED_SCHEMA = "unsupported_schema"
    UNMAPPED_TYPE = "unmapped_type"
    AMBIGUOUS_MAPPING = "ambiguous_mapping"
    MALFORMED_HIERARCHY = "malformed_hierarchy"
    MISSING_IDENTIFIER = "missing_identifier"
    CYCLE = "cycle"
    NO_GEOLOCATION = "no_geolocation"
    MISSING_NAMESPACE = "missing_namespace"
    UNREACHABLE_ELEMENT = "unreachable_element"
    BOT_INPUT = "bot_input"


# --------------------------------------------------------------------------- #
# Diagnostics
# --------------------------------------------------------------------------- #


@dataclass
class Diagnostic:
    """Something the converter recovered from."""

    kind: DiagnosticKind
    message: str
    subject: Optional[str] = None  # source or output resource the message is about

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "subject": self.subject,
        }


# --------------------------------------------------------------------------- #
# Result
# --------------------------------------------------------------------------- #


@dataclass
class ConversionResult:
    """Output of one conversion.

    ``graph`` is the merged output selected by the include flags; the three
    separate graphs are always available for callers that persist them
    independently.
    """

    graph: Graph = field(default_factory=Graph)
    topology: Graph = field(default_factory=Graph)
    product: Graph = field(default_factory=Graph)
    properties: Graph = field(default_factory=Graph)
    errors: list[Diagnostic] = field(default_factory=list)
    warnings: list[Diagnostic] = field(default_factory=list)
    info: list[Diagnostic] = field(default_factory=list)
    messages: list[str] = field(default_factory=list)

    @property
    def status(self) -> ConversionStatus:
        if self.errors:
            return ConversionStatus.FAILED
        if self.warnings:
            return ConversionStatus.PARTIAL
        return ConversionStatus.SUCCESS

    @property
    def ok(self) -> bool:
        return self.status != ConversionStatus.FAILED

    def warnings_of(self, kind: DiagnosticKind) -> list[Diagnostic]:
        return [w for w in self.warnings if w.kind == kind]
