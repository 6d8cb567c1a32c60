"""Per-conversion state.

A :class:`ConversionContext` is created fresh for every input graph and
handed explicitly to each stage, so nothing leaks between conversions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional, Union

from rdflib import Graph, Literal
from rdflib.term import Node

from ifcowl2lbd.config import OutputConfig
from ifcowl2lbd.errors import GuidError
from ifcowl2lbd.lbd.model import Diagnostic, DiagnosticKind
from ifcowl2lbd.rdf import vocabulary as V
from ifcowl2lbd.rdf.guid import IdentifierSource, expand_guid
from ifcowl2lbd.rdf.path import Step, first_value
from ifcowl2lbd.status import StatusChannel

if TYPE_CHECKING:
    from ifcowl2lbd.lbd.mapping import TypeMapper
    from ifcowl2lbd.lbd.values import PropertySet

logger = logging.getLogger(__name__)


@dataclass
class ConversionContext:
    source: Graph
    ontology: Graph
    ifc: V.IfcOWLNamespace
    uri_base: str
    output: OutputConfig = field(default_factory=OutputConfig)
    identifiers: IdentifierSource = field(default_factory=IdentifierSource)
    status: StatusChannel = field(default_factory=StatusChannel)
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    topology: Graph = field(default_factory=Graph)
    product: Graph = field(default_factory=Graph)
    properties: Graph = field(default_factory=Graph)

    type_mapper: Optional["TypeMapper"] = None
    property_sets: dict[Node, "PropertySet"] = field(default_factory=dict)
    visited_attributes: set[Node] = field(default_factory=set)
    warnings: list[Diagnostic] = field(default_factory=list)
    info: list[Diagnostic] = field(default_factory=list)

    _guids: dict[Node, Optional[str]] = field(default_factory=dict, repr=False)
    _generated: dict[Node, str] = field(default_factory=dict, repr=False)
    _guid_errors: dict[Node, str] = field(default_factory=dict, repr=False)

    # ------------------------------------------------------------------ #
    # Diagnostics
    # ------------------------------------------------------------------ #

    def warn(self, kind: DiagnosticKind, message: str, subject: Optional[Union[Node, str]] = None) -> None:
        logger.warning("%s: %s", kind.value, message)
        self.warnings.append(
            Diagnostic(kind=kind, message=message, subject=str(subject) if subject is not None else None)
        )

    def note(self, kind: DiagnosticKind, message: str, subject: Optional[Union[Node, str]] = None) -> None:
        logger.info("%s: %s", kind.value, message)
        self.info.append(
            Diagnostic(kind=kind, message=message, subject=str(subject) if subject is not None else None)
        )

    # ------------------------------------------------------------------ #
    # Identifiers
    # ------------------------------------------------------------------ #

    def guid(self, node: Node) -> Optional[str]:
        """Return the decoded GUID of *node*, or None when it has none."""
        if node in self._guids:
            return self._guids[node]
        decoded: Optional[str] = None
        raw = first_value(self.source, node, [Step(self.ifc.global_id), Step(V.EXPRESS.hasString)])
        if isinstance(raw, Literal):
            try:
                decoded = expand_guid(str(raw))
            except GuidError as exc:
                self._guid_errors[node] = str(exc)
                logger.debug("Undecodable GUID on %s: %s", node, exc)
        self._guids[node] = decoded
        return decoded

    def identifier(self, node: Node) -> str:
        """Decoded GUID of *node*, or a generated identifier when absent.

        The first generation for a node records one ``missing_identifier``
        warning; later calls reuse the generated value silently.
        """
        decoded = self.guid(node)
        if decoded is not None:
            return decoded
        generated = self._generated.get(node)
        if generated is None:
            generated = self.identifiers()
            self._generated[node] = generated
            reason = self._guid_errors.get(node, "no GUID")
            self.warn(
                DiagnosticKind.MISSING_IDENTIFIER,
                f"{node}: {reason}, generated identifier {generated}",
                node,
            )
        return generated
