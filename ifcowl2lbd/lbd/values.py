"""Name/value accumulators for property sets and entity attributes.

Both accumulators collect ``name -> value`` pairs and later write them
against any number of output resources, at the configured property level:

level 1 – ``target props:<name>_property_simple value``
level 2 – ``target props:<name> node . node schema:value value``
level 3 – as level 2 with an ``opm:CurrentPropertyState`` in between
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from rdflib import BNode, Literal, URIRef
from rdflib.namespace import RDF, RDFS, XSD
from rdflib.term import Node

from ifcowl2lbd.lbd.context import ConversionContext
from ifcowl2lbd.lbd.uri import to_camel_case
from ifcowl2lbd.rdf import vocabulary as V

logger = logging.getLogger(__name__)


# --------------------------------------------------------------------------- #
# Values
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class ScalarValue:
    """A literal nominal value, with the source property it came from."""

    value: Literal
    source: Optional[Node] = None


@dataclass(frozen=True)
class StructuredValue:
    """A property without a scalar value; the property node stands in."""

    node: Node


PropertyValue = Union[ScalarValue, StructuredValue]


def _term(value: PropertyValue) -> Node:
    return value.value if isinstance(value, ScalarValue) else value.node


# --------------------------------------------------------------------------- #
# Accumulators
# --------------------------------------------------------------------------- #


class ValueSet:
    """Accumulated values written to the property graph on :meth:`connect`."""

    simple_suffix = "_property_simple"

    def __init__(self, ctx: ConversionContext) -> None:
        self.ctx = ctx
        self.values: dict[str, PropertyValue] = {}

    def put(self, name: str, value: PropertyValue) -> None:
        self.values[name] = value

    def __len__(self) -> int:
        return len(self.values)

    def predicate(self, name: str) -> URIRef:
        camel = to_camel_case(name)
        if self.ctx.output.props_level == 1:
            return V.PROPS[camel + self.simple_suffix]
        return V.PROPS[camel]

    def connect(self, target: Node, identifier: str) -> None:
        """Write every accumulated value against *target*."""
        out = self.ctx.properties
        level = self.ctx.output.props_level
        for name, value in self.values.items():
            term = _term(value)
            predicate = self.predicate(name)
            if level == 1:
                out.add((target, predicate, term))
                continue

            node = self._node(name, identifier)
            out.add((target, predicate, node))
            if level == 2:
                out.add((node, V.SCHEMA.value, term))
            else:
                state = self._node(name, identifier, "_state")
                out.add((node, V.OPM.hasPropertyState, state))
                out.add((state, RDF.type, V.OPM.CurrentPropertyState))
                out.add((state, V.SCHEMA.value, term))
                out.add(
                    (
                        state,
                        V.PROV.generatedAtTime,
                        Literal(self.ctx.generated_at.isoformat(), datatype=XSD.dateTime),
                    )
                )

    def _node(self, name: str, identifier: str, suffix: str = "") -> Node:
        if self.ctx.output.blank_nodes:
            return BNode()
        return URIRef(f"{self.ctx.uri_base}{to_camel_case(name)}_{identifier}{suffix}")


class AttributeSet(ValueSet):
    """Direct (non property-set) attributes of one source entity."""

    simple_suffix = "_attribute_simple"


class PropertySet(ValueSet):
    """Content of one source property set, shared by every entity using it.

    Definition triples are written on the first :meth:`connect` only; later
    connections add just the per-entity links.
    """

    def __init__(self, ctx: ConversionContext, name: str = "") -> None:
        super().__init__(ctx)
        self.name = name
        self.connections = 0

    def connect(self, target: Node, identifier: str) -> None:
        if self.connections == 0:
            self._write_definitions()
        self.connections += 1
        super().connect(target, identifier)

    def _write_definitions(self) -> None:
        out = self.ctx.properties
        for name in self.values:
            predicate = self.predicate(name)
            out.add((predicate, RDFS.label, Literal(name)))
            definition = self.definition_of(name)
            if definition is not None:
                out.add((predicate, RDFS.seeAlso, definition))

    def definition_of(self, property_name: str) -> Optional[Node]:
        """Find the pset-definition resource describing *property_name*."""
        if not self.name:
            return None
        ontology = self.ctx.ontology
        for pset_def in ontology.subjects(RDF.type, V.PSD.PropertySetDef):
            if not any(str(label) == self.name for label in ontology.objects(pset_def, RDFS.label)):
                continue
            for prop_def in ontology.objects(pset_def, V.PSD.propertyDef):
                if any(str(label) == property_name for label in ontology.objects(prop_def, RDFS.label)):
                    return prop_def
        return None

    def __repr__(self) -> str:
        return f"PropertySet({self.name!r}, {len(self.values)} values)"
