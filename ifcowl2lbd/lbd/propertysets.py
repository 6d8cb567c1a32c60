"""Property-set aggregation.

Reads every ``IfcPropertySet`` of the source graph into a
:class:`~ifcowl2lbd.lbd.values.PropertySet` keyed by the property-set node,
before the hierarchy is walked. Entities referencing a set later only
connect to the already collected content.
"""

from __future__ import annotations

import logging
from typing import Optional

from rdflib import Literal
from rdflib.namespace import RDF
from rdflib.term import Node

from ifcowl2lbd.lbd.context import ConversionContext
from ifcowl2lbd.lbd.values import PropertySet, ScalarValue, StructuredValue
from ifcowl2lbd.rdf import vocabulary as V
from ifcowl2lbd.rdf.path import InverseStep, Step, copy_triples, first_value, path_query

logger = logging.getLogger(__name__)

# Nominal value wrappers, tried in this order
_VALUE_PREDICATES = (
    V.EXPRESS.hasString,
    V.EXPRESS.hasDouble,
    V.EXPRESS.hasInteger,
    V.EXPRESS.hasBoolean,
    V.EXPRESS.hasLogical,
)

_NAN = Literal("NaN", datatype=V.XSD.double)


def property_value(ctx: ConversionContext, prop: Node) -> Optional[Node]:
    """Return the first nominal value found on *prop*, or None."""
    for predicate in _VALUE_PREDICATES:
        value = first_value(ctx.source, prop, [Step(ctx.ifc.nominal_value), Step(predicate)])
        if value is not None:
            return value
    return None


def collect_property_sets(ctx: ConversionContext) -> dict[Node, PropertySet]:
    """Fill ``ctx.property_sets`` from the source graph and return it."""
    g = ctx.source
    for pset_node in g.subjects(RDF.type, ctx.ifc.IfcPropertySet):
        pset_name = first_value(g, pset_node, [Step(ctx.ifc.name_root), Step(V.EXPRESS.hasString)])
        logger.debug("included PSET : %s", pset_name)

        for prop in path_query(g, pset_node, [Step(ctx.ifc.has_properties)]):
            name = first_value(g, prop, [Step(ctx.ifc.name_property), Step(V.EXPRESS.hasString)])
            if name is None:
                continue
            pname = str(name)

            pset = ctx.property_sets.get(pset_node)
            if pset is None:
                pset = PropertySet(ctx, str(pset_name) if pset_name is not None else "")
                ctx.property_sets[pset_node] = pset
                logger.debug("PUT: %s", pset_node)

            value = property_value(ctx, prop)
            if value is None:
                pset.put(pname, StructuredValue(prop))
                copy_triples(g, prop, ctx.properties)
                continue

            if str(value) == pname or not str(value).strip():
                continue
            if isinstance(value, Literal) and str(value) == V.NAN_TOKEN:
                value = _NAN
            if isinstance(value, Literal):
                pset.put(pname, ScalarValue(value, prop))
            else:
                pset.put(pname, StructuredValue(value))

    ctx.status.post("LBD properties read")
    logger.info("Collected %d property sets", len(ctx.property_sets))
    return ctx.property_sets


def connect_property_sets(ctx: ConversionContext, source: Node, target: Node, identifier: str) -> int:
    """Connect every known property set of *source* to *target*.

    Returns the number of sets connected.
    """
    connected = 0
    steps = [InverseStep(ctx.ifc.related_objects_defines), Step(ctx.ifc.relating_property_definition)]
    for pset_node in path_query(ctx.source, source, steps):
        pset = ctx.property_sets.get(pset_node)
        if pset is not None:
            pset.connect(target, identifier)
            connected += 1
    return connected
