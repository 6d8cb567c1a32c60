"""Attribute propagation from ifcOWL entities to their LBD resources."""

from __future__ import annotations

import logging

from rdflib import Literal
from rdflib.term import Node

from ifcowl2lbd.lbd.context import ConversionContext
from ifcowl2lbd.lbd.values import AttributeSet, ScalarValue
from ifcowl2lbd.rdf import vocabulary as V
from ifcowl2lbd.rdf.path import get_type, local_name

logger = logging.getLogger(__name__)

_ANY_WRAPPER_VALUES = (
    V.EXPRESS.hasString,
    V.EXPRESS.hasInteger,
    V.EXPRESS.hasDouble,
    V.EXPRESS.hasBoolean,
)


def copy_attributes(ctx: ConversionContext, source: Node, target: Node) -> bool:
    """Copy the attributes of *source* onto *target*, once per source entity.

    Literal-valued statements are copied verbatim into the topology graph.
    Wrapped values (``IfcLabel``, ``IfcIdentifier``, measure types ...) are
    unwrapped into an :class:`AttributeSet` written to the property graph.
    Returns False when *source* was handled before.
    """
    if source in ctx.visited_attributes:
        return False
    ctx.visited_attributes.add(source)

    g = ctx.source
    attributes = AttributeSet(ctx)
    for predicate, obj in g.predicate_objects(source):
        if isinstance(obj, Literal):
            ctx.topology.add((target, predicate, obj))
            continue

        name = local_name(predicate)
        if name.startswith(V.TAG_MARKER):
            name = V.TAG_ATTRIBUTE

        wrapper = get_type(g, obj)
        if wrapper is None:
            continue
        if local_name(wrapper) == "IfcLabel":
            for value in g.objects(obj, V.EXPRESS.hasString):
                if isinstance(value, Literal) and len(str(value)) > 0:
                    attributes.put(name, ScalarValue(value, obj))
        elif local_name(wrapper) == "IfcIdentifier":
            for value in g.objects(obj, V.EXPRESS.hasString):
                attributes.put(name, ScalarValue(value, obj))
        else:
            for value_predicate in _ANY_WRAPPER_VALUES:
                for value in g.objects(obj, value_predicate):
                    attributes.put(name, ScalarValue(value, obj))

    attributes.connect(target, ctx.identifier(source))
    logger.debug("Copied %d attributes of %s", len(attributes), source)
    return True
