"""Output resource naming."""

from __future__ import annotations

import re

from rdflib import URIRef
from rdflib.term import Node

from ifcowl2lbd.lbd.context import ConversionContext
from ifcowl2lbd.rdf import vocabulary as V
from ifcowl2lbd.rdf.path import local_name

_WORD_SPLIT = re.compile(r"[\W_]+")


def normalize_base(uri_base: str) -> str:
    if not uri_base.endswith("#") and not uri_base.endswith("/"):
        return uri_base + "#"
    return uri_base


def format_uri(ctx: ConversionContext, node: Node, type_name: str) -> URIRef:
    """Return the output URI for source *node* shown as *type_name*.

    GUID-carrying entities get ``<base><type>_<uuid>``. Property single
    values are named after the numeric suffix of their local name; anything
    else after its local name minus a leading ``Ifc``.
    """
    guid = ctx.guid(node)
    if guid is not None:
        return URIRef(f"{ctx.uri_base}{type_name.lower()}_{guid}")

    name = local_name(node)
    if name.startswith(V.PROPERTY_SINGLE_VALUE_MARKER):
        if name.rfind("_") > 0:
            name = name[name.rfind("_") + 1:]
        return URIRef(f"{ctx.uri_base}propertySingleValue_{name}")
    if name.lower().startswith("ifc"):
        name = name[3:]
    return URIRef(f"{ctx.uri_base}{type_name.lower()}_{name}")


def to_camel_case(name: str) -> str:
    """``"Fire Rating"`` / ``"name_IfcRoot"`` → ``"fireRating"`` / ``"nameIfcRoot"``."""
    words = [w for w in _WORD_SPLIT.split(name) if w]
    if not words:
        return ""
    head, rest = words[0], words[1:]
    return head[:1].lower() + head[1:] + "".join(w[:1].upper() + w[1:] for w in rest)
