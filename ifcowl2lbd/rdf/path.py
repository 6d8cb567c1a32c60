"""Path queries and small graph helpers over rdflib graphs."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Union

from rdflib import Graph, Literal, URIRef
from rdflib.namespace import RDF as RDF_NS
from rdflib.term import Node

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------------- #
# Path steps
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class Step:
    """Follow *predicate* from subject to object."""

    predicate: URIRef


@dataclass(frozen=True)
class InverseStep:
    """Follow *predicate* backwards, from object to subject."""

    predicate: URIRef


PathStep = Union[Step, InverseStep]


def path_query(g: Graph, start: Node, steps: Sequence[PathStep]) -> list[Node]:
    """Return the terminal nodes reached by following *steps* from *start*.

    Results keep first-seen order and contain no duplicates. An empty list
    is returned as soon as a hop leads nowhere.
    """
    current: list[Node] = [start]
    for step in steps:
        following: list[Node] = []
        seen: set[Node] = set()
        for node in current:
            if isinstance(step, InverseStep):
                reached: Iterable[Node] = g.subjects(step.predicate, node)
            else:
                if isinstance(node, Literal):
                    continue
                reached = g.objects(node, step.predicate)
            for n in reached:
                if n not in seen:
                    seen.add(n)
                    following.append(n)
        if not following:
            return []
        current = following
    return current


def first_value(g: Graph, start: Node, steps: Sequence[PathStep]) -> Optional[Node]:
    found = path_query(g, start, steps)
    return found[0] if found else None


# --------------------------------------------------------------------------- #
# Helpers
# --------------------------------------------------------------------------- #


def local_name(node: Node) -> str:
    return str(node).split("#")[-1].split("/")[-1]


def get_type(g: Graph, node: Node) -> Optional[URIRef]:
    """Return the first declared ``rdf:type`` of *node* (or None)."""
    for obj in g.objects(node, RDF_NS.type):
        if isinstance(obj, URIRef):
            return obj
    return None


def has_type(g: Graph, node: Node, cls: URIRef) -> bool:
    return (node, RDF_NS.type, cls) in g


def copy_triples(source: Graph, node: Node, target: Graph, max_depth: int = 3) -> int:
    """Copy the statements about *node* into *target*, verbatim.

    Objects of those statements are followed up to *max_depth* hops so
    nested value wrappers come along; ``rdf:type`` objects are never
    followed. Returns the number of triples added.
    """
    added = 0
    pending: list[tuple[Node, int]] = [(node, 0)]
    visited: set[Node] = set()
    while pending:
        subject, depth = pending.pop()
        if subject in visited:
            continue
        visited.add(subject)
        for p, o in source.predicate_objects(subject):
            target.add((subject, p, o))
            added += 1
            if p != RDF_NS.type and not isinstance(o, Literal) and depth + 1 < max_depth:
                pending.append((o, depth + 1))
    return added
