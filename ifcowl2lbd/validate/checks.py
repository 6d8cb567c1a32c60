"""Structural checks of the generated BOT topology."""

from __future__ import annotations

import networkx as nx
from rdflib import Graph
from rdflib.namespace import RDF

from ifcowl2lbd.lbd.model import Diagnostic, DiagnosticKind
from ifcowl2lbd.rdf import vocabulary as V

# Parent → child relations of the spatial and element hierarchy
CONTAINMENT: tuple = (
    V.BOT.hasBuilding,
    V.BOT.hasStorey,
    V.BOT.hasSpace,
    V.BOT.containsElement,
    V.BOT.adjacentElement,
    V.BOT.hasSubElement,
)

ROOT_CLASSES: tuple = (V.BOT.Site, V.BOT.Building)


def containment_graph(g: Graph) -> nx.DiGraph:
    """Directed graph of every BOT containment edge in *g*."""
    dg = nx.DiGraph()
    for pred in CONTAINMENT:
        for parent, child in g.subject_objects(pred):
            dg.add_edge(str(parent), str(child), relation=str(pred))
    for cls in ROOT_CLASSES:
        for root in g.subjects(RDF.type, cls):
            dg.add_node(str(root), root=True)
    return dg


def validate_topology(g: Graph) -> list[Diagnostic]:
    """Return cycle and reachability problems of the BOT graph *g*."""
    problems: list[Diagnostic] = []
    dg = containment_graph(g)

    for cycle in nx.simple_cycles(dg):
        problems.append(
            Diagnostic(
                kind=DiagnosticKind.CYCLE,
                message="Containment cycle: " + " -> ".join(cycle + cycle[:1]),
                subject=cycle[0],
            )
        )

    reachable: set[str] = set()
    for node, data in dg.nodes(data=True):
        if data.get("root"):
            reachable.add(node)
            reachable.update(nx.descendants(dg, node))

    for element in g.subjects(RDF.type, V.BOT.Element):
        if str(element) not in reachable:
            problems.append(
                Diagnostic(
                    kind=DiagnosticKind.UNREACHABLE_ELEMENT,
                    message=f"Element {element} is not reachable from any site or building",
                    subject=str(element),
                )
            )
    return problems
