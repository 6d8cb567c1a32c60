"""Source-graph and auxiliary-ontology loading.

Reads an ifcOWL file (Turtle, N-Triples, RDF/XML, JSON-LD ...) with rdflib,
works out which ifcOWL schema edition it uses and assembles the ontology
graph the type mapping is computed from.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from rdflib import Graph, URIRef

from ifcowl2lbd.config import OntologyConfig
from ifcowl2lbd.errors import ParseError, UnsupportedSchemaError
from ifcowl2lbd.lbd.model import Diagnostic, DiagnosticKind
from ifcowl2lbd.rdf import vocabulary as V

logger = logging.getLogger(__name__)


@dataclass
class SchemaInfo:
    """Result of inspecting the namespaces declared by a source graph."""

    namespace: V.IfcOWLNamespace
    inst_namespace: Optional[str] = None
    notes: list[Diagnostic] = field(default_factory=list)


# --------------------------------------------------------------------------- #
# Source graph
# --------------------------------------------------------------------------- #


class SourceLoader:
    """Load an ifcOWL file into an rdflib Graph."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._graph: Optional[Graph] = None

    def load(self) -> Graph:
        """Parse the file and return the raw rdflib Graph."""
        if not self.path.is_file():
            raise ParseError(f"Input file not found: {self.path}")
        g = Graph()
        fmt = detect_format(self.path)
        try:
            g.parse(str(self.path), format=fmt)
        except Exception as exc:
            raise ParseError(f"Could not parse {self.path} as {fmt}: {exc}") from exc
        logger.debug("Loaded %d triples from %s", len(g), self.path)
        self._graph = g
        return g


def detect_schema(g: Graph) -> SchemaInfo:
    """Identify the ifcOWL edition from the prefixes declared in *g*.

    An explicit ``ifcowl`` prefix wins; otherwise every declared namespace is
    inspected. Raises :class:`UnsupportedSchemaError` when nothing matches.
    """
    prefixes = {prefix: str(uri) for prefix, uri in g.namespaces()}
    notes: list[Diagnostic] = []

    inst_ns = prefixes.get("inst")
    if inst_ns is None:
        notes.append(Diagnostic(DiagnosticKind.MISSING_NAMESPACE, 'No "inst" name space.'))
    if "bot" in prefixes:
        notes.append(Diagnostic(DiagnosticKind.BOT_INPUT, "BOT files are not converted into BOT."))

    candidates = [prefixes["ifcowl"]] if "ifcowl" in prefixes else list(prefixes.values())

    found: Optional[V.IfcOWLNamespace] = None
    for ns in candidates:
        lowered = ns.lower()
        if "ifc2x3" in lowered:
            edition = V.IFC2X3
        elif "ifc4" in lowered:
            edition = V.IFC4
        else:
            continue
        if found is None:
            found = V.IfcOWLNamespace(ns, edition)

    if found is None:
        raise UnsupportedSchemaError("Not an ifcOWL file: no IFC2X3 or IFC4 namespace declared")

    logger.debug("Detected %r", found)
    return SchemaInfo(namespace=found, inst_namespace=inst_ns, notes=notes)


# --------------------------------------------------------------------------- #
# Ontology graph
# --------------------------------------------------------------------------- #


def load_ontologies(cfg: OntologyConfig, ifcowl: V.IfcOWLNamespace) -> Graph:
    """Build the ontology graph: edition class hierarchy plus vocabularies."""
    ontology = Graph()

    ifcowl_dir = cfg.ifcowl_path
    if ifcowl_dir is not None:
        hierarchy = ifcowl_dir / f"{ifcowl.edition}.ttl"
        if hierarchy.is_file():
            _read_rebased(ontology, hierarchy, V.CANONICAL_NAMESPACES[ifcowl.edition], ifcowl.uri)
        else:
            logger.warning("No class hierarchy file for %s in %s", ifcowl.edition, ifcowl_dir)

    for path in cfg.file_paths:
        _read_ontology(ontology, path)

    pset_dir = cfg.pset_path
    if pset_dir is not None and pset_dir.is_dir():
        for path in sorted(pset_dir.glob("*.ttl")):
            _read_ontology(ontology, path)
            logger.debug("read ontology file : %s", path.name)

    logger.debug("Ontology graph holds %d triples", len(ontology))
    return ontology


def _read_ontology(ontology: Graph, path: Path) -> None:
    if not path.is_file():
        logger.warning("Ontology file not found: %s", path)
        return
    try:
        ontology.parse(str(path), format=detect_format(path))
    except Exception as exc:
        raise ParseError(f"Could not parse ontology file {path}: {exc}") from exc


def _read_rebased(ontology: Graph, path: Path, canonical: str, actual: str) -> None:
    """Read *path*, moving terms from the *canonical* namespace to *actual*."""
    g = Graph()
    try:
        g.parse(str(path), format=detect_format(path))
    except Exception as exc:
        raise ParseError(f"Could not parse class hierarchy {path}: {exc}") from exc
    if canonical == actual:
        ontology += g
        return

    def rebase(term):
        if isinstance(term, URIRef) and str(term).startswith(canonical):
            return URIRef(actual + str(term)[len(canonical):])
        return term

    for s, p, o in g:
        ontology.add((rebase(s), rebase(p), rebase(o)))


# --------------------------------------------------------------------------- #
# Format detection
# --------------------------------------------------------------------------- #


def detect_format(path: Path) -> str:
    suffix = path.suffix.lower()
    mapping = {
        ".ttl": "turtle",
        ".turtle": "turtle",
        ".jsonld": "json-ld",
        ".json": "json-ld",
        ".n3": "n3",
        ".nt": "nt",
        ".xml": "xml",
        ".rdf": "xml",
        ".owl": "xml",
    }
    return mapping.get(suffix, "turtle")
