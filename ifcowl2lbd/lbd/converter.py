"""ifcOWL → LBD conversion pipeline.

Pipeline
--------
1. Parse the source graph                      (rdf.loader)
2. Detect the ifcOWL edition, load ontologies  (rdf.loader)
3. Build the ifcOWL → product type table       (lbd.mapping)
4. Collect property-set content                (lbd.propertysets)
5. Walk site → building → storey → space → element  (lbd.walker)
6. Attach the site geolocation                 (lbd.geolocation)
7. Check the output topology, merge the graphs (validate.checks)
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from rdflib import Graph
from rdflib.namespace import RDF, RDFS, XSD

from ifcowl2lbd.config import DEFAULT_URI_BASE, Config
from ifcowl2lbd.errors import ConversionError, ParseError, UnsupportedSchemaError
from ifcowl2lbd.lbd.context import ConversionContext
from ifcowl2lbd.lbd.geolocation import add_geolocation
from ifcowl2lbd.lbd.mapping import TypeMapper
from ifcowl2lbd.lbd.model import ConversionResult, Diagnostic, DiagnosticKind
from ifcowl2lbd.lbd.propertysets import collect_property_sets
from ifcowl2lbd.lbd.uri import normalize_base
from ifcowl2lbd.lbd.walker import HierarchyWalker
from ifcowl2lbd.rdf import vocabulary as V
from ifcowl2lbd.rdf.guid import IdentifierSource
from ifcowl2lbd.rdf.loader import SourceLoader, detect_schema, load_ontologies
from ifcowl2lbd.status import StatusChannel
from ifcowl2lbd.validate.checks import validate_topology

logger = logging.getLogger(__name__)


class Converter:
    """Convert ifcOWL graphs into Linked Building Data.

    A converter may be reused: every call builds its own
    :class:`ConversionContext`. Neither :meth:`convert` nor
    :meth:`convert_graph` raise for bad input; problems are reported in the
    returned :class:`ConversionResult`.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        status: Optional[StatusChannel] = None,
        identifiers: Optional[IdentifierSource] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.cfg = config or Config()
        self.status = status or StatusChannel()
        self._identifiers = identifiers
        self._clock = clock

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def convert(self, path: str | Path) -> ConversionResult:
        """Read the ifcOWL file at *path* and convert it."""
        start = len(self.status.messages)
        self.status.post("IFCtoLBD conversion")
        try:
            source = SourceLoader(path).load()
        except ParseError as exc:
            return self._failed(DiagnosticKind.PARSE_ERROR, exc, start)
        return self._convert(source, start)

    def convert_graph(self, source: Graph) -> ConversionResult:
        """Convert an already materialised ifcOWL graph."""
        start = len(self.status.messages)
        self.status.post("IFCtoLBD conversion")
        return self._convert(source, start)

    # ------------------------------------------------------------------ #
    # Stages
    # ------------------------------------------------------------------ #

    def _convert(self, source: Graph, start: int) -> ConversionResult:
        out_cfg = self.cfg.output
        self.status.post("Reading in ontologies")
        try:
            schema = detect_schema(source)
            ontology = load_ontologies(self.cfg.ontology, schema.namespace)
        except UnsupportedSchemaError as exc:
            return self._failed(DiagnosticKind.UNSUPPORTED_SCHEMA, exc, start)
        except ConversionError as exc:
            return self._failed(DiagnosticKind.PARSE_ERROR, exc, start)

        uri_base = normalize_base(out_cfg.uri_base or schema.inst_namespace or DEFAULT_URI_BASE)
        ctx = ConversionContext(
            source=source,
            ontology=ontology,
            ifc=schema.namespace,
            uri_base=uri_base,
            output=out_cfg,
            identifiers=self._identifiers or IdentifierSource(self.cfg.seed),
            status=self.status,
        )
        if self._clock is not None:
            ctx.generated_at = self._clock()
        for note in schema.notes:
            ctx.warn(note.kind, note.message)

        self.status.post("Mapping types")
        ctx.type_mapper = TypeMapper.from_ontology(ontology, schema.namespace)
        self._bind_namespaces(ctx)

        if out_cfg.include_properties:
            collect_property_sets(ctx)

        self.status.post("IFC->LBD")
        HierarchyWalker(ctx).walk()

        if out_cfg.include_geolocation:
            add_geolocation(ctx)

        for problem in validate_topology(ctx.topology):
            ctx.warn(problem.kind, problem.message, problem.subject)

        result = ConversionResult(
            graph=self._merge(ctx),
            topology=ctx.topology,
            product=ctx.product,
            properties=ctx.properties,
            warnings=list(ctx.warnings),
            info=list(ctx.info),
        )
        self.status.post(f"Done. Linked Building Data graph holds {len(result.graph)} triples")
        result.messages = self.status.messages[start:]
        return result

    def _failed(self, kind: DiagnosticKind, exc: Exception, start: int) -> ConversionResult:
        logger.error("%s", exc)
        self.status.post(f"Error : {exc}")
        return ConversionResult(
            errors=[Diagnostic(kind=kind, message=str(exc))],
            messages=self.status.messages[start:],
        )

    # ------------------------------------------------------------------ #
    # Namespaces and merging
    # ------------------------------------------------------------------ #

    def _prefixes(self, ctx: ConversionContext) -> dict[str, dict[str, str]]:
        common = {
            "rdf": str(RDF),
            "rdfs": str(RDFS),
            "xsd": str(XSD),
            "inst": ctx.uri_base,
            "geo": str(V.GEO),
        }
        topology = {"bot": str(V.BOT), **common}
        product = {name: str(ns) for name, ns in V.PRODUCT_PREFIXES.items()}
        product.update(common)
        properties = dict(common)

        out_cfg = ctx.output
        if out_cfg.include_properties:
            topology["props"] = str(V.PROPS)
            properties["props"] = str(V.PROPS)
            if out_cfg.props_level != 1:
                properties["prov"] = str(V.PROV)
                properties["schema"] = str(V.SCHEMA)
            if out_cfg.props_level == 3:
                properties["opm"] = str(V.OPM)
        return {"topology": topology, "product": product, "properties": properties}

    def _bind_namespaces(self, ctx: ConversionContext) -> None:
        prefixes = self._prefixes(ctx)
        for graph_name, graph in (
            ("topology", ctx.topology),
            ("product", ctx.product),
            ("properties", ctx.properties),
        ):
            for prefix, uri in prefixes[graph_name].items():
                graph.bind(prefix, uri, override=True, replace=True)

    def _merge(self, ctx: ConversionContext) -> Graph:
        out_cfg = ctx.output
        prefixes = self._prefixes(ctx)
        merged = Graph()
        for prefix, uri in prefixes["topology"].items():
            merged.bind(prefix, uri, override=True, replace=True)
        merged += ctx.topology

        if out_cfg.include_elements:
            logger.info("Building elements")
            for prefix, uri in prefixes["product"].items():
                merged.bind(prefix, uri, override=True, replace=True)
            merged += ctx.product

        if out_cfg.include_properties:
            logger.info("Building properties")
            for prefix, uri in prefixes["properties"].items():
                merged.bind(prefix, uri, override=True, replace=True)
            merged += ctx.properties
        return merged
