"""End-to-end conversion tests: ifcOWL file → LBD graphs."""

from datetime import datetime, timezone
from pathlib import Path

import pytest
from rdflib import Graph, Literal, URIRef
from rdflib.namespace import RDF

from ifcowl2lbd.config import DEFAULT_URI_BASE, Config, OntologyConfig, OutputConfig
from ifcowl2lbd.lbd.converter import Converter
from ifcowl2lbd.lbd.model import ConversionStatus, DiagnosticKind
from ifcowl2lbd.rdf import vocabulary as V
from ifcowl2lbd.rdf.guid import expand_guid
from ifcowl2lbd.status import StatusChannel

FIXTURES = Path(__file__).parent / "fixtures"
URI_BASE = "https://example.org/lbd#"
INST_BASE = "http://linkedbuildingdata.net/ifc/resources20200101_000000/"


def _uri(type_name: str, compressed: str, base: str = URI_BASE) -> URIRef:
    return URIRef(f"{base}{type_name}_{expand_guid(compressed)}")


SITE = _uri("site", "0Site00000000000000001")
STOREY = _uri("storey", "2Stry00000000000000003")
SPACE = _uri("space", "3Spce00000000000000004")
WALL = _uri("wall", "1Wall00000000000000005")
DOOR = _uri("door", "1Door00000000000000006")
FURNITURE = _uri("furniture", "0Furn00000000000000007")
SLAB = URIRef(f"{URI_BASE}slab_Slab_10")


def _convert(small_house_ttl, **output):
    output.setdefault("uri_base", URI_BASE)
    return Converter(Config(output=OutputConfig(**output), seed=5)).convert(small_house_ttl)


class TestSmallHouse:
    def test_partial_with_unmappable_elements(self, small_house_ttl):
        result = _convert(small_house_ttl)
        assert result.status == ConversionStatus.PARTIAL
        assert result.ok
        assert result.errors == []
        assert sorted(w.kind.value for w in result.warnings) == [
            "ambiguous_mapping",
            "missing_identifier",
            "unmapped_type",
        ]

    def test_topology(self, small_house_ttl):
        g = _convert(small_house_ttl).graph
        assert (STOREY, V.BOT.containsElement, WALL) in g
        assert (STOREY, V.BOT.containsElement, SLAB) in g
        assert (SPACE, V.BOT.containsElement, FURNITURE) in g
        assert (SPACE, V.BOT.adjacentElement, WALL) in g
        assert (WALL, V.BOT.hasSubElement, DOOR) in g

    def test_products(self, small_house_ttl):
        g = _convert(small_house_ttl).graph
        assert (WALL, RDF.type, V.BEO.Wall) in g
        assert (WALL, RDF.type, V.BEO["Wall-SOLIDWALL"]) in g
        assert (DOOR, RDF.type, V.BEO.Door) in g
        assert (FURNITURE, RDF.type, V.FURN.Furniture) in g
        assert set(g.objects(SLAB, RDF.type)) == {V.BEO.Slab, V.BOT.Element}

    def test_unmappable_elements_absent(self, small_house_ttl):
        g = _convert(small_house_ttl).graph
        proxy = _uri("buildingelementproxy", "2Prxy00000000000000008")
        assert (None, None, proxy) not in g
        assert (proxy, None, None) not in g
        assert len(set(g.subjects(RDF.type, V.BOT.Element))) == 4

    def test_shared_property_set(self, small_house_ttl):
        g = _convert(small_house_ttl).graph
        for element in (WALL, SLAB):
            assert (element, V.PROPS.fireRating_property_simple, Literal("A1")) in g
            assert (element, V.PROPS.isExternal_property_simple, Literal(True)) in g

    def test_attributes(self, small_house_ttl):
        g = _convert(small_house_ttl).graph
        assert (WALL, V.PROPS.nameIfcRoot_attribute_simple, Literal("Wall-001")) in g
        assert (WALL, V.PROPS.batid_attribute_simple, Literal("W1")) in g

    def test_geolocation(self, small_house_ttl):
        g = _convert(small_house_ttl).graph
        point = URIRef(V.GEOMETRY_POINT_PREFIX + expand_guid("0Site00000000000000001"))
        assert (SITE, V.GEO.hasGeometry, point) in g
        assert str(g.value(point, V.GEO.asWKT)).startswith("POINT (3.71")

    def test_status_messages_in_order(self, small_house_ttl):
        messages = _convert(small_house_ttl).messages
        milestones = [
            "IFCtoLBD conversion",
            "Reading in ontologies",
            "Mapping types",
            "LBD properties read",
            "IFC->LBD",
            "Storey: IfcBuildingStorey_3",
            "LBD geometry read",
        ]
        positions = [messages.index(m) for m in milestones]
        assert positions == sorted(positions)
        assert messages[-1].startswith("Done.")

    def test_separate_graphs(self, small_house_ttl):
        result = _convert(small_house_ttl)
        assert (WALL, RDF.type, V.BEO.Wall) in result.product
        assert (WALL, RDF.type, V.BEO.Wall) not in result.topology
        assert (WALL, V.PROPS.fireRating_property_simple, Literal("A1")) in result.properties
        assert len(result.graph) == len(result.topology | result.product | result.properties)

    def test_output_prefixes(self, small_house_ttl):
        g = _convert(small_house_ttl, props_level=3).graph
        prefixes = {p: str(ns) for p, ns in g.namespaces()}
        assert prefixes["bot"] == str(V.BOT)
        assert prefixes["beo"] == str(V.BEO)
        assert prefixes["props"] == str(V.PROPS)
        assert prefixes["opm"] == str(V.OPM)
        assert prefixes["inst"] == URI_BASE


class TestOutputFlags:
    def test_without_elements(self, small_house_ttl):
        result = _convert(small_house_ttl, include_elements=False)
        assert (WALL, RDF.type, V.BEO.Wall) not in result.graph
        assert (WALL, RDF.type, V.BOT.Element) in result.graph
        assert (WALL, RDF.type, V.BEO.Wall) in result.product

    def test_without_properties(self, small_house_ttl):
        result = _convert(small_house_ttl, include_properties=False)
        assert (WALL, V.PROPS.fireRating_property_simple, None) not in result.graph
        assert (WALL, V.PROPS.nameIfcRoot_attribute_simple, None) not in result.graph
        assert "LBD properties read" not in result.messages

    def test_without_geolocation(self, small_house_ttl):
        result = _convert(small_house_ttl, include_geolocation=False)
        assert (None, V.GEO.asWKT, None) not in result.graph
        assert result.info == []

    def test_uri_base_from_inst_prefix(self, small_house_ttl):
        result = Converter().convert(small_house_ttl)
        wall = _uri("wall", "1Wall00000000000000005", INST_BASE)
        assert (wall, RDF.type, V.BOT.Element) in result.graph

    def test_uri_base_normalised(self, small_house_ttl):
        result = _convert(small_house_ttl, uri_base="https://example.org/lbd")
        assert (WALL, RDF.type, V.BOT.Element) in result.graph

    def test_level_3_reproducible_with_seed_and_clock(self, small_house_ttl):
        clock = lambda: datetime(2024, 1, 1, tzinfo=timezone.utc)  # noqa: E731
        cfg = Config(output=OutputConfig(uri_base=URI_BASE, props_level=3), seed=9)
        first = Converter(cfg, clock=clock).convert(small_house_ttl)
        second = Converter(cfg, clock=clock).convert(small_house_ttl)
        assert set(first.graph) == set(second.graph)
        state = URIRef(f"{URI_BASE}fireRating_{expand_guid('1Wall00000000000000005')}_state")
        assert (state, V.PROV.generatedAtTime, None) in first.graph


class TestFailures:
    def test_parse_error(self):
        result = Converter().convert(FIXTURES / "broken.ttl")
        assert result.status == ConversionStatus.FAILED
        assert not result.ok
        assert [e.kind for e in result.errors] == [DiagnosticKind.PARSE_ERROR]
        assert len(result.graph) == 0

    def test_missing_file(self, tmp_path):
        result = Converter().convert(tmp_path / "absent.ttl")
        assert [e.kind for e in result.errors] == [DiagnosticKind.PARSE_ERROR]

    def test_unsupported_schema(self):
        result = Converter().convert(FIXTURES / "not_ifcowl.ttl")
        assert result.status == ConversionStatus.FAILED
        assert [e.kind for e in result.errors] == [DiagnosticKind.UNSUPPORTED_SCHEMA]
        assert result.messages[-1].startswith("Error : ")

    def test_broken_class_hierarchy(self, tmp_path, small_house_ttl):
        (tmp_path / "IFC4_ADD1.ttl").write_text((FIXTURES / "broken.ttl").read_text())
        cfg = Config(ontology=OntologyConfig(ifcowl_dir=str(tmp_path)))
        result = Converter(cfg).convert(small_house_ttl)
        assert result.status == ConversionStatus.FAILED
        assert [e.kind for e in result.errors] == [DiagnosticKind.PARSE_ERROR]
        assert len(result.graph) == 0


class TestConvertGraph:
    def test_success_without_warnings(self, builder):
        _, _, storey, _ = builder.house()
        wall = builder.entity("IfcWall", guid="1Wall00000000000000005")
        builder.contain(storey, wall)
        result = Converter(Config(output=OutputConfig(uri_base=URI_BASE))).convert_graph(builder.g)
        assert result.status == ConversionStatus.SUCCESS
        assert [d.kind for d in result.info] == [DiagnosticKind.NO_GEOLOCATION]
        assert (STOREY, V.BOT.containsElement, WALL) in result.graph

    def test_missing_inst_prefix(self):
        g = Graph()
        g.bind("ifc", V.CANONICAL_NAMESPACES[V.IFC4])
        site = URIRef("http://example.org/model/site")
        g.add((site, RDF.type, URIRef(V.CANONICAL_NAMESPACES[V.IFC4] + "IfcSite")))
        result = Converter().convert_graph(g)
        assert result.warnings_of(DiagnosticKind.MISSING_NAMESPACE)
        subjects = set(result.graph.subjects(RDF.type, V.BOT.Site))
        assert all(str(s).startswith(DEFAULT_URI_BASE) for s in subjects)
        assert len(subjects) == 1

    def test_converter_is_reusable(self, small_house_ttl):
        converter = Converter(Config(output=OutputConfig(uri_base=URI_BASE), seed=1))
        first = converter.convert(small_house_ttl)
        second = converter.convert(small_house_ttl)
        assert set(first.graph) == set(second.graph)
        assert len(first.warnings) == len(second.warnings)
        assert second.messages[0] == "IFCtoLBD conversion"

    def test_status_subscriber(self, small_house_ttl):
        status = StatusChannel()
        seen = []
        status.subscribe(seen.append)
        result = Converter(Config(output=OutputConfig(uri_base=URI_BASE)), status=status).convert(small_house_ttl)
        assert seen == result.messages

    @pytest.mark.parametrize("level", [1, 2, 3])
    def test_every_level_converts(self, small_house_ttl, level):
        result = _convert(small_house_ttl, props_level=level)
        assert result.ok
        assert (WALL, RDF.type, V.BOT.Element) in result.graph
