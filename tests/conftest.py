"""Shared fixtures: a small programmatic ifcOWL model builder."""

from pathlib import Path

import pytest
from rdflib import Graph, Literal, Namespace
from rdflib.namespace import RDF

from ifcowl2lbd.config import Config, OutputConfig
from ifcowl2lbd.lbd.context import ConversionContext
from ifcowl2lbd.lbd.mapping import TypeMapper
from ifcowl2lbd.rdf import vocabulary as V
from ifcowl2lbd.rdf.guid import IdentifierSource
from ifcowl2lbd.rdf.loader import detect_schema, load_ontologies
from ifcowl2lbd.rdf.path import get_type, local_name

FIXTURES = Path(__file__).parent / "fixtures"

INST = Namespace("http://linkedbuildingdata.net/ifc/resources20200101_000000/")
URI_BASE = "https://example.org/lbd#"


class IfcOWLBuilder:
    """Builds ifcOWL graphs the way IFC-to-RDF exporters lay them out."""

    def __init__(self, edition: str = V.IFC4) -> None:
        self.ifc = V.IfcOWLNamespace(V.CANONICAL_NAMESPACES[edition], edition)
        self.g = Graph()
        self.g.bind("ifc", self.ifc.uri)
        self.g.bind("inst", str(INST))
        self.g.bind("express", str(V.EXPRESS))
        self.g.bind("list", str(V.LIST))
        self._count = 0

    def _new(self, cls: str):
        self._count += 1
        node = INST[f"{cls}_{self._count}"]
        self.g.add((node, RDF.type, self.ifc[cls]))
        return node

    def _wrap(self, cls: str, predicate, value):
        wrapper = self._new(cls)
        self.g.add((wrapper, predicate, Literal(value)))
        return wrapper

    def entity(self, cls: str, guid=None, name=None):
        node = self._new(cls)
        if guid is not None:
            self.g.add((node, self.ifc.global_id, self._wrap("IfcGloballyUniqueId", V.EXPRESS.hasString, guid)))
        if name is not None:
            self.g.add((node, self.ifc.name_root, self._wrap("IfcLabel", V.EXPRESS.hasString, name)))
        return node

    # ---- relationships ------------------------------------------------ #

    def aggregate(self, whole, *parts):
        rel = self._new("IfcRelAggregates")
        self.g.add((rel, self.ifc.relating_object, whole))
        for part in parts:
            self.g.add((rel, self.ifc.related_objects, part))
        return rel

    def contain(self, structure, *elements):
        rel = self._new("IfcRelContainedInSpatialStructure")
        self.g.add((rel, self.ifc.relating_structure, structure))
        for element in elements:
            self.g.add((rel, self.ifc.related_elements, element))
        return rel

    def bound(self, space, element):
        rel = self._new("IfcRelSpaceBoundary")
        self.g.add((rel, self.ifc.relating_space, space))
        self.g.add((rel, self.ifc.related_building_element, element))
        return rel

    def host(self, element, filling):
        opening = self._new("IfcOpeningElement")
        voids = self._new("IfcRelVoidsElement")
        self.g.add((voids, self.ifc.relating_voided_element, element))
        self.g.add((voids, self.ifc.related_opening, opening))
        fills = self._new("IfcRelFillsElement")
        self.g.add((fills, self.ifc.relating_opening, opening))
        self.g.add((fills, self.ifc.related_filling, filling))
        return opening

    def predefined(self, element, value: str):
        cls = local_name(get_type(self.g, element))
        self.g.add((element, self.ifc[f"predefinedType_{cls}"], self.ifc[value]))

    # ---- properties --------------------------------------------------- #

    def property_set(self, name: str, properties: dict, *objects):
        """Add a property set; a None value leaves the property without nominal value."""
        pset = self.entity("IfcPropertySet", name=name)
        for pname, value in properties.items():
            prop = self._new("IfcPropertySingleValue")
            self.g.add((pset, self.ifc.has_properties, prop))
            self.g.add((prop, self.ifc.name_property, self._wrap("IfcIdentifier", V.EXPRESS.hasString, pname)))
            if value is None:
                continue
            if isinstance(value, bool):
                wrapper = self._wrap("IfcBoolean", V.EXPRESS.hasBoolean, value)
            elif isinstance(value, int):
                wrapper = self._wrap("IfcInteger", V.EXPRESS.hasInteger, value)
            elif isinstance(value, float):
                wrapper = self._wrap("IfcReal", V.EXPRESS.hasDouble, value)
            else:
                wrapper = self._wrap("IfcLabel", V.EXPRESS.hasString, value)
            self.g.add((prop, self.ifc.nominal_value, wrapper))
        if objects:
            self.define(pset, *objects)
        return pset

    def define(self, pset, *objects):
        rel = self._new("IfcRelDefinesByProperties")
        for obj in objects:
            self.g.add((rel, self.ifc.related_objects_defines, obj))
        self.g.add((rel, self.ifc.relating_property_definition, pset))
        return rel

    def locate(self, site, latitude: list, longitude: list):
        for predicate, parts in ((self.ifc.ref_latitude, latitude), (self.ifc.ref_longitude, longitude)):
            previous = None
            for part in parts:
                cell = self._new("IfcCompoundPlaneAngleMeasure")
                self.g.add((cell, V.LIST.hasContents, self._wrap("INTEGER", V.EXPRESS.hasInteger, part)))
                if previous is None:
                    self.g.add((site, predicate, cell))
                else:
                    self.g.add((previous, V.LIST.hasNext, cell))
                previous = cell

    # ---- canned model ------------------------------------------------- #

    def house(self):
        """Site / building / storey / space skeleton; returns the four nodes."""
        site = self.entity("IfcSite", guid="0Site00000000000000001", name="Default Site")
        building = self.entity("IfcBuilding", guid="1Bldg00000000000000002", name="House")
        storey = self.entity("IfcBuildingStorey", guid="2Stry00000000000000003", name="Level 1")
        space = self.entity("IfcSpace", guid="3Spce00000000000000004", name="Living")
        self.aggregate(site, building)
        self.aggregate(building, storey)
        self.aggregate(storey, space)
        return site, building, storey, space


def make_context(builder: IfcOWLBuilder, seed: int = 7, **output) -> ConversionContext:
    """Conversion context over *builder*'s graph with the bundled ontologies."""
    schema = detect_schema(builder.g)
    ontology = load_ontologies(Config().ontology, schema.namespace)
    output.setdefault("uri_base", URI_BASE)
    ctx = ConversionContext(
        source=builder.g,
        ontology=ontology,
        ifc=schema.namespace,
        uri_base=output["uri_base"],
        output=OutputConfig(**output),
        identifiers=IdentifierSource(seed),
    )
    ctx.type_mapper = TypeMapper.from_ontology(ontology, schema.namespace)
    return ctx


@pytest.fixture
def builder():
    return IfcOWLBuilder()


@pytest.fixture
def builder_2x3():
    return IfcOWLBuilder(V.IFC2X3)


@pytest.fixture
def context_for():
    return make_context


@pytest.fixture
def small_house_ttl():
    return FIXTURES / "small_house.ttl"
