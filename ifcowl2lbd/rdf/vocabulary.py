"""RDF namespace and term vocabulary for ifcowl2lbd.

Source side: ifcOWL (IFC2X3_TC1 and IFC4 editions) together with the EXPRESS
and LIST helper vocabularies every ifcOWL file uses.

Target side: BOT (Building Topology Ontology) for the spatial structure,
the building-element / furnishing / distribution-element product
vocabularies, PROPS for properties and OPM / PROV / schema.org for the
level 2 and 3 property scaffolding.
"""

from __future__ import annotations

from rdflib import Namespace, URIRef

# --------------------------------------------------------------------------- #
# Namespaces
# --------------------------------------------------------------------------- #

BOT = Namespace("https://w3id.org/bot#")
PROPS = Namespace("https://w3id.org/props#")
OPM = Namespace("https://w3id.org/opm#")
PROV = Namespace("http://www.w3.org/ns/prov#")
SCHEMA = Namespace("http://schema.org/")
GEO = Namespace("http://www.opengis.net/ont/geosparql#")
PSD = Namespace("https://w3id.org/psd#")

BEO = Namespace("https://pi.pauwel.be/voc/buildingelement#")
FURN = Namespace("http://pi.pauwel.be/voc/furniture#")
MEP = Namespace("https://pi.pauwel.be/voc/distributionelement#")
PRODUCT = Namespace("https://w3id.org/product#")

EXPRESS = Namespace("https://w3id.org/express#")
LIST = Namespace("https://w3id.org/list#")

RDF = Namespace("http://www.w3.org/1999/02/22-rdf-syntax-ns#")
RDFS = Namespace("http://www.w3.org/2000/01/rdf-schema#")
XSD = Namespace("http://www.w3.org/2001/XMLSchema#")

# Prefixes bound on the product graph
PRODUCT_PREFIXES: dict[str, Namespace] = {
    "beo": BEO,
    "furn": FURN,
    "mep": MEP,
    "product": PRODUCT,
}

# --------------------------------------------------------------------------- #
# Source schema editions
# --------------------------------------------------------------------------- #

IFC2X3 = "IFC2X3_TC1"
IFC4 = "IFC4_ADD1"

# Canonical namespaces the bundled class-hierarchy files are written in
CANONICAL_NAMESPACES: dict[str, str] = {
    IFC2X3: "http://ifcowl.openbimstandards.org/IFC2X3_TC1#",
    IFC4: "http://ifcowl.openbimstandards.org/IFC4_ADD1#",
}

# Geometry node identifiers for site geolocation
GEOMETRY_POINT_PREFIX = "urn:bot:geom:pt:"

# Local-name markers
PROPERTY_SINGLE_VALUE_MARKER = "IfcPropertySingleValue"
PREDEFINED_TYPE_MARKER = "predefinedType_"
TAG_MARKER = "tag_"
TAG_ATTRIBUTE = "batid"
UNSET_PREDEFINED_TYPES = frozenset({"NOTDEFINED", "USERDEFINED"})
NAN_TOKEN = "-1.#IND"


class IfcOWLNamespace:
    """ifcOWL terms for one schema edition rooted at *uri*.

    Only the handful of predicate names that differ between IFC2X3 and IFC4
    are edition specific; everything else is shared.
    """

    def __init__(self, uri: str, edition: str) -> None:
        if not uri.endswith("#"):
            uri = uri + "#"
        self.uri = uri
        self.edition = edition
        self.ns = Namespace(uri)

    def __getitem__(self, local_name: str) -> URIRef:
        return self.ns[local_name]

    def __repr__(self) -> str:
        return f"IfcOWLNamespace({self.uri!r}, {self.edition!r})"

    # ------------------------------------------------------------------ #
    # Classes
    # ------------------------------------------------------------------ #

    @property
    def IfcSite(self) -> URIRef:
        return self.ns.IfcSite

    @property
    def IfcBuilding(self) -> URIRef:
        return self.ns.IfcBuilding

    @property
    def IfcBuildingStorey(self) -> URIRef:
        return self.ns.IfcBuildingStorey

    @property
    def IfcSpace(self) -> URIRef:
        return self.ns.IfcSpace

    @property
    def IfcPropertySet(self) -> URIRef:
        return self.ns.IfcPropertySet

    # ------------------------------------------------------------------ #
    # Edition-specific relationships
    # ------------------------------------------------------------------ #

    @property
    def relating_object(self) -> URIRef:
        if self.edition == IFC2X3:
            return self.ns.relatingObject_IfcRelDecomposes
        return self.ns.relatingObject_IfcRelAggregates

    @property
    def related_objects(self) -> URIRef:
        if self.edition == IFC2X3:
            return self.ns.relatedObjects_IfcRelDecomposes
        return self.ns.relatedObjects_IfcRelAggregates

    @property
    def related_objects_defines(self) -> URIRef:
        if self.edition == IFC2X3:
            return self.ns.relatedObjects_IfcRelDefines
        return self.ns.relatedObjects_IfcRelDefinesByProperties

    # ------------------------------------------------------------------ #
    # Shared relationships and attributes
    # ------------------------------------------------------------------ #

    @property
    def relating_property_definition(self) -> URIRef:
        return self.ns.relatingPropertyDefinition_IfcRelDefinesByProperties

    @property
    def relating_structure(self) -> URIRef:
        return self.ns.relatingStructure_IfcRelContainedInSpatialStructure

    @property
    def related_elements(self) -> URIRef:
        return self.ns.relatedElements_IfcRelContainedInSpatialStructure

    @property
    def relating_space(self) -> URIRef:
        return self.ns.relatingSpace_IfcRelSpaceBoundary

    @property
    def related_building_element(self) -> URIRef:
        return self.ns.relatedBuildingElement_IfcRelSpaceBoundary

    @property
    def relating_voided_element(self) -> URIRef:
        return self.ns.relatingBuildingElement_IfcRelVoidsElement

    @property
    def related_opening(self) -> URIRef:
        return self.ns.relatedOpeningElement_IfcRelVoidsElement

    @property
    def relating_opening(self) -> URIRef:
        return self.ns.relatingOpeningElement_IfcRelFillsElement

    @property
    def related_filling(self) -> URIRef:
        return self.ns.relatedBuildingElement_IfcRelFillsElement

    @property
    def has_properties(self) -> URIRef:
        return self.ns.hasProperties_IfcPropertySet

    @property
    def name_root(self) -> URIRef:
        return self.ns.name_IfcRoot

    @property
    def name_property(self) -> URIRef:
        return self.ns.name_IfcProperty

    @property
    def nominal_value(self) -> URIRef:
        return self.ns.nominalValue_IfcPropertySingleValue

    @property
    def global_id(self) -> URIRef:
        return self.ns.globalId_IfcRoot

    @property
    def ref_latitude(self) -> URIRef:
        return self.ns.refLatitude_IfcSite

    @property
    def ref_longitude(self) -> URIRef:
        return self.ns.refLongitude_IfcSite
