"""Spatial hierarchy traversal.

Walks site → building → storey → space → element → sub-element in the
ifcOWL graph and re-emits the structure with BOT terms:

- ``bot:hasBuilding`` / ``bot:hasStorey`` / ``bot:hasSpace`` for the
  spatial decomposition,
- ``bot:containsElement`` for elements contained in a storey or space,
- ``bot:adjacentElement`` for elements bounding a space,
- ``bot:hasSubElement`` for hosted (opening fillings) and aggregated parts.

Element classes come from the :class:`~ifcowl2lbd.lbd.mapping.TypeMapper`;
elements it cannot map are skipped together with everything below them.
"""

from __future__ import annotations

import logging
from typing import Optional

from rdflib import URIRef
from rdflib.namespace import RDF
from rdflib.term import Node

from ifcowl2lbd.lbd.attributes import copy_attributes
from ifcowl2lbd.lbd.context import ConversionContext
from ifcowl2lbd.lbd.mapping import TypeMapper
from ifcowl2lbd.lbd.model import DiagnosticKind
from ifcowl2lbd.lbd.propertysets import connect_property_sets
from ifcowl2lbd.lbd.uri import format_uri
from ifcowl2lbd.rdf import vocabulary as V
from ifcowl2lbd.rdf.path import InverseStep, Step, get_type, has_type, local_name, path_query

logger = logging.getLogger(__name__)


class HierarchyWalker:
    """Depth-first conversion of the spatial containment tree."""

    def __init__(self, ctx: ConversionContext) -> None:
        if ctx.type_mapper is None:
            raise ValueError("ConversionContext.type_mapper must be built before walking")
        self.ctx = ctx
        self.g = ctx.source
        self.ifc = ctx.ifc
        self.mapper: TypeMapper = ctx.type_mapper

    # ------------------------------------------------------------------ #
    # Traversal
    # ------------------------------------------------------------------ #

    def walk(self) -> None:
        sites = list(self.g.subjects(RDF.type, self.ifc.IfcSite))
        if sites:
            for site in sites:
                self.handle_site(site)
        else:
            for building in list(self.g.subjects(RDF.type, self.ifc.IfcBuilding)):
                self.handle_building(None, building)

    def handle_site(self, site: Node) -> URIRef:
        site_uri = self._spatial(site, "Site", V.BOT.Site)
        for building in self.decomposed(site):
            self.handle_building(site_uri, building)
        return site_uri

    def handle_building(self, site_uri: Optional[URIRef], building: Node) -> Optional[URIRef]:
        if not self._expect(building, self.ifc.IfcBuilding):
            return None
        building_uri = self._spatial(building, "Building", V.BOT.Building)
        if site_uri is not None:
            self.ctx.topology.add((site_uri, V.BOT.hasBuilding, building_uri))
        for storey in self.decomposed(building):
            self.handle_storey(building_uri, storey)
        return building_uri

    def handle_storey(self, building_uri: URIRef, storey: Node) -> Optional[URIRef]:
        self.ctx.status.post(f"Storey: {local_name(storey)}")
        if not self._expect(storey, self.ifc.IfcBuildingStorey):
            return None
        storey_uri = self._spatial(storey, "Storey", V.BOT.Storey)
        self.ctx.topology.add((building_uri, V.BOT.hasStorey, storey_uri))

        for element in self.contained(storey):
            if has_type(self.g, element, self.ifc.IfcSpace):
                continue
            self.connect_element(storey_uri, V.BOT.containsElement, element)

        for space in self.decomposed(storey):
            self.handle_space(storey_uri, space)
        return storey_uri

    def handle_space(self, storey_uri: URIRef, space: Node) -> Optional[URIRef]:
        if not self._expect(space, self.ifc.IfcSpace):
            return None
        space_uri = self._spatial(space, "Space", V.BOT.Space)
        self.ctx.topology.add((storey_uri, V.BOT.hasSpace, space_uri))

        for element in self.contained(space):
            self.connect_element(space_uri, V.BOT.containsElement, element)
        for element in self.adjacent(space):
            self.connect_element(space_uri, V.BOT.adjacentElement, element)
        return space_uri

    def connect_element(
        self,
        parent: URIRef,
        relation: URIRef,
        element: Node,
        ancestors: frozenset[Node] = frozenset(),
    ) -> Optional[URIRef]:
        """Emit *element* under *parent* and recurse into its sub-elements.

        *ancestors* holds the source elements on the current recursion path;
        meeting one of them again means the input is cyclic.
        """
        if element in ancestors:
            self.ctx.warn(DiagnosticKind.CYCLE, f"Element {element} hosts or aggregates itself", element)
            return None

        ifc_type = get_type(self.g, element)
        class_name = local_name(ifc_type) if ifc_type is not None else ""
        product_type = self.mapper.resolve(class_name) if class_name else None
        if product_type is None:
            if class_name and self.mapper.is_ambiguous(class_name):
                candidates = ", ".join(str(c) for c in self.mapper.candidates(class_name))
                self.ctx.warn(
                    DiagnosticKind.AMBIGUOUS_MAPPING,
                    f"{class_name} maps to several classes ({candidates}); skipped",
                    element,
                )
            else:
                self.ctx.warn(DiagnosticKind.UNMAPPED_TYPE, f"No type: {class_name or 'untyped'}", element)
            return None

        logger.debug("Connect element: %s", element)
        element_uri = format_uri(self.ctx, element, local_name(product_type))
        predefined = self.predefined_type(element)
        if predefined is not None:
            self.ctx.product.add((element_uri, RDF.type, URIRef(f"{product_type}-{predefined}")))
        self.ctx.product.add((element_uri, RDF.type, product_type))
        self.ctx.topology.add((element_uri, RDF.type, V.BOT.Element))
        self.ctx.topology.add((parent, relation, element_uri))

        connect_property_sets(self.ctx, element, element_uri, self.ctx.identifier(element))
        copy_attributes(self.ctx, element, element_uri)

        below = ancestors | {element}
        for hosted in self.hosted(element):
            self.connect_element(element_uri, V.BOT.hasSubElement, hosted, below)
        for part in self.decomposed(element):
            self.connect_element(element_uri, V.BOT.hasSubElement, part, below)
        return element_uri

    # ------------------------------------------------------------------ #
    # Source graph queries
    # ------------------------------------------------------------------ #

    def decomposed(self, node: Node) -> list[Node]:
        """Parts aggregated into *node* (buildings, storeys, spaces, parts)."""
        return path_query(
            self.g, node, [InverseStep(self.ifc.relating_object), Step(self.ifc.related_objects)]
        )

    def contained(self, node: Node) -> list[Node]:
        return path_query(
            self.g, node, [InverseStep(self.ifc.relating_structure), Step(self.ifc.related_elements)]
        )

    def adjacent(self, space: Node) -> list[Node]:
        return path_query(
            self.g, space, [InverseStep(self.ifc.relating_space), Step(self.ifc.related_building_element)]
        )

    def hosted(self, element: Node) -> list[Node]:
        """Elements filling openings that void *element* (doors in a wall)."""
        return path_query(
            self.g,
            element,
            [
                InverseStep(self.ifc.relating_voided_element),
                Step(self.ifc.related_opening),
                InverseStep(self.ifc.relating_opening),
                Step(self.ifc.related_filling),
            ],
        )

    def predefined_type(self, element: Node) -> Optional[str]:
        for predicate, obj in self.g.predicate_objects(element):
            if local_name(predicate).startswith(V.PREDEFINED_TYPE_MARKER):
                value = local_name(obj)
                if value in V.UNSET_PREDEFINED_TYPES or not value:
                    return None
                return value
        return None

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _expect(self, node: Node, cls: URIRef) -> bool:
        if has_type(self.g, node, cls):
            return True
        actual = get_type(self.g, node)
        self.ctx.warn(
            DiagnosticKind.MALFORMED_HIERARCHY,
            f"Not an {local_name(cls)}: {node} is {local_name(actual) if actual is not None else 'untyped'}",
            node,
        )
        return False

    def _spatial(self, node: Node, type_name: str, bot_class: URIRef) -> URIRef:
        uri = format_uri(self.ctx, node, type_name)
        identifier = self.ctx.identifier(node)
        copy_attributes(self.ctx, node, uri)
        self.ctx.topology.add((uri, RDF.type, bot_class))
        connect_property_sets(self.ctx, node, uri, identifier)
        return uri
