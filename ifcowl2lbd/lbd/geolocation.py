"""Site geolocation as a GeoSPARQL point.

``IfcSite.RefLatitude`` / ``RefLongitude`` are compound plane angles, stored
in ifcOWL as lists of integers: degrees, minutes, seconds and (optionally)
millionths of a second.
"""

from __future__ import annotations

import logging

from rdflib import Graph, Literal, URIRef
from rdflib.namespace import RDF
from rdflib.term import Node
from shapely.geometry import Point

from ifcowl2lbd.errors import GeolocationError
from ifcowl2lbd.lbd.context import ConversionContext
from ifcowl2lbd.lbd.model import DiagnosticKind
from ifcowl2lbd.lbd.uri import format_uri
from ifcowl2lbd.rdf import vocabulary as V
from ifcowl2lbd.rdf.path import Step, first_value

logger = logging.getLogger(__name__)


def compound_angle(g: Graph, node: Node) -> float:
    """Decimal degrees of an ifcOWL ``IfcCompoundPlaneAngleMeasure`` list."""
    parts: list[int] = []
    current = node
    seen: set[Node] = set()
    while current is not None and current not in seen:
        seen.add(current)
        value = first_value(g, current, [Step(V.LIST.hasContents), Step(V.EXPRESS.hasInteger)])
        if value is None:
            break
        try:
            parts.append(int(str(value)))
        except ValueError as exc:
            raise GeolocationError(f"Not an integer angle component: {value!r}") from exc
        current = first_value(g, current, [Step(V.LIST.hasNext)])

    if len(parts) < 3:
        raise GeolocationError(f"Compound angle {node} has {len(parts)} components, expected 3 or 4")
    degrees, minutes, seconds = parts[:3]
    millionths = parts[3] if len(parts) > 3 else 0
    return degrees + minutes / 60.0 + seconds / 3600.0 + millionths / 3.6e9


def wkt_point(ctx: ConversionContext) -> str:
    """WKT point of the first site that declares both reference angles."""
    g = ctx.source
    for site in g.subjects(RDF.type, ctx.ifc.IfcSite):
        lat = first_value(g, site, [Step(ctx.ifc.ref_latitude)])
        lon = first_value(g, site, [Step(ctx.ifc.ref_longitude)])
        if lat is None or lon is None:
            continue
        return Point(compound_angle(g, lon), compound_angle(g, lat)).wkt
    raise GeolocationError("No site with RefLatitude and RefLongitude")


def add_geolocation(ctx: ConversionContext) -> bool:
    """Attach the site point to every BOT site.

    Runs as one unit: on any failure nothing is written and False is
    returned.
    """
    geometry = Graph()
    try:
        wkt = wkt_point(ctx)
        for site in ctx.source.subjects(RDF.type, ctx.ifc.IfcSite):
            guid = ctx.guid(site)
            if guid is None:
                raise GeolocationError(f"Site {site} has no GUID")
            site_uri = format_uri(ctx, site, "Site")
            point = URIRef(V.GEOMETRY_POINT_PREFIX + guid)
            geometry.add((site_uri, RDF.type, V.GEO.Feature))
            geometry.add((site_uri, V.GEO.hasGeometry, point))
            geometry.add((point, V.GEO.asWKT, Literal(wkt, datatype=V.GEO.wktLiteral)))
    except (GeolocationError, ValueError) as exc:
        ctx.note(DiagnosticKind.NO_GEOLOCATION, str(exc))
        ctx.status.post("Info : No geolocation")
        return False

    ctx.topology += geometry
    ctx.status.post("LBD geometry read")
    return True
