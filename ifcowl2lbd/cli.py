"""Command-line interface for ifcowl2lbd.

Usage
-----
    ifcowl2lbd --input model.ttl --output lbd.ttl
    ifcowl2lbd --input model.ttl --output lbd.ttl --props-level 3 --blank-nodes
    ifcowl2lbd --input model.ttl --output lbd.ttl --separate --report report.json
"""

from __future__ import annotations

from dataclasses import replace
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rdflib import Graph

from ifcowl2lbd.config import Config
from ifcowl2lbd.lbd.converter import Converter
from ifcowl2lbd.rdf.loader import detect_format
from ifcowl2lbd.validate.reports import build_conversion_report, count_by_kind, save_conversion_report

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s %(name)s: %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger("ifcowl2lbd.cli")


def _write(graph: Graph, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    graph.serialize(destination=str(path), format=detect_format(path))
    logger.info("Wrote %d triples to %s", len(graph), path)


@click.command()
@click.option("--input", "-i", "input_path", required=True, help="Input ifcOWL file (Turtle/RDF-XML/JSON-LD)")
@click.option("--output", "-o", "output_path", default="out.ttl", show_default=True, help="Output LBD file path")
@click.option("--config", "-c", "config_path", default=None, help="YAML configuration file")
@click.option("--uri-base", default=None, help="Base URI of generated resources")
@click.option("--props-level", type=click.IntRange(1, 3), default=None, help="Property detail level (1-3)")
@click.option("--blank-nodes/--named-nodes", default=None, help="Use blank nodes for property structures")
@click.option("--elements/--no-elements", default=None, help="Include building element classes")
@click.option("--properties/--no-properties", default=None, help="Include properties")
@click.option("--geolocation/--no-geolocation", default=None, help="Include site geolocation")
@click.option("--separate", is_flag=True, help="Also write element and property graphs to separate files")
@click.option("--report", "report_path", default=None, help="Write a JSON conversion report")
@click.option("--seed", type=int, default=None, help="Seed for identifiers of entities without GUID")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def main(
    input_path: str,
    output_path: str,
    config_path: Optional[str],
    uri_base: Optional[str],
    props_level: Optional[int],
    blank_nodes: Optional[bool],
    elements: Optional[bool],
    properties: Optional[bool],
    geolocation: Optional[bool],
    separate: bool,
    report_path: Optional[str],
    seed: Optional[int],
    verbose: bool,
) -> None:
    """Convert an ifcOWL file into a Linked Building Data graph."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    # ---- Configuration ------------------------------------------------ #
    cfg = Config.from_yaml(config_path) if config_path else Config.default()
    overrides = {
        "uri_base": uri_base,
        "props_level": props_level,
        "blank_nodes": blank_nodes,
        "include_elements": elements,
        "include_properties": properties,
        "include_geolocation": geolocation,
    }
    cfg.output = replace(cfg.output, **{k: v for k, v in overrides.items() if v is not None})
    if seed is not None:
        cfg.seed = seed

    # ---- Convert ------------------------------------------------------ #
    logger.info("Converting %s", input_path)
    converter = Converter(cfg)
    result = converter.convert(input_path)

    if report_path:
        save_conversion_report(build_conversion_report(result), Path(report_path))
        logger.info("Report saved to %s", report_path)

    if not result.ok:
        for err in result.errors:
            logger.error("%s: %s", err.kind.value, err.message)
        raise SystemExit(1)

    # ---- Output ------------------------------------------------------- #
    out = Path(output_path)
    _write(result.graph, out)
    if separate:
        _write(result.product, out.with_name(f"{out.stem}_elements{out.suffix}"))
        _write(result.properties, out.with_name(f"{out.stem}_properties{out.suffix}"))

    for kind, count in sorted(count_by_kind(result).items()):
        logger.warning("%d x %s", count, kind)
    logger.info("Done (%s). LBD written to %s", result.status.value, out)


if __name__ == "__main__":
    main()
