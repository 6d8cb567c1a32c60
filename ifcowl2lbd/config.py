"""Global configuration and defaults for ifcowl2lbd."""

from __future__ import annotations

import yaml
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

ONTOLOGY_DIR = Path(__file__).parent / "ontologies"

DEFAULT_URI_BASE = "https://example.org/lbd#"


@dataclass
class OutputConfig:
    """What the converter emits and how resources are named."""

    uri_base: Optional[str] = None  # None = source "inst" prefix, else DEFAULT_URI_BASE
    props_level: int = 1  # 1 | 2 | 3
    blank_nodes: bool = False
    include_elements: bool = True
    include_properties: bool = True
    include_geolocation: bool = True

    def __post_init__(self) -> None:
        if self.props_level not in (1, 2, 3):
            raise ValueError(f"props_level must be 1, 2 or 3, got {self.props_level!r}")


@dataclass
class OntologyConfig:
    """Auxiliary vocabulary files merged into the ontology graph."""

    files: list[str] = field(
        default_factory=lambda: [
            "prod.ttl",
            "beo.ttl",
            "furnishing.ttl",
            "mep.ttl",
            "psetdef.ttl",
        ]
    )
    pset_dir: Optional[str] = "pset"
    ifcowl_dir: Optional[str] = "ifcowl"

    def resolve(self, name: str) -> Path:
        """Resolve *name* against the bundled ontology directory."""
        path = Path(name)
        return path if path.is_absolute() else ONTOLOGY_DIR / path

    @property
    def file_paths(self) -> list[Path]:
        return [self.resolve(f) for f in self.files]

    @property
    def pset_path(self) -> Optional[Path]:
        return self.resolve(self.pset_dir) if self.pset_dir else None

    @property
    def ifcowl_path(self) -> Optional[Path]:
        return self.resolve(self.ifcowl_dir) if self.ifcowl_dir else None


@dataclass
class Config:
    """Top-level configuration."""

    output: OutputConfig = field(default_factory=OutputConfig)
    ontology: OntologyConfig = field(default_factory=OntologyConfig)
    seed: Optional[int] = None  # fixes generated identifiers when set

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from a YAML file."""
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}

        out_data = data.get("output", {})
        ont_data = data.get("ontology", {})

        return cls(
            output=OutputConfig(**out_data) if out_data else OutputConfig(),
            ontology=OntologyConfig(**ont_data) if ont_data else OntologyConfig(),
            seed=data.get("seed"),
        )

    @classmethod
    def default(cls) -> "Config":
        return cls()
