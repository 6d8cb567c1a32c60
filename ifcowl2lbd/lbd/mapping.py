"""ifcOWL class → LBD product class correspondence.

The product vocabularies annotate their classes with ``rdfs:seeAlso`` links
to the ifcOWL classes they stand for. The table is keyed on the ifcOWL
*local name* so one table serves every schema edition.
"""

from __future__ import annotations

import logging
from typing import Iterator, Optional

from rdflib import Graph, Literal, URIRef
from rdflib.namespace import RDFS

from ifcowl2lbd.rdf import vocabulary as V
from ifcowl2lbd.rdf.path import local_name

logger = logging.getLogger(__name__)


def _cross_references(ontology: Graph) -> Iterator[tuple[URIRef, URIRef]]:
    """Yield ``(target_class, source_class)`` for every see-also statement."""
    for s, p, o in ontology:
        if "seealso" not in str(p).lower():
            continue
        if isinstance(o, Literal) or not isinstance(o, URIRef):
            continue
        if not isinstance(s, URIRef):
            continue
        yield s, o


class TypeMapper:
    """Lookup table from ifcOWL class local names to LBD classes.

    A name with more than one candidate is ambiguous and resolves to
    nothing; the conversion drops such entities rather than guess.
    """

    def __init__(self, table: Optional[dict[str, list[URIRef]]] = None) -> None:
        self._table: dict[str, list[URIRef]] = table if table is not None else {}

    @classmethod
    def from_ontology(cls, ontology: Graph, ifc: V.IfcOWLNamespace) -> "TypeMapper":
        table: dict[str, list[URIRef]] = {}
        references = list(_cross_references(ontology))

        for target, source in references:
            candidates = table.setdefault(local_name(source), [])
            if target not in candidates:
                candidates.append(target)
            logger.debug("added to resource_list : %s", target)

        # One level down the subclass tree, only for names not mapped yet
        for target, source in references:
            resolved = ifc[local_name(source)]
            for subclass in ontology.subjects(RDFS.subClassOf, resolved):
                if not isinstance(subclass, URIRef):
                    continue
                name = local_name(subclass)
                if name not in table:
                    table[name] = [target]
                    logger.debug("%s ->> %s", name, target)

        logger.info("Type mapping holds %d ifcOWL classes", len(table))
        return cls(table)

    def candidates(self, class_name: str) -> list[URIRef]:
        return list(self._table.get(class_name, []))

    def is_ambiguous(self, class_name: str) -> bool:
        return len(self._table.get(class_name, [])) > 1

    def resolve(self, class_name: str) -> Optional[URIRef]:
        """Return the single LBD class for *class_name*, or None."""
        candidates = self._table.get(class_name)
        if not candidates:
            return None
        if len(candidates) > 1:
            logger.debug("many %s: %s", class_name, candidates)
            return None
        return candidates[0]

    def __contains__(self, class_name: str) -> bool:
        return class_name in self._table

    def __len__(self) -> int:
        return len(self._table)
