"""IFC GUID decoding and generated identifiers.

ifcOWL keeps ``IfcRoot.GlobalId`` in the 22-character compressed base-64
form. Output resource names use the canonical UUID text instead, which
:func:`expand_guid` produces via :mod:`ifcopenshell.guid`.
"""

from __future__ import annotations

import random
import re
import uuid
from typing import Optional

import ifcopenshell.guid

from ifcowl2lbd.errors import GuidError

_COMPRESSED_GUID = re.compile(r"^[0-3][0-9A-Za-z_$]{21}$")


def is_compressed_guid(value: str) -> bool:
    return bool(_COMPRESSED_GUID.match(value))


def expand_guid(compressed: str) -> str:
    """Return the canonical ``8-4-4-4-12`` text of a compressed IFC GUID."""
    value = compressed.strip()
    if not is_compressed_guid(value):
        raise GuidError(f"Not a compressed IFC GUID: {compressed!r}")
    return str(uuid.UUID(hex=ifcopenshell.guid.expand(value)))


class IdentifierSource:
    """Generates identifiers for entities that carry no GUID.

    With a *seed* the sequence is reproducible, otherwise every call returns
    a fresh random UUID4.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self.seed = seed
        self._rng = random.Random(seed) if seed is not None else None

    def __call__(self) -> str:
        if self._rng is None:
            return str(uuid.uuid4())
        return str(uuid.UUID(int=self._rng.getrandbits(128), version=4))
