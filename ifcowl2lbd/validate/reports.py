"""Conversion report serialisation."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ifcowl2lbd.lbd.model import ConversionResult


def build_conversion_report(result: ConversionResult) -> dict[str, Any]:
    """Build a serialisable report dict."""
    return {
        "status": result.status.value,
        "ok": result.ok,
        "triples": {
            "total": len(result.graph),
            "topology": len(result.topology),
            "product": len(result.product),
            "properties": len(result.properties),
        },
        "errors": [d.to_dict() for d in result.errors],
        "warnings": [d.to_dict() for d in result.warnings],
        "info": [d.to_dict() for d in result.info],
        "messages": list(result.messages),
    }


def save_conversion_report(report: dict[str, Any], path: Path) -> None:
    path.write_text(json.dumps(report, indent=2, ensure_ascii=False), encoding="utf-8")


def count_by_kind(result: ConversionResult) -> dict[str, int]:
    """Return {diagnostic kind: count} over warnings and errors."""
    counts: dict[str, int] = {}
    for diag in [*result.errors, *result.warnings]:
        counts[diag.kind.value] = counts.get(diag.kind.value, 0) + 1
    return counts
