"""Load the fallback choice table from YAML (with built-in defaults)."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

import yaml

from .config import FALLBACK_CHOICES
from .models import Choice

logger = logging.getLogger(__name__)

ChoiceTable = dict[tuple[str, str], list[Choice]]


def builtin_table() -> ChoiceTable:
    return {key: [Choice(value=v, label=label) for v, label in rows] for key, rows in FALLBACK_CHOICES.items()}


def _parse_entries(entries) -> list[Choice]:
    out: list[Choice] = []
    for entry in entries or []:
        if isinstance(entry, Mapping):
            value = str(entry.get("value", "")).strip()
            label = str(entry.get("label") or value)
        elif isinstance(entry, (list, tuple)) and len(entry) == 2:
            value, label = str(entry[0]).strip(), str(entry[1])
        else:
            continue
        if value:
            out.append(Choice(value=value, label=label))
    return out


def load_fallback_table(base_path: str | Path | None = None) -> ChoiceTable:
    """Return the fallback table, overlaying ``choices.yaml`` when present.

    The YAML layout is ``{entity: {field: [{value: ..., label: ...}, ...]}}``.
    Entries in the file replace the built-in list for the same (entity, field);
    pairs not mentioned keep their built-in list. A missing or unreadable file
    yields the built-in table unchanged.
    """
    table = builtin_table()
    base = Path(base_path or Path(__file__).resolve().parent.parent)
    yaml_path = base / "choices.yaml"
    if not yaml_path.exists():
        return table
    try:
        data = yaml.safe_load(yaml_path.read_text()) or {}
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Ignoring unreadable %s: %s", yaml_path, exc)
        return table
    if not isinstance(data, Mapping):
        return table
    for entity, fields in data.items():
        if not isinstance(fields, Mapping):
            continue
        for field_name, entries in fields.items():
            parsed = _parse_entries(entries)
            if parsed:
                table[(str(entity), str(field_name))] = parsed
    return table
