from __future__ import annotations

import json
from typing import Any
import collections.abc

import yaml

from negation.negation_datatypes import SymbolTables


def _to_builtin(obj: Any) -> Any:
    if isinstance(obj, SymbolTables):
        return obj.to_dict()
    if isinstance(obj, list):
        return [_to_builtin(x) for x in obj]
    if isinstance(obj, collections.abc.Mapping):
        return {k: _to_builtin(v) for k, v in obj.items()}
    return obj


def serialize(value: Any, *, fmt: str, pretty: bool = True) -> str:
    """
    Convert symbol tables (or plain values) into a textual representation.
    - fmt: 'json' | 'yaml'
    """
    f = (fmt or '').lower()
    built = _to_builtin(value)
    if f == 'json':
        return json.dumps(built, ensure_ascii=False, indent=2 if pretty else None)
    if f in ('yaml', 'yml'):
        return yaml.safe_dump(built, sort_keys=False, allow_unicode=True)
    raise ValueError(f"Unsupported serialization format: {fmt!r}")


__all__ = ["serialize"]
