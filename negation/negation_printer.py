"""
A pretty-printer for Negation values and symbol tables.
"""
import collections.abc

from negation.negation_datatypes import (
    ASSIGNMENT_MARKER, BOOLEAN_MARKER, Declaration, SymbolTables, VariableKind,
)


class Printer:
    """Formats Negation objects into readable, valid Negation source strings."""

    def __init__(self):
        self._handlers = self._create_handlers()

    def pformat(self, obj):
        """Public entry point to format an object."""
        handler = self._get_handler(obj)
        return handler(obj)

    def _get_handler(self, obj):
        obj_type = type(obj)
        if obj_type in self._handlers:
            return self._handlers[obj_type]
        if isinstance(obj, collections.abc.Mapping):
            return self._pformat_mapping
        # Default to Python's repr for unknown types
        return repr

    def _create_handlers(self):
        return {
            bool: self._pformat_bool,
            int: self._pformat_primitive,
            str: self._pformat_primitive,
            Declaration: self._pformat_declaration,
            SymbolTables: self._pformat_tables,
        }

    def _pformat_primitive(self, obj):
        return str(obj)

    def _pformat_bool(self, obj):
        # Same rendering as `#!`
        return "1" if obj else "0"

    def _pformat_declaration(self, decl: Declaration):
        head = f"{decl.kind.marker}{decl.name}{ASSIGNMENT_MARKER}"
        match decl.kind:
            case VariableKind.BOOLEAN:
                return head + ("" if decl.value else BOOLEAN_MARKER)
            case VariableKind.NUMBER:
                if decl.value < 0:
                    raise ValueError(
                        f"Number {decl.name!r} = {decl.value} cannot be written as a Negation literal")
                return head + str(decl.value)
            case VariableKind.STRING:
                return head + decl.value

    def _pformat_tables(self, tables: SymbolTables):
        return "\n".join(self._pformat_declaration(d) for d in tables.declarations())

    def _pformat_mapping(self, obj):
        # Accepts the output of SymbolTables.to_dict()
        tables = SymbolTables()
        for kind in VariableKind:
            for name, value in (obj.get(kind.name.lower()) or {}).items():
                tables.declare(Declaration(kind, name, value))
        return self._pformat_tables(tables)


__all__ = ["Printer"]
