"""Canonical type names for PDB type symbols."""

import threading
from typing import Dict, Optional, Set

from .debug_symbols import BasicType, DebugSymbol, SymTag

# Returned when a type is reached again while its own name is still being built
RECURSIVE_PLACEHOLDER = "..."

_SIGNED_BY_WIDTH = {1: "int8_t", 2: "int16_t", 4: "int32_t", 8: "int64_t"}
_UNSIGNED_BY_WIDTH = {1: "uint8_t", 2: "uint16_t", 4: "uint32_t", 8: "uint64_t"}
_FLOAT_BY_WIDTH = {4: "float", 8: "double", 10: "long double"}

_FIXED_NAMES = {
    BasicType.VOID: "void",
    BasicType.CHAR: "char",
    BasicType.WCHAR: "wchar_t",
    BasicType.BOOL: "bool",
    BasicType.LONG: "long",
    BasicType.ULONG: "unsigned long",
}


def basic_type_name(base_type: int, length: int) -> str:
    """Name a primitive from its DIA basic type and byte length."""
    if base_type in _FIXED_NAMES:
        return _FIXED_NAMES[base_type]
    if base_type == BasicType.INT:
        return _SIGNED_BY_WIDTH.get(length, "int")
    if base_type == BasicType.UINT:
        return _UNSIGNED_BY_WIDTH.get(length, "unsigned int")
    if base_type == BasicType.FLOAT:
        return _FLOAT_BY_WIDTH.get(length, "float")
    return "unknown"


class TypeNameResolver:
    """Resolves type symbols to names, caching each result by symbol id.

    One resolver lives for one dump. A cached name is never recomputed, so
    every lookup of the same id within the run yields the same string.
    """

    def __init__(self):
        self.cache: Dict[int, str] = {}
        self.cache_lock = threading.Lock()
        self._in_progress: Set[int] = set()

    def resolve(self, type_symbol: Optional[DebugSymbol]) -> str:
        if type_symbol is None:
            return ""

        type_id = type_symbol.sym_index_id
        with self.cache_lock:
            cached = self.cache.get(type_id)
            if cached is not None:
                return cached
            if type_id in self._in_progress:
                return type_symbol.name or RECURSIVE_PLACEHOLDER
            self._in_progress.add(type_id)

        try:
            type_name = self._derive(type_symbol)
        finally:
            with self.cache_lock:
                self._in_progress.discard(type_id)

        with self.cache_lock:
            # Two racing resolutions derive the same string, so overwriting is harmless
            self.cache[type_id] = type_name
        return type_name

    def _derive(self, type_symbol: DebugSymbol) -> str:
        sym_tag = type_symbol.sym_tag
        if sym_tag == SymTag.POINTER_TYPE:
            return self.resolve(type_symbol.type) + "*"
        if sym_tag == SymTag.ARRAY_TYPE:
            return f"{self.resolve(type_symbol.type)}[{type_symbol.count}]"
        if sym_tag == SymTag.BASE_TYPE:
            return basic_type_name(type_symbol.base_type, type_symbol.length)
        return type_symbol.name
