#!/usr/bin/env python3
"""
PDB symbol analyzer

Walks the global scope of a PDB and turns its classes, enums, functions,
global variables and typedefs into records, resolving every referenced type
to a canonical name on the way.
"""

import sys
from typing import Callable, Dict, List, Optional

from .debug_symbols import (
    DebugSymbol,
    EnumerationError,
    LiteralValue,
    LoadError,
    LOC_IS_STATIC,
    SymbolKind,
    SymTag,
    VarType,
    classify,
)
from .file_filter import SourceFileFilter
from .symbol_info import (
    BaseClassInfo,
    ClassInfo,
    EnumInfo,
    EnumValueInfo,
    FieldInfo,
    FunctionInfo,
    GlobalVariableInfo,
    MethodInfo,
    ParameterInfo,
    PdbDocument,
    TypedefInfo,
)
from .type_names import TypeNameResolver

ProgressCallback = Callable[[int, int], None]

_INTEGER_LITERALS = frozenset({
    VarType.INT,  # signed 32
    VarType.I4,   # signed 32
    VarType.UI4,  # unsigned 32
    VarType.I8,   # signed 64
    VarType.UI8,  # unsigned 64
})


def decode_literal(value: Optional[LiteralValue]) -> Optional[int]:
    """Return the integer held by an enumerant literal, or None if it holds something else"""
    if value is None or value.var_type not in _INTEGER_LITERALS:
        return None
    if isinstance(value.raw, bool) or not isinstance(value.raw, int):
        return None
    return value.raw


class PdbAnalyzer:
    """
    Builds a PdbDocument from the global scope of a PDB.

    Symbols are visited once, in the order the provider lists them. A symbol
    whose source file falls outside the configured prefix yields no record.
    Failing to list the global scope aborts the dump; failing to list the
    children of a single symbol only leaves that part of its record empty.
    """

    def __init__(self, global_scope: DebugSymbol, file_prefix: str = "",
                 progress_callback: Optional[ProgressCallback] = None,
                 resolver: Optional[TypeNameResolver] = None):
        self.global_scope = global_scope
        self.file_filter = SourceFileFilter(file_prefix)
        self.progress_callback = progress_callback
        self.resolver = resolver or TypeNameResolver()

        # Statistics
        self.stats: Dict[str, int] = {
            "symbols_seen": 0,
            "symbols_skipped": 0,
            "filtered_out": 0,
            "enumeration_failures": 0
        }

    def dump(self) -> PdbDocument:
        """Enumerate the global scope and build every record"""
        try:
            symbols = self.global_scope.find_children(SymTag.NULL)
        except EnumerationError as e:
            raise LoadError(f"findChildren failed on the global scope: {e}") from e

        document = PdbDocument()
        total = len(symbols)

        for processed, symbol in enumerate(symbols, start=1):
            self.stats["symbols_seen"] += 1
            self._process_symbol(symbol, document)
            if self.progress_callback:
                self.progress_callback(processed, total)

        return document

    def _process_symbol(self, symbol: DebugSymbol, document: PdbDocument):
        kind = classify(symbol.sym_tag)

        if kind is SymbolKind.COMPOSITE:
            self._append(document.classes, self.build_class(symbol))
        elif kind is SymbolKind.ENUMERATION:
            self._append(document.enums, self.build_enum(symbol))
        elif kind is SymbolKind.FUNCTION:
            self._append(document.functions, self.build_function(symbol))
        elif kind is SymbolKind.DATA:
            self._append(document.global_variables, self.build_global_variable(symbol))
        elif kind is SymbolKind.TYPEDEF:
            document.typedefs.append(self.build_typedef(symbol))
        elif kind is SymbolKind.OTHER:
            self.stats["symbols_skipped"] += 1
        else:
            raise AssertionError(f"Unhandled symbol kind: {kind}")

    def _append(self, records: list, record):
        if record is None:
            self.stats["filtered_out"] += 1
        else:
            records.append(record)

    def _children(self, symbol: DebugSymbol, sym_tag: SymTag) -> List[DebugSymbol]:
        """List children of a nested symbol, treating a failed query as no children"""
        try:
            return symbol.find_children(sym_tag)
        except EnumerationError:
            self.stats["enumeration_failures"] += 1
            return []

    def _parameters(self, function: DebugSymbol) -> List[ParameterInfo]:
        # Argument types hang off the function signature when the PDB provides one
        signature = function.type
        if signature is not None and signature.sym_tag == SymTag.FUNCTION_TYPE:
            args = self._children(signature, SymTag.FUNCTION_ARG_TYPE)
        else:
            args = self._children(function, SymTag.FUNCTION_ARG_TYPE)
        return [ParameterInfo(type_name=self.resolver.resolve(arg.type)) for arg in args]

    def build_class(self, symbol: DebugSymbol) -> Optional[ClassInfo]:
        """Build a ClassInfo for a UDT symbol, or None if filtered out"""
        source_file = symbol.source_file
        if not self.file_filter.accepts(source_file):
            return None

        info = ClassInfo(
            name=symbol.name,
            size=symbol.length,
            source_file=source_file,
            line=symbol.line_number
        )

        for base in self._children(symbol, SymTag.BASE_CLASS):
            info.base_classes.append(BaseClassInfo(
                name=base.name,
                is_virtual=base.is_virtual_base_class,
                offset=base.offset
            ))

        for member in self._children(symbol, SymTag.DATA):
            info.fields.append(FieldInfo(
                name=member.name,
                type_name=self.resolver.resolve(member.type),
                is_static=member.location_type == LOC_IS_STATIC,
                is_const=member.is_const,
                offset=member.offset,
                virtual_address=member.virtual_address
            ))

        virtual_index = 0
        for function in self._children(symbol, SymTag.FUNCTION):
            method = MethodInfo(
                name=function.name,
                is_virtual=function.is_virtual,
                is_pure_virtual=function.is_pure,
                is_static=function.is_static,
                is_const=function.is_const,
                virtual_address=function.virtual_address or 0,
                parameters=self._parameters(function)
            )
            if method.is_virtual:
                method.virtual_index = virtual_index
                virtual_index += 1
            info.methods.append(method)

        return info

    def build_enum(self, symbol: DebugSymbol) -> Optional[EnumInfo]:
        """Build an EnumInfo for an enum symbol, or None if filtered out"""
        underlying_type = self.resolver.resolve(symbol.type)

        source_file = symbol.source_file
        if not self.file_filter.accepts(source_file):
            return None

        info = EnumInfo(
            name=symbol.name,
            underlying_type=underlying_type,
            source_file=source_file,
            line=symbol.line_number
        )
        for enumerant in self._children(symbol, SymTag.DATA):
            info.values.append(EnumValueInfo(
                name=enumerant.name,
                value=decode_literal(enumerant.value)
            ))
        return info

    def build_typedef(self, symbol: DebugSymbol) -> TypedefInfo:
        # Typedefs are dumped regardless of the source file prefix
        return TypedefInfo(
            name=symbol.name,
            underlying_type=self.resolver.resolve(symbol.type)
        )

    def build_function(self, symbol: DebugSymbol) -> Optional[FunctionInfo]:
        """Build a FunctionInfo for a global function, or None if filtered out"""
        is_static = symbol.is_static
        is_const = symbol.is_const

        source_file = symbol.source_file
        if not self.file_filter.accepts(source_file):
            return None

        return FunctionInfo(
            name=symbol.name,
            is_static=is_static,
            is_const=is_const,
            source_file=source_file,
            line=symbol.line_number,
            virtual_address=symbol.virtual_address or 0,
            parameters=self._parameters(symbol)
        )

    def build_global_variable(self, symbol: DebugSymbol) -> Optional[GlobalVariableInfo]:
        """Build a GlobalVariableInfo for a global data symbol, or None if filtered out"""
        type_name = self.resolver.resolve(symbol.type)
        is_static = symbol.location_type == LOC_IS_STATIC
        is_const = symbol.is_const

        source_file = symbol.source_file
        if not self.file_filter.accepts(source_file):
            return None

        return GlobalVariableInfo(
            name=symbol.name,
            type_name=type_name,
            is_static=is_static,
            is_const=is_const,
            source_file=source_file,
            line=symbol.line_number,
            virtual_address=symbol.virtual_address or 0
        )

    def get_stats(self) -> Dict[str, int]:
        """Get analyzer statistics"""
        stats = dict(self.stats)
        stats["cached_type_names"] = len(self.resolver.cache)
        return stats


def dump_global_scope(global_scope: DebugSymbol, file_prefix: str = "",
                      progress_callback: Optional[ProgressCallback] = None) -> PdbDocument:
    """Build a document for a global scope with a fresh resolver"""
    analyzer = PdbAnalyzer(global_scope, file_prefix, progress_callback)
    document = analyzer.dump()
    stats = analyzer.get_stats()
    print(f"Processed {stats['symbols_seen']} symbols "
          f"({stats['filtered_out']} filtered out, {stats['enumeration_failures']} failed child queries)",
          file=sys.stderr)
    return document
