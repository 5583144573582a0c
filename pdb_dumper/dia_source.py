"""
PDB access through the Microsoft DIA SDK.

Wraps the COM interfaces of msdia140.dll (loaded with comtypes) in the
read-only DebugSymbol view the analyzer consumes. Windows only; the DIA DLL
must be registered (regsvr32 msdia140.dll).
"""

import os
import sys
from ctypes import byref
from typing import List, Optional

from .debug_symbols import EnumerationError, LiteralValue, LoadError, SymTag

DEFAULT_DIA_DLL = "msdia140.dll"

# Filled in once comtypes is loaded
_COM_ERRORS = (OSError,)

# DIA nsNone: no name matching when enumerating children
_NS_NONE = 0


def _load_dia_module(dia_dll: str):
    """Import comtypes and generate wrappers for the DIA type library"""
    global _COM_ERRORS

    if sys.platform != "win32":
        raise LoadError("Reading PDB files requires the DIA SDK, which is only available on Windows")

    try:
        import comtypes
        import comtypes.client
    except ImportError as e:
        raise LoadError("comtypes package not found. Install with: pip install comtypes") from e

    _COM_ERRORS = (comtypes.COMError, OSError)

    try:
        return comtypes.client.GetModule(dia_dll)
    except _COM_ERRORS as e:
        raise LoadError(f"Could not load DIA type library from {dia_dll}: {e}") from e


class DiaSymbol:
    """DebugSymbol backed by an IDiaSymbol COM pointer"""

    def __init__(self, symbol):
        self._symbol = symbol

    def _get(self, attribute: str, default=None):
        try:
            value = getattr(self._symbol, attribute)
        except _COM_ERRORS:
            return default
        return default if value is None else value

    @property
    def sym_index_id(self) -> int:
        return self._get("symIndexId", 0)

    @property
    def sym_tag(self) -> int:
        return self._get("symTag", SymTag.NULL)

    @property
    def name(self) -> str:
        return self._get("name", "")

    @property
    def type(self) -> Optional["DiaSymbol"]:
        type_symbol = self._get("type")
        if not type_symbol:
            return None
        return DiaSymbol(type_symbol)

    def _line_on_type_definition(self):
        try:
            return self._symbol.getSrcLineOnTypeDefn()
        except _COM_ERRORS:
            return None

    @property
    def source_file(self) -> str:
        file_name = self._get("sourceFileName", "")
        if file_name:
            return file_name

        # Fall back to the line record of the type definition
        line = self._line_on_type_definition()
        if not line:
            return ""
        try:
            source = line.sourceFile
            return (source.fileName or "") if source else ""
        except _COM_ERRORS:
            return ""

    @property
    def line_number(self) -> int:
        line = self._line_on_type_definition()
        if not line:
            return 0
        try:
            return line.lineNumber or 0
        except _COM_ERRORS:
            return 0

    @property
    def length(self) -> int:
        return self._get("length", 0)

    @property
    def count(self) -> int:
        return self._get("count", 0)

    @property
    def base_type(self) -> int:
        return self._get("baseType", 0)

    @property
    def location_type(self) -> int:
        return self._get("locationType", 0)

    @property
    def offset(self) -> int:
        return self._get("offset", 0)

    @property
    def virtual_address(self) -> Optional[int]:
        return self._get("virtualAddress")

    @property
    def is_static(self) -> bool:
        return bool(self._get("isStatic", False))

    @property
    def is_const(self) -> bool:
        return bool(self._get("constType", False))

    @property
    def is_virtual(self) -> bool:
        return bool(self._get("virtual", False))

    @property
    def is_pure(self) -> bool:
        return bool(self._get("pure", False))

    @property
    def is_virtual_base_class(self) -> bool:
        return bool(self._get("virtualBaseClass", False))

    @property
    def value(self) -> Optional[LiteralValue]:
        from comtypes.automation import VARIANT

        # The raw COM method keeps the VARIANT type that the property would convert away
        variant = VARIANT()
        try:
            self._symbol._IDiaSymbol__com__get_value(byref(variant))
            return LiteralValue(variant.vt, variant.value)
        except _COM_ERRORS:
            return None

    def find_children(self, sym_tag: int) -> List["DiaSymbol"]:
        try:
            enum_symbols = self._symbol.findChildren(int(sym_tag), None, _NS_NONE)
        except _COM_ERRORS as e:
            raise EnumerationError(f"findChildren({SymTag(sym_tag).name}) failed: {e}") from e
        if not enum_symbols:
            return []

        children = []
        try:
            while True:
                child, fetched = enum_symbols.Next(1)
                if fetched != 1:
                    break
                children.append(DiaSymbol(child))
        except _COM_ERRORS as e:
            raise EnumerationError(f"Enumerating {SymTag(sym_tag).name} children failed: {e}") from e
        return children


class PdbSession:
    """An open DIA session on one PDB file"""

    def __init__(self, pdb_path: str, dia_dll: str = DEFAULT_DIA_DLL):
        self.pdb_path = pdb_path
        self.dia_dll = dia_dll
        self._source = None
        self._session = None

    def open(self) -> "PdbSession":
        if not os.path.exists(self.pdb_path):
            raise LoadError(f"PDB file not found: {self.pdb_path}")

        msdia = _load_dia_module(self.dia_dll)
        import comtypes.client

        try:
            self._source = comtypes.client.CreateObject(msdia.DiaSource, interface=msdia.IDiaDataSource)
        except _COM_ERRORS as e:
            raise LoadError(f"CoCreateInstance failed: {e}") from e

        try:
            self._source.loadDataFromPdb(self.pdb_path)
        except _COM_ERRORS as e:
            raise LoadError(f"loadDataFromPdb failed: {e}") from e

        try:
            self._session = self._source.openSession()
        except _COM_ERRORS as e:
            raise LoadError(f"openSession failed: {e}") from e

        print(f"Opened PDB: {self.pdb_path}", file=sys.stderr)
        return self

    @property
    def global_scope(self) -> DiaSymbol:
        if self._session is None:
            raise LoadError("PDB session is not open")
        try:
            scope = self._session.globalScope
        except _COM_ERRORS as e:
            raise LoadError(f"get_globalScope failed: {e}") from e
        if not scope:
            raise LoadError("get_globalScope returned no symbol")
        return DiaSymbol(scope)

    def close(self):
        self._session = None
        self._source = None


def open_pdb(pdb_path: str, dia_dll: str = DEFAULT_DIA_DLL) -> PdbSession:
    """Open a PDB file, raising LoadError if DIA cannot read it"""
    return PdbSession(pdb_path, dia_dll).open()
