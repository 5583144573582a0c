"""Debug symbol model shared by the PDB dumper and its providers."""

from enum import Enum, IntEnum
from typing import Any, List, NamedTuple, Optional, Protocol


class PdbDumperError(Exception):
    """Base class for dumper errors."""


class LoadError(PdbDumperError):
    """The debug database could not be opened or its global scope read."""


class EnumerationError(PdbDumperError):
    """Children of a symbol could not be enumerated."""


class SymTag(IntEnum):
    """DIA SymTagEnum values used by the dumper."""
    NULL = 0
    EXE = 1
    COMPILAND = 2
    FUNCTION = 5
    BLOCK = 6
    DATA = 7
    PUBLIC_SYMBOL = 10
    UDT = 11
    ENUM = 12
    FUNCTION_TYPE = 13
    POINTER_TYPE = 14
    ARRAY_TYPE = 15
    BASE_TYPE = 16
    TYPEDEF = 17
    BASE_CLASS = 18
    FRIEND = 19
    FUNCTION_ARG_TYPE = 20


class BasicType(IntEnum):
    """DIA BasicType values."""
    NO_TYPE = 0
    VOID = 1
    CHAR = 2
    WCHAR = 3
    INT = 6
    UINT = 7
    FLOAT = 8
    BCD = 9
    BOOL = 10
    LONG = 13
    ULONG = 14
    CURRENCY = 25
    DATE = 26
    VARIANT = 27
    COMPLEX = 28
    BIT = 29
    BSTR = 30
    HRESULT = 31


# DIA LocationType value for statically allocated data
LOC_IS_STATIC = 1


class VarType(IntEnum):
    """VARIANT type codes an enumerant literal may arrive in."""
    EMPTY = 0
    I2 = 2
    I4 = 3
    R8 = 5
    BSTR = 8
    I1 = 16
    UI1 = 17
    UI2 = 18
    UI4 = 19
    I8 = 20
    UI8 = 21
    INT = 22
    UINT = 23


class LiteralValue(NamedTuple):
    """A constant as the provider reports it: VARIANT type code and payload."""
    var_type: int
    raw: Any


class SymbolKind(Enum):
    """Top-level symbol categories the dumper builds records for."""
    COMPOSITE = "composite"
    ENUMERATION = "enumeration"
    FUNCTION = "function"
    DATA = "data"
    TYPEDEF = "typedef"
    OTHER = "other"


_KIND_BY_TAG = {
    SymTag.UDT: SymbolKind.COMPOSITE,
    SymTag.ENUM: SymbolKind.ENUMERATION,
    SymTag.FUNCTION: SymbolKind.FUNCTION,
    SymTag.DATA: SymbolKind.DATA,
    SymTag.TYPEDEF: SymbolKind.TYPEDEF,
}


def classify(sym_tag: int) -> SymbolKind:
    """Map a raw symbol tag onto a SymbolKind; unknown tags are OTHER."""
    return _KIND_BY_TAG.get(sym_tag, SymbolKind.OTHER)


class DebugSymbol(Protocol):
    """Read-only view of one node in the provider's symbol tree.

    Accessors never raise; missing properties come back as their empty value
    (None, "", 0 or False). Only ``find_children`` signals failure, by raising
    EnumerationError.
    """

    @property
    def sym_index_id(self) -> int: ...

    @property
    def sym_tag(self) -> int: ...

    @property
    def name(self) -> str: ...

    @property
    def type(self) -> Optional["DebugSymbol"]: ...

    @property
    def source_file(self) -> str: ...

    @property
    def line_number(self) -> int: ...

    @property
    def length(self) -> int: ...

    @property
    def count(self) -> int: ...

    @property
    def base_type(self) -> int: ...

    @property
    def location_type(self) -> int: ...

    @property
    def offset(self) -> int: ...

    @property
    def virtual_address(self) -> Optional[int]: ...

    @property
    def is_static(self) -> bool: ...

    @property
    def is_const(self) -> bool: ...

    @property
    def is_virtual(self) -> bool: ...

    @property
    def is_pure(self) -> bool: ...

    @property
    def is_virtual_base_class(self) -> bool: ...

    @property
    def value(self) -> Optional[LiteralValue]: ...

    def find_children(self, sym_tag: int) -> List["DebugSymbol"]: ...
