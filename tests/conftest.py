import itertools
from dataclasses import dataclass, field
from typing import List, Optional

import pytest

from pdb_dumper.debug_symbols import (
    BasicType,
    EnumerationError,
    LiteralValue,
    SymTag,
)

_ids = itertools.count(1)


@dataclass
class FakeSymbol:
    """In-memory stand-in for a DIA symbol"""
    sym_tag: int
    name: str = ""
    type: Optional["FakeSymbol"] = None
    source_file: str = ""
    line_number: int = 0
    length: int = 0
    count: int = 0
    base_type: int = 0
    location_type: int = 0
    offset: int = 0
    virtual_address: Optional[int] = None
    is_static: bool = False
    is_const: bool = False
    is_virtual: bool = False
    is_pure: bool = False
    is_virtual_base_class: bool = False
    value: Optional[LiteralValue] = None
    children: List["FakeSymbol"] = field(default_factory=list)
    failing_tags: List[int] = field(default_factory=list)
    sym_index_id: int = field(default_factory=lambda: next(_ids))
    queries: List[int] = field(default_factory=list)

    def find_children(self, sym_tag):
        self.queries.append(sym_tag)
        if sym_tag in self.failing_tags:
            raise EnumerationError(f"cannot enumerate {sym_tag}")
        if sym_tag == SymTag.NULL:
            return list(self.children)
        return [c for c in self.children if c.sym_tag == sym_tag]


def base_type(kind, length):
    return FakeSymbol(SymTag.BASE_TYPE, base_type=kind, length=length)


def pointer_to(target):
    return FakeSymbol(SymTag.POINTER_TYPE, type=target, length=8)


def array_of(element, count):
    return FakeSymbol(SymTag.ARRAY_TYPE, type=element, count=count)


def udt(name, **kwargs):
    return FakeSymbol(SymTag.UDT, name=name, **kwargs)


def data(name, type_symbol=None, **kwargs):
    return FakeSymbol(SymTag.DATA, name=name, type=type_symbol, **kwargs)


def function(name, arg_types=(), **kwargs):
    signature = FakeSymbol(
        SymTag.FUNCTION_TYPE,
        children=[FakeSymbol(SymTag.FUNCTION_ARG_TYPE, type=t) for t in arg_types]
    )
    return FakeSymbol(SymTag.FUNCTION, name=name, type=signature, **kwargs)


def global_scope(*children):
    return FakeSymbol(SymTag.EXE, name="game", children=list(children))


@pytest.fixture
def int32():
    return base_type(BasicType.INT, 4)


@pytest.fixture
def point_scope(int32):
    """A Point class in src/point.h and a Main function with no source location"""
    point = udt(
        "Point",
        length=8,
        source_file="src/point.h",
        line_number=3,
        children=[
            data("x", int32, offset=0),
            data("y", int32, offset=4),
            function("Draw", is_virtual=True, virtual_address=0x1000),
        ]
    )
    main = function("Main", virtual_address=0x2000)
    return global_scope(point, main)
