import pytest

from conftest import FakeSymbol, array_of, base_type, pointer_to
from pdb_dumper.debug_symbols import BasicType, SymTag
from pdb_dumper.type_names import RECURSIVE_PLACEHOLDER, TypeNameResolver, basic_type_name


class TestBasicTypeName:
    @pytest.mark.parametrize("kind, length, expected", [
        (BasicType.VOID, 0, "void"),
        (BasicType.CHAR, 1, "char"),
        (BasicType.WCHAR, 2, "wchar_t"),
        (BasicType.BOOL, 1, "bool"),
        (BasicType.LONG, 4, "long"),
        (BasicType.ULONG, 4, "unsigned long"),
        (BasicType.INT, 1, "int8_t"),
        (BasicType.INT, 2, "int16_t"),
        (BasicType.INT, 4, "int32_t"),
        (BasicType.INT, 8, "int64_t"),
        (BasicType.INT, 16, "int"),
        (BasicType.UINT, 1, "uint8_t"),
        (BasicType.UINT, 8, "uint64_t"),
        (BasicType.UINT, 3, "unsigned int"),
        (BasicType.FLOAT, 4, "float"),
        (BasicType.FLOAT, 8, "double"),
        (BasicType.FLOAT, 10, "long double"),
        (BasicType.FLOAT, 16, "float"),
    ])
    def test_known_kinds(self, kind, length, expected):
        assert basic_type_name(kind, length) == expected

    def test_unknown_kind_returns_sentinel(self):
        assert basic_type_name(BasicType.HRESULT, 4) == "unknown"
        assert basic_type_name(999, 4) == "unknown"


class TestTypeNameResolver:
    def test_absent_type_resolves_to_empty_string(self):
        assert TypeNameResolver().resolve(None) == ""

    def test_pointer_to_pointer_to_int32(self):
        int32 = base_type(BasicType.INT, 4)
        assert TypeNameResolver().resolve(pointer_to(pointer_to(int32))) == "int32_t**"

    def test_array_of_doubles(self):
        double = base_type(BasicType.FLOAT, 8)
        assert TypeNameResolver().resolve(array_of(double, 10)) == "double[10]"

    def test_named_type_uses_its_own_name(self):
        vector = FakeSymbol(SymTag.UDT, name="Vector3")
        assert TypeNameResolver().resolve(pointer_to(vector)) == "Vector3*"

    def test_repeated_resolution_returns_cached_string(self):
        resolver = TypeNameResolver()
        vector = FakeSymbol(SymTag.UDT, name="Vector3")

        first = resolver.resolve(vector)
        # A later rename in the provider must not change the canonical name
        vector.name = "Renamed"
        second = resolver.resolve(vector)

        assert first == second == "Vector3"
        assert resolver.cache[vector.sym_index_id] == "Vector3"

    def test_each_resolver_has_its_own_cache(self):
        vector = FakeSymbol(SymTag.UDT, name="Vector3")
        TypeNameResolver().resolve(vector)
        vector.name = "Other"
        assert TypeNameResolver().resolve(vector) == "Other"

    def test_self_referential_pointer_terminates(self):
        node = FakeSymbol(SymTag.POINTER_TYPE)
        node.type = node
        resolver = TypeNameResolver()

        assert resolver.resolve(node) == RECURSIVE_PLACEHOLDER + "*"
        assert resolver.resolve(node) == RECURSIVE_PLACEHOLDER + "*"
