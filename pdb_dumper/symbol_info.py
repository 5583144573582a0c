"""Record types for entities extracted from a PDB."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def _location_to_dict(data: Dict[str, Any], source_file: str, line: int) -> None:
    if source_file:
        data["SourceFile"] = source_file
    if line:
        data["LineNumber"] = line


@dataclass
class ParameterInfo:
    """Unnamed function parameter"""
    type_name: str

    def to_dict(self):
        return {"Type": self.type_name}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParameterInfo":
        return cls(type_name=data.get("Type", ""))


@dataclass
class BaseClassInfo:
    name: str
    is_virtual: bool = False
    offset: int = 0

    def to_dict(self):
        return {
            "Name": self.name,
            "IsVirtual": self.is_virtual,
            "Offset": self.offset
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BaseClassInfo":
        return cls(
            name=data.get("Name", ""),
            is_virtual=data.get("IsVirtual", False),
            offset=data.get("Offset", 0)
        )


@dataclass
class FieldInfo:
    """Data member of a class"""
    name: str
    type_name: str
    is_static: bool = False
    is_const: bool = False
    offset: int = 0
    virtual_address: Optional[int] = None  # Only meaningful for static members

    def to_dict(self):
        data = {
            "Name": self.name,
            "Type": self.type_name,
            "IsStatic": self.is_static,
            "IsConst": self.is_const,
            "Offset": self.offset
        }
        if self.virtual_address is not None:
            data["VirtualOffset"] = self.virtual_address
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldInfo":
        return cls(
            name=data.get("Name", ""),
            type_name=data.get("Type", ""),
            is_static=data.get("IsStatic", False),
            is_const=data.get("IsConst", False),
            offset=data.get("Offset", 0),
            virtual_address=data.get("VirtualOffset")
        )


@dataclass
class MethodInfo:
    """Member function of a class.

    ``virtual_index`` counts virtual methods in the order the PDB lists them.
    It is an approximation and not the slot the compiler assigned in the vtable.
    """
    name: str
    is_virtual: bool = False
    is_pure_virtual: bool = False
    is_static: bool = False
    is_const: bool = False
    virtual_index: Optional[int] = None
    virtual_address: int = 0
    parameters: List[ParameterInfo] = field(default_factory=list)

    def to_dict(self):
        data = {
            "Name": self.name,
            "IsVirtual": self.is_virtual,
            "IsPureVirtual": self.is_pure_virtual,
            "IsStatic": self.is_static,
            "IsConst": self.is_const
        }
        if self.virtual_index is not None:
            data["VirtualMethodIndex"] = self.virtual_index
        data["VirtualOffset"] = self.virtual_address
        data["Parameters"] = [p.to_dict() for p in self.parameters]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MethodInfo":
        return cls(
            name=data.get("Name", ""),
            is_virtual=data.get("IsVirtual", False),
            is_pure_virtual=data.get("IsPureVirtual", False),
            is_static=data.get("IsStatic", False),
            is_const=data.get("IsConst", False),
            virtual_index=data.get("VirtualMethodIndex"),
            virtual_address=data.get("VirtualOffset", 0),
            parameters=[ParameterInfo.from_dict(p) for p in data.get("Parameters", [])]
        )


@dataclass
class ClassInfo:
    """Information about a user-defined type (class, struct or union)"""
    name: str
    size: int = 0
    source_file: str = ""
    line: int = 0
    base_classes: List[BaseClassInfo] = field(default_factory=list)
    fields: List[FieldInfo] = field(default_factory=list)
    methods: List[MethodInfo] = field(default_factory=list)

    def to_dict(self):
        """Convert to dictionary for JSON serialization"""
        data = {"Name": self.name, "Size": self.size}
        _location_to_dict(data, self.source_file, self.line)
        data["BaseClasses"] = [b.to_dict() for b in self.base_classes]
        data["Fields"] = [f.to_dict() for f in self.fields]
        data["Methods"] = [m.to_dict() for m in self.methods]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClassInfo":
        return cls(
            name=data.get("Name", ""),
            size=data.get("Size", 0),
            source_file=data.get("SourceFile", ""),
            line=data.get("LineNumber", 0),
            base_classes=[BaseClassInfo.from_dict(b) for b in data.get("BaseClasses", [])],
            fields=[FieldInfo.from_dict(f) for f in data.get("Fields", [])],
            methods=[MethodInfo.from_dict(m) for m in data.get("Methods", [])]
        )


@dataclass
class EnumValueInfo:
    name: str
    value: Optional[int] = None

    def to_dict(self):
        return {"Name": self.name, "Value": self.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EnumValueInfo":
        return cls(name=data.get("Name", ""), value=data.get("Value"))


@dataclass
class EnumInfo:
    name: str
    underlying_type: str = ""
    source_file: str = ""
    line: int = 0
    values: List[EnumValueInfo] = field(default_factory=list)

    def to_dict(self):
        data = {"Name": self.name, "UnderlyingType": self.underlying_type}
        _location_to_dict(data, self.source_file, self.line)
        data["Values"] = [v.to_dict() for v in self.values]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EnumInfo":
        return cls(
            name=data.get("Name", ""),
            underlying_type=data.get("UnderlyingType", ""),
            source_file=data.get("SourceFile", ""),
            line=data.get("LineNumber", 0),
            values=[EnumValueInfo.from_dict(v) for v in data.get("Values", [])]
        )


@dataclass
class TypedefInfo:
    name: str
    underlying_type: str = ""

    def to_dict(self):
        return {"Name": self.name, "UnderlyingType": self.underlying_type}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TypedefInfo":
        return cls(name=data.get("Name", ""), underlying_type=data.get("UnderlyingType", ""))


@dataclass
class FunctionInfo:
    """Free (global) function"""
    name: str
    is_static: bool = False
    is_const: bool = False
    source_file: str = ""
    line: int = 0
    virtual_address: int = 0
    parameters: List[ParameterInfo] = field(default_factory=list)

    def to_dict(self):
        data = {
            "Name": self.name,
            "IsStatic": self.is_static,
            "IsConst": self.is_const
        }
        _location_to_dict(data, self.source_file, self.line)
        data["VirtualOffset"] = self.virtual_address
        data["Parameters"] = [p.to_dict() for p in self.parameters]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FunctionInfo":
        return cls(
            name=data.get("Name", ""),
            is_static=data.get("IsStatic", False),
            is_const=data.get("IsConst", False),
            source_file=data.get("SourceFile", ""),
            line=data.get("LineNumber", 0),
            virtual_address=data.get("VirtualOffset", 0),
            parameters=[ParameterInfo.from_dict(p) for p in data.get("Parameters", [])]
        )


@dataclass
class GlobalVariableInfo:
    name: str
    type_name: str = ""
    is_static: bool = False
    is_const: bool = False
    source_file: str = ""
    line: int = 0
    virtual_address: int = 0

    def to_dict(self):
        data = {
            "Name": self.name,
            "Type": self.type_name,
            "IsStatic": self.is_static,
            "IsConst": self.is_const
        }
        _location_to_dict(data, self.source_file, self.line)
        data["VirtualOffset"] = self.virtual_address
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GlobalVariableInfo":
        return cls(
            name=data.get("Name", ""),
            type_name=data.get("Type", ""),
            is_static=data.get("IsStatic", False),
            is_const=data.get("IsConst", False),
            source_file=data.get("SourceFile", ""),
            line=data.get("LineNumber", 0),
            virtual_address=data.get("VirtualOffset", 0)
        )


@dataclass
class PdbDocument:
    """All entities dumped from one PDB, in the order the PDB lists them"""
    classes: List[ClassInfo] = field(default_factory=list)
    enums: List[EnumInfo] = field(default_factory=list)
    functions: List[FunctionInfo] = field(default_factory=list)
    global_variables: List[GlobalVariableInfo] = field(default_factory=list)
    typedefs: List[TypedefInfo] = field(default_factory=list)
