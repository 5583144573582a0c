"""Search functionality over a dumped PDB."""

import re
from collections import defaultdict
from typing import Any, Dict, List, Optional

from .symbol_info import PdbDocument

SYMBOL_TYPES = ("class", "enum", "function", "variable", "typedef")


class SearchEngine:
    """Handles searching for symbols in a PdbDocument."""

    def __init__(self, document: PdbDocument):
        self.document = document
        self.class_index = defaultdict(list)
        self.enum_index = defaultdict(list)
        self.function_index = defaultdict(list)
        self.variable_index = defaultdict(list)
        self.typedef_index = defaultdict(list)

        for info in document.classes:
            self.class_index[info.name].append(info)
        for info in document.enums:
            self.enum_index[info.name].append(info)
        for info in document.functions:
            self.function_index[info.name].append(info)
        for info in document.global_variables:
            self.variable_index[info.name].append(info)
        for info in document.typedefs:
            self.typedef_index[info.name].append(info)

    def search_classes(self, pattern: str) -> List[Dict[str, Any]]:
        """Search for classes matching a pattern"""
        results = []
        regex = re.compile(pattern, re.IGNORECASE)

        for name, infos in self.class_index.items():
            if regex.search(name):
                for info in infos:
                    results.append({
                        "name": info.name,
                        "size": info.size,
                        "file": info.source_file,
                        "line": info.line,
                        "base_classes": [b.name for b in info.base_classes]
                    })

        return results

    def search_enums(self, pattern: str) -> List[Dict[str, Any]]:
        """Search for enums matching a pattern"""
        results = []
        regex = re.compile(pattern, re.IGNORECASE)

        for name, infos in self.enum_index.items():
            if regex.search(name):
                for info in infos:
                    results.append({
                        "name": info.name,
                        "underlying_type": info.underlying_type,
                        "file": info.source_file,
                        "line": info.line,
                        "value_count": len(info.values)
                    })

        return results

    def search_functions(self, pattern: str, class_name: Optional[str] = None) -> List[Dict[str, Any]]:
        """Search for global functions, or for methods of ``class_name``"""
        results = []
        regex = re.compile(pattern, re.IGNORECASE)

        if class_name:
            for info in self.class_index.get(class_name, []):
                for method in info.methods:
                    if regex.search(method.name):
                        results.append({
                            "name": method.name,
                            "parent_class": info.name,
                            "signature": self._signature(method.name, method.parameters),
                            "is_virtual": method.is_virtual,
                            "virtual_address": method.virtual_address
                        })
            return results

        for name, infos in self.function_index.items():
            if regex.search(name):
                for info in infos:
                    results.append({
                        "name": info.name,
                        "file": info.source_file,
                        "line": info.line,
                        "signature": self._signature(info.name, info.parameters),
                        "virtual_address": info.virtual_address
                    })

        return results

    def search_global_variables(self, pattern: str) -> List[Dict[str, Any]]:
        results = []
        regex = re.compile(pattern, re.IGNORECASE)

        for name, infos in self.variable_index.items():
            if regex.search(name):
                for info in infos:
                    results.append({
                        "name": info.name,
                        "type": info.type_name,
                        "file": info.source_file,
                        "line": info.line,
                        "virtual_address": info.virtual_address
                    })

        return results

    def search_typedefs(self, pattern: str) -> List[Dict[str, Any]]:
        regex = re.compile(pattern, re.IGNORECASE)
        return [
            {"name": info.name, "underlying_type": info.underlying_type}
            for name, infos in self.typedef_index.items() if regex.search(name)
            for info in infos
        ]

    def search_symbols(self, pattern: str,
                       symbol_types: Optional[List[str]] = None) -> Dict[str, List[Dict[str, Any]]]:
        """Search for any symbols matching a pattern"""
        wanted = symbol_types or list(SYMBOL_TYPES)
        results = {}

        if "class" in wanted:
            results["classes"] = self.search_classes(pattern)
        if "enum" in wanted:
            results["enums"] = self.search_enums(pattern)
        if "function" in wanted:
            results["functions"] = self.search_functions(pattern)
        if "variable" in wanted:
            results["variables"] = self.search_global_variables(pattern)
        if "typedef" in wanted:
            results["typedefs"] = self.search_typedefs(pattern)

        return results

    def get_class_info(self, class_name: str) -> Optional[Dict[str, Any]]:
        """Get the full record of a class"""
        infos = self.class_index.get(class_name, [])
        if not infos:
            return None

        # Return the first match; a PDB may hold forward declarations under the same name
        return infos[0].to_dict()

    def get_enum_info(self, enum_name: str) -> Optional[Dict[str, Any]]:
        infos = self.enum_index.get(enum_name, [])
        if not infos:
            return None
        return infos[0].to_dict()

    def get_derived_classes(self, class_name: str) -> List[Dict[str, Any]]:
        """Get all classes that list ``class_name`` as a direct base"""
        derived_classes = []

        for name, infos in self.class_index.items():
            for info in infos:
                if any(base.name == class_name for base in info.base_classes):
                    derived_classes.append({
                        "name": info.name,
                        "file": info.source_file,
                        "line": info.line,
                        "base_classes": [b.name for b in info.base_classes]
                    })

        return derived_classes

    def get_function_signature(self, function_name: str, class_name: Optional[str] = None) -> List[str]:
        """Get signatures of global functions, or of methods of ``class_name``, with the given name"""
        if class_name:
            return [
                self._signature(method.name, method.parameters)
                for info in self.class_index.get(class_name, [])
                for method in info.methods
                if method.name == function_name
            ]

        return [
            self._signature(info.name, info.parameters)
            for info in self.function_index.get(function_name, [])
        ]

    def get_stats(self) -> Dict[str, int]:
        return {
            "class_count": len(self.document.classes),
            "enum_count": len(self.document.enums),
            "function_count": len(self.document.functions),
            "variable_count": len(self.document.global_variables),
            "typedef_count": len(self.document.typedefs)
        }

    @staticmethod
    def _signature(name: str, parameters) -> str:
        return f"{name}({', '.join(p.type_name for p in parameters)})"
