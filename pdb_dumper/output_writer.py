"""Assembly and serialization of the PDB dump document."""

import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, Union

from .symbol_info import (
    ClassInfo,
    EnumInfo,
    FunctionInfo,
    GlobalVariableInfo,
    PdbDocument,
    TypedefInfo,
)

DOCUMENT_KEYS = ("Classes", "Enums", "GlobalFunctions", "GlobalVariables", "Typedefs")


def assemble_document(document: PdbDocument) -> Dict[str, Any]:
    """Convert a document into the dictionary that gets written as JSON"""
    return {
        "Classes": [info.to_dict() for info in document.classes],
        "Enums": [info.to_dict() for info in document.enums],
        "GlobalFunctions": [info.to_dict() for info in document.functions],
        "GlobalVariables": [info.to_dict() for info in document.global_variables],
        "Typedefs": [info.to_dict() for info in document.typedefs]
    }


def document_from_dict(data: Dict[str, Any]) -> PdbDocument:
    """Rebuild a document from a previously assembled dictionary"""
    if not isinstance(data, dict):
        raise ValueError("PDB dump must be a JSON object")
    missing = [key for key in DOCUMENT_KEYS if key not in data]
    if missing:
        raise ValueError(f"PDB dump is missing keys: {', '.join(missing)}")

    return PdbDocument(
        classes=[ClassInfo.from_dict(d) for d in data["Classes"]],
        enums=[EnumInfo.from_dict(d) for d in data["Enums"]],
        functions=[FunctionInfo.from_dict(d) for d in data["GlobalFunctions"]],
        global_variables=[GlobalVariableInfo.from_dict(d) for d in data["GlobalVariables"]],
        typedefs=[TypedefInfo.from_dict(d) for d in data["Typedefs"]]
    )


def save_document(document: PdbDocument, output_path: Union[str, Path], indent: int = 2) -> Path:
    """Write the whole document to ``output_path`` as indented JSON"""
    output_path = Path(output_path)
    data = assemble_document(document)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    # Names may carry lone surrogates; they are written as "?"
    temp_path = output_path.with_name(output_path.name + ".tmp")
    try:
        with open(temp_path, "w", encoding="utf-8", errors="replace") as f:
            json.dump(data, f, indent=indent, ensure_ascii=False)
        os.replace(temp_path, output_path)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise

    return output_path


def load_document(input_path: Union[str, Path]) -> PdbDocument:
    """Load a document written by save_document"""
    with open(input_path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    document = document_from_dict(data)
    print(f"Loaded dump with {len(document.classes)} classes, {len(document.functions)} functions",
          file=sys.stderr)
    return document
