#!/usr/bin/env python3
"""
PDB Symbol MCP Server

Provides tools for querying the classes, enums, functions and globals of a
PDB file, either read directly through DIA or from a previously written dump.
"""

import asyncio
import json
import os
import sys
import time
from typing import Any, Dict, List, Optional

from mcp.server import Server
from mcp.types import (
    Tool,
    TextContent,
)

from .debug_symbols import LoadError
from .dia_source import open_pdb
from .output_writer import load_document, save_document
from .pdb_analyzer import PdbAnalyzer
from .pdb_dumper_config import PdbDumperConfig
from .search_engine import SYMBOL_TYPES, SearchEngine
from .symbol_info import PdbDocument

# Loaded dump, set by set_pdb_file or load_dump
document: Optional[PdbDocument] = None
search_engine: Optional[SearchEngine] = None
loaded_from: str = ""
dump_stats: Dict[str, Any] = {}

config = PdbDumperConfig()


def _install_document(new_document: PdbDocument, source: str, stats: Dict[str, Any]):
    global document, search_engine, loaded_from, dump_stats
    document = new_document
    search_engine = SearchEngine(new_document)
    loaded_from = source
    dump_stats = stats


def load_pdb(pdb_path: str, file_prefix: str = "") -> Dict[str, Any]:
    """Dump a PDB through DIA and make it the active document"""
    start_time = time.time()
    session = open_pdb(pdb_path, config.get_dia_dll())
    try:
        analyzer = PdbAnalyzer(session.global_scope, file_prefix)
        new_document = analyzer.dump()
        stats = analyzer.get_stats()
    finally:
        session.close()

    stats["file_prefix"] = file_prefix
    stats["dump_time"] = round(time.time() - start_time, 2)
    _install_document(new_document, pdb_path, stats)
    print(f"Loaded PDB {pdb_path} in {stats['dump_time']:.2f}s", file=sys.stderr)
    return stats


def _text(payload: Any) -> List[TextContent]:
    if isinstance(payload, str):
        return [TextContent(type="text", text=payload)]
    return [TextContent(type="text", text=json.dumps(payload, indent=2))]


# MCP Server
server = Server("pdb-symbols")

_PATTERN_SCHEMA = {
    "type": "object",
    "properties": {
        "pattern": {
            "type": "string",
            "description": "Name pattern to search for (supports regex, case-insensitive)"
        }
    },
    "required": ["pattern"]
}


@server.list_tools()
async def list_tools() -> List[Tool]:
    return [
        Tool(
            name="set_pdb_file",
            description="Read a PDB file through DIA and make it the active dump (use this or load_dump first)",
            inputSchema={
                "type": "object",
                "properties": {
                    "pdb_path": {
                        "type": "string",
                        "description": "Absolute path to the .pdb file"
                    },
                    "file_prefix": {
                        "type": "string",
                        "description": "Optional: only keep symbols declared in source files starting with this prefix",
                        "default": ""
                    }
                },
                "required": ["pdb_path"]
            }
        ),
        Tool(
            name="load_dump",
            description="Load a JSON dump previously written by dump-pdb or write_dump",
            inputSchema={
                "type": "object",
                "properties": {
                    "json_path": {
                        "type": "string",
                        "description": "Path to the JSON dump"
                    }
                },
                "required": ["json_path"]
            }
        ),
        Tool(
            name="write_dump",
            description="Write the active dump to a JSON file",
            inputSchema={
                "type": "object",
                "properties": {
                    "output_path": {
                        "type": "string",
                        "description": "Optional: destination file. Defaults to the configured output file"
                    }
                },
                "required": []
            }
        ),
        Tool(
            name="search_classes",
            description="Search for classes and structs by name pattern (regex supported)",
            inputSchema=_PATTERN_SCHEMA
        ),
        Tool(
            name="search_enums",
            description="Search for enums by name pattern (regex supported)",
            inputSchema=_PATTERN_SCHEMA
        ),
        Tool(
            name="search_functions",
            description="Search for global functions, or methods of a class, by name pattern (regex supported)",
            inputSchema={
                "type": "object",
                "properties": {
                    "pattern": {
                        "type": "string",
                        "description": "Function name pattern to search for (supports regex)"
                    },
                    "class_name": {
                        "type": "string",
                        "description": "Optional: search only for methods within this class"
                    }
                },
                "required": ["pattern"]
            }
        ),
        Tool(
            name="search_symbols",
            description="Search for all symbols matching a pattern",
            inputSchema={
                "type": "object",
                "properties": {
                    "pattern": {
                        "type": "string",
                        "description": "Pattern to search for (supports regex)"
                    },
                    "symbol_types": {
                        "type": "array",
                        "items": {
                            "type": "string",
                            "enum": list(SYMBOL_TYPES)
                        },
                        "description": "Types of symbols to include. If not specified, includes all types"
                    }
                },
                "required": ["pattern"]
            }
        ),
        Tool(
            name="get_class_info",
            description="Get fields, methods and base classes of a class",
            inputSchema={
                "type": "object",
                "properties": {
                    "class_name": {
                        "type": "string",
                        "description": "Exact class name"
                    }
                },
                "required": ["class_name"]
            }
        ),
        Tool(
            name="get_enum_info",
            description="Get the values of an enum",
            inputSchema={
                "type": "object",
                "properties": {
                    "enum_name": {
                        "type": "string",
                        "description": "Exact enum name"
                    }
                },
                "required": ["enum_name"]
            }
        ),
        Tool(
            name="get_derived_classes",
            description="Get all classes that directly inherit from a given base class",
            inputSchema={
                "type": "object",
                "properties": {
                    "class_name": {
                        "type": "string",
                        "description": "Name of the base class"
                    }
                },
                "required": ["class_name"]
            }
        ),
        Tool(
            name="get_function_signature",
            description="Get signatures for global functions, or methods of a class, with the given name",
            inputSchema={
                "type": "object",
                "properties": {
                    "function_name": {
                        "type": "string",
                        "description": "Exact function name"
                    },
                    "class_name": {
                        "type": "string",
                        "description": "Optional: return method signatures from this class only"
                    }
                },
                "required": ["function_name"]
            }
        ),
        Tool(
            name="get_server_status",
            description="Get MCP server status including the active dump and its statistics",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": []
            }
        )
    ]


@server.call_tool()
async def call_tool(name: str, arguments: Dict[str, Any]) -> List[TextContent]:
    try:
        if name == "set_pdb_file":
            pdb_path = arguments["pdb_path"]
            file_prefix = arguments.get("file_prefix", "")
            stats = load_pdb(pdb_path, file_prefix)
            return _text(f"Loaded PDB: {pdb_path}\n{json.dumps(stats, indent=2)}")

        elif name == "load_dump":
            json_path = arguments["json_path"]
            if not os.path.exists(json_path):
                return _text(f"Error: File '{json_path}' does not exist")
            _install_document(load_document(json_path), json_path, {})
            return _text(f"Loaded dump: {json_path}\n{json.dumps(search_engine.get_stats(), indent=2)}")

        elif name == "get_server_status":
            status = {
                "loaded_from": loaded_from,
                "dump_loaded": document is not None
            }
            if search_engine is not None:
                status.update(search_engine.get_stats())
            status.update(dump_stats)
            return _text(status)

        # Every other tool needs an active dump
        if search_engine is None:
            return _text("Error: No PDB loaded. Please use 'set_pdb_file' or 'load_dump' first.")

        if name == "write_dump":
            output_path = arguments.get("output_path") or config.get_output_file()
            written = save_document(document, output_path, config.get_indent())
            return _text(f"PDB information has been dumped to {written}")

        elif name == "search_classes":
            return _text(search_engine.search_classes(arguments["pattern"]))

        elif name == "search_enums":
            return _text(search_engine.search_enums(arguments["pattern"]))

        elif name == "search_functions":
            class_name = arguments.get("class_name", None)
            return _text(search_engine.search_functions(arguments["pattern"], class_name))

        elif name == "search_symbols":
            symbol_types = arguments.get("symbol_types", None)
            return _text(search_engine.search_symbols(arguments["pattern"], symbol_types))

        elif name == "get_class_info":
            result = search_engine.get_class_info(arguments["class_name"])
            if result:
                return _text(result)
            return _text(f"Class '{arguments['class_name']}' not found")

        elif name == "get_enum_info":
            result = search_engine.get_enum_info(arguments["enum_name"])
            if result:
                return _text(result)
            return _text(f"Enum '{arguments['enum_name']}' not found")

        elif name == "get_derived_classes":
            return _text(search_engine.get_derived_classes(arguments["class_name"]))

        elif name == "get_function_signature":
            return _text(search_engine.get_function_signature(
                arguments["function_name"], arguments.get("class_name")))

        else:
            return _text(f"Unknown tool: {name}")

    except Exception as e:
        return _text(f"Error: {str(e)}")


async def main():
    from mcp.server.stdio import stdio_server

    # Preload a PDB if one is configured in the environment
    pdb_path = os.environ.get('PDB_FILE_PATH')
    if pdb_path:
        try:
            load_pdb(pdb_path, os.environ.get('PDB_FILE_PREFIX', ''))
        except LoadError as e:
            print(f"Could not preload {pdb_path}: {e}", file=sys.stderr)

    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
