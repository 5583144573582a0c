"""PDB to JSON dumper and MCP symbol server."""
