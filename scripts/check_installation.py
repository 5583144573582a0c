#!/usr/bin/env python3
"""
Check that the PDB dumper can run on this machine
"""
import os
import subprocess
import sys


def check_imports():
    """Check that all required packages can be imported"""
    print("Checking package imports...")

    try:
        import mcp
        print("✓ MCP package imported successfully")
    except ImportError as e:
        print(f"✗ Failed to import MCP: {e}")
        return False

    if sys.platform != "win32":
        print("✗ comtypes and the DIA SDK are only available on Windows")
        return False

    try:
        import comtypes.client
        print("✓ comtypes imported successfully")
    except ImportError as e:
        print(f"✗ Failed to import comtypes: {e}")
        return False

    return True


def check_dia_library(dia_dll="msdia140.dll"):
    """Check that the DIA type library loads and DiaSource is registered"""
    print(f"\nChecking DIA library ({dia_dll})...")

    import comtypes
    import comtypes.client

    try:
        msdia = comtypes.client.GetModule(dia_dll)
        print("✓ DIA type library loaded")
        comtypes.client.CreateObject(msdia.DiaSource, interface=msdia.IDiaDataSource)
        print("✓ DiaSource created")
        return True
    except (OSError, comtypes.COMError) as e:
        print(f"✗ Failed to load DIA: {e}")
        print("  Register it with: regsvr32 msdia140.dll (ships with Visual Studio under DIA SDK\\bin)")
        return False


def check_server_import():
    """Check that the MCP server can be imported"""
    print("\nChecking MCP server import...")

    parent_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    result = subprocess.run(
        [sys.executable, "-c", "from pdb_dumper import pdb_mcp_server; print('SUCCESS')"],
        capture_output=True,
        text=True,
        cwd=parent_dir
    )

    if result.returncode == 0 and "SUCCESS" in result.stdout:
        print("✓ MCP server module imported successfully")
        return True

    error_msg = result.stderr.strip() if result.stderr else "Unknown error"
    print(f"✗ Failed to import MCP server: {error_msg}")
    return False


def main():
    print("PDB Dumper Installation Check")
    print("=" * 40)

    all_passed = check_imports()
    if all_passed and not check_dia_library():
        all_passed = False
    if not check_server_import():
        all_passed = False

    print("\n" + "=" * 40)
    if all_passed:
        print("✓ All checks passed! Run: dump-pdb <path-to-pdb-file> [file-prefix]")
        return 0

    print("✗ Some checks failed. Please check the errors above.")
    return 1


if __name__ == "__main__":
    sys.exit(main())
