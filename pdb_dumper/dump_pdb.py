#!/usr/bin/env python3
"""
Dump the types, functions and globals of a PDB file to JSON.

Usage: dump-pdb <path-to-pdb-file> [file-prefix]
"""

import math
import os
import sys
import time
from typing import List, Optional

from .debug_symbols import LoadError
from .dia_source import open_pdb
from .output_writer import save_document
from .pdb_analyzer import dump_global_scope
from .pdb_dumper_config import PdbDumperConfig

USAGE = "Usage: dump-pdb <path-to-pdb-file> [file-prefix]"


def _set_console_title(title: str):
    if sys.platform == "win32":
        import ctypes
        ctypes.windll.kernel32.SetConsoleTitleW(title)


class ProgressReporter:
    """Reports how far the symbol walk has got, at one decimal of a percent"""

    def __init__(self):
        # Check if stderr is a terminal (for proper progress display)
        self.is_terminal = (hasattr(sys.stderr, 'isatty') and sys.stderr.isatty() and
                            not os.environ.get('MCP_SESSION_ID'))
        self.last_percentage = -1.0
        self.last_report_time = 0.0

    def __call__(self, processed: int, total: int):
        if total <= 0:
            return
        percentage = math.floor(processed * 100.0 / total * 10.0 + 0.5) / 10.0
        if percentage == self.last_percentage:
            return
        self.last_percentage = percentage

        _set_console_title(f"DumpPDB - Processing ({percentage:.1f}%)")

        if self.is_terminal:
            # \033[2K clears the entire line, \r returns to start
            print(f"\033[2K\rProgress: {processed}/{total} symbols ({percentage:.1f}%)",
                  end='', file=sys.stderr, flush=True)
            return

        # Redirected output: one line every 5 seconds and at the end
        current_time = time.time()
        if current_time - self.last_report_time > 5.0 or processed == total:
            print(f"Progress: {processed}/{total} symbols ({percentage:.1f}%)", file=sys.stderr, flush=True)
            self.last_report_time = current_time

    def finish(self):
        if self.is_terminal and self.last_percentage >= 0:
            print("", file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print(USAGE, file=sys.stderr)
        return 1

    pdb_path = args[0]
    config = PdbDumperConfig()
    # A prefix on the command line wins over the configured one
    file_prefix = args[1] if len(args) >= 2 else config.get_source_file_prefix()

    progress = ProgressReporter() if config.get_show_progress() else None
    start_time = time.time()

    session = None
    try:
        session = open_pdb(pdb_path, config.get_dia_dll())
        document = dump_global_scope(session.global_scope, file_prefix, progress)
    except LoadError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        if progress:
            progress.finish()
        if session is not None:
            session.close()

    try:
        output_path = save_document(document, config.get_output_file(), config.get_indent())
    except OSError as e:
        print(f"Error writing {config.get_output_file()}: {e}", file=sys.stderr)
        return 1

    _set_console_title("DumpPDB - Complete")
    print(f"Dump complete in {time.time() - start_time:.2f}s", file=sys.stderr)
    print(f"PDB information has been dumped to {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
