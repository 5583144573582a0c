"""Configuration loader for PDB dumper settings."""

import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional


class PdbDumperConfig:
    """Loads and manages configuration for the PDB dumper."""

    CONFIG_FILENAME = "pdb-dumper-config.json"

    DEFAULT_CONFIG = {
        "output_file": "pdb_dump.json",
        "indent": 2,
        "source_file_prefix": "",
        "show_progress": True,
        "dia_dll": "msdia140.dll"
    }

    def __init__(self, config_dir: Optional[Path] = None):
        # Looked up in the directory the dumper is run from unless told otherwise
        self.config_dir = Path(config_dir) if config_dir else Path.cwd()
        self.config_path = self.config_dir / self.CONFIG_FILENAME
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from file or use defaults."""
        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    user_config = json.load(f)
                if not isinstance(user_config, dict):
                    raise ValueError("top-level value must be an object")
                # Merge with defaults
                config = self.DEFAULT_CONFIG.copy()
                config.update(user_config)
                print(f"Loaded dumper config from: {self.config_path}", file=sys.stderr)
                return config
            except (OSError, ValueError) as e:
                print(f"Error loading config from {self.config_path}: {e}", file=sys.stderr)
                print("Using default configuration", file=sys.stderr)

        return self.DEFAULT_CONFIG.copy()

    def get_output_file(self) -> str:
        """Get the path the JSON dump is written to."""
        return self.config.get("output_file", self.DEFAULT_CONFIG["output_file"])

    def get_indent(self) -> int:
        return self.config.get("indent", self.DEFAULT_CONFIG["indent"])

    def get_source_file_prefix(self) -> str:
        """Get the default source file prefix filter."""
        return self.config.get("source_file_prefix", self.DEFAULT_CONFIG["source_file_prefix"])

    def get_show_progress(self) -> bool:
        return self.config.get("show_progress", self.DEFAULT_CONFIG["show_progress"])

    def get_dia_dll(self) -> str:
        """Get the DIA DLL whose type library is loaded."""
        return self.config.get("dia_dll", self.DEFAULT_CONFIG["dia_dll"])

    def create_example_config(self) -> None:
        """Create an example configuration file."""
        example_config = {
            "output_file": "pdb_dump.json",
            "indent": 2,
            "source_file_prefix": "C:\\Projects\\MyGame\\Source\\",
            "show_progress": True,
            "dia_dll": "msdia140.dll",
            "_comment": "Place this pdb-dumper-config.json file in the directory you run dump-pdb from"
        }

        with open(self.config_path, 'w') as f:
            json.dump(example_config, f, indent=2)

        print(f"Created example config at: {self.config_path}", file=sys.stderr)
