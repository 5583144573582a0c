import json

from pdb_dumper.pdb_dumper_config import PdbDumperConfig


class TestPdbDumperConfig:
    def test_defaults_without_config_file(self, tmp_path):
        config = PdbDumperConfig(tmp_path)
        assert config.get_output_file() == "pdb_dump.json"
        assert config.get_indent() == 2
        assert config.get_source_file_prefix() == ""
        assert config.get_show_progress() is True
        assert config.get_dia_dll() == "msdia140.dll"

    def test_user_values_merge_over_defaults(self, tmp_path):
        (tmp_path / PdbDumperConfig.CONFIG_FILENAME).write_text(
            json.dumps({"output_file": "out/game.json", "source_file_prefix": "src/"})
        )
        config = PdbDumperConfig(tmp_path)
        assert config.get_output_file() == "out/game.json"
        assert config.get_source_file_prefix() == "src/"
        assert config.get_indent() == 2

    def test_invalid_file_falls_back_to_defaults(self, tmp_path, capsys):
        (tmp_path / PdbDumperConfig.CONFIG_FILENAME).write_text("{not json")
        config = PdbDumperConfig(tmp_path)
        assert config.config == PdbDumperConfig.DEFAULT_CONFIG
        assert "Using default configuration" in capsys.readouterr().err

    def test_non_object_file_falls_back_to_defaults(self, tmp_path):
        (tmp_path / PdbDumperConfig.CONFIG_FILENAME).write_text("[1, 2]")
        assert PdbDumperConfig(tmp_path).config == PdbDumperConfig.DEFAULT_CONFIG

    def test_create_example_config(self, tmp_path):
        config = PdbDumperConfig(tmp_path)
        config.create_example_config()
        reloaded = PdbDumperConfig(tmp_path)
        assert reloaded.get_output_file() == "pdb_dump.json"
        assert reloaded.get_source_file_prefix().startswith("C:")
