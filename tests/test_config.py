"""
Configuration loading tests for pinreqs.
"""

import json

from pinreqs.cli_config import (
    GeneratorConfig,
    create_sample_config,
    get_config,
    load_config,
    reset_config,
    validate_config_values,
)


class TestConfigDefaults:
    """Test the built-in defaults."""

    def test_defaults(self):
        config = load_config()

        assert config.scan.source_suffix == ".py"
        assert config.scan.exclude_dirs == []
        assert config.package_manager.command == ["pip", "freeze"]
        assert config.output.output_file == "requirements.txt"
        assert config.logging.log_level == "WARNING"

    def test_defaults_are_valid(self):
        assert validate_config_values(GeneratorConfig()) == []

    def test_global_instance_is_cached(self):
        first = get_config()

        assert get_config() is first
        reset_config()
        assert get_config() is not first


class TestConfigFiles:
    """Test loading settings from config files."""

    def test_json_file_in_working_directory(self, isolated_environment):
        (isolated_environment / ".pinreqs.json").write_text(
            json.dumps({"output": {"output_file": "deps.txt"}})
        )

        config = load_config()

        assert config.output.output_file == "deps.txt"

    def test_yaml_file_in_working_directory(self, isolated_environment):
        (isolated_environment / ".pinreqs.yaml").write_text(
            "scan:\n  exclude_dirs:\n    - .venv\n    - build\n"
        )

        config = load_config()

        assert config.scan.exclude_dirs == [".venv", "build"]

    def test_pyproject_tool_table(self, isolated_environment):
        (isolated_environment / "pyproject.toml").write_text(
            '[project]\nname = "demo"\n\n'
            "[tool.pinreqs.package_manager]\n"
            'command = ["uv", "pip", "freeze"]\n'
        )

        config = load_config()

        assert config.package_manager.command == ["uv", "pip", "freeze"]

    def test_pyproject_without_tool_table_is_ignored(self, isolated_environment):
        (isolated_environment / "pyproject.toml").write_text('[project]\nname = "demo"\n')

        config = load_config()

        assert config.package_manager.command == ["pip", "freeze"]

    def test_user_config_in_home(self, tmp_path):
        user_dir = tmp_path / "home" / ".config" / "pinreqs"
        user_dir.mkdir(parents=True)
        (user_dir / "config.json").write_text(
            json.dumps({"logging": {"log_level": "INFO"}})
        )

        config = load_config()

        assert config.logging.log_level == "INFO"

    def test_explicit_path_bypasses_cache(self, temp_dir):
        load_config()
        config_file = temp_dir / "custom.json"
        config_file.write_text(json.dumps({"scan": {"source_suffix": ".pyi"}}))

        config = load_config(str(config_file))

        assert config.scan.source_suffix == ".pyi"

    def test_unknown_keys_are_ignored(self, isolated_environment):
        (isolated_environment / ".pinreqs.json").write_text(
            json.dumps({"scan": {"bogus": 1}, "extra_section": {}})
        )

        config = load_config()

        assert not hasattr(config.scan, "bogus")
        assert config.scan.source_suffix == ".py"

    def test_invalid_values_fall_back_to_defaults(self, isolated_environment):
        (isolated_environment / ".pinreqs.json").write_text(
            json.dumps(
                {
                    "package_manager": {"command": []},
                    "logging": {"log_level": "LOUD"},
                    "output": {"output_file": "ok.txt"},
                }
            )
        )

        config = load_config()

        assert config.package_manager.command == ["pip", "freeze"]
        assert config.logging.log_level == "WARNING"
        assert config.output.output_file == "ok.txt"

    def test_invalid_logging_and_output_values_fall_back(self, isolated_environment):
        (isolated_environment / ".pinreqs.json").write_text(
            json.dumps(
                {
                    "logging": {"log_format": "plain", "enable_json": "yes"},
                    "output": {"show_contents": "no"},
                }
            )
        )

        config = load_config()

        assert config.logging.log_format == GeneratorConfig().logging.log_format
        assert config.logging.enable_json is False
        assert config.output.show_contents is True

    def test_log_format_errors_are_reported(self):
        config = GeneratorConfig()
        config.logging.log_format = "%(asctime"

        errors = validate_config_values(config)

        assert len(errors) == 1
        assert errors[0].startswith("logging.log_format")

    def test_pyproject_is_preferred_over_user_config(self, isolated_environment, tmp_path):
        user_dir = tmp_path / "home" / ".config" / "pinreqs"
        user_dir.mkdir(parents=True)
        (user_dir / "config.json").write_text(
            json.dumps({"output": {"output_file": "from-home.txt"}})
        )
        (isolated_environment / "pyproject.toml").write_text(
            '[tool.pinreqs.output]\noutput_file = "from-pyproject.txt"\n'
        )

        config = load_config()

        assert config.output.output_file == "from-pyproject.txt"

    def test_malformed_file_is_skipped(self, isolated_environment):
        (isolated_environment / ".pinreqs.json").write_text("{not json")

        config = load_config()

        assert config.output.output_file == "requirements.txt"


class TestEnvironmentOverrides:
    """Test environment variable overrides."""

    def test_environment_beats_file(self, isolated_environment, monkeypatch):
        (isolated_environment / ".pinreqs.json").write_text(
            json.dumps({"logging": {"log_level": "ERROR"}})
        )
        monkeypatch.setenv("PINREQS_LOG_LEVEL", "debug")
        monkeypatch.setenv("PINREQS_PACKAGE_MANAGER", "python -m pip freeze")
        monkeypatch.setenv("PINREQS_SOURCE_SUFFIX", ".pyw")

        config = load_config()

        assert config.logging.log_level == "DEBUG"
        assert config.package_manager.command == ["python", "-m", "pip", "freeze"]
        assert config.scan.source_suffix == ".pyw"


class TestSampleConfig:
    """Test the generated sample configuration."""

    def test_sample_round_trips_through_loader(self, isolated_environment):
        sample = create_sample_config()
        (isolated_environment / ".pinreqs.json").write_text(sample)

        config = load_config()

        assert config.scan.exclude_dirs == json.loads(sample)["scan"]["exclude_dirs"]
        assert validate_config_values(config) == []
