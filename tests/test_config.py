"""Tests for chain_ping.config — YAML configuration loading."""

import logging
import textwrap

import pytest

from chain_ping.config import ChainPingConfig, ConfigError, load_config


class TestChainPingConfigDefaults:
    """ChainPingConfig should provide sensible defaults for every field."""

    def test_endpoints_default_empty(self) -> None:
        assert ChainPingConfig().endpoints == []

    def test_endpoints_not_shared(self) -> None:
        assert ChainPingConfig().endpoints is not ChainPingConfig().endpoints

    def test_pings_default(self) -> None:
        assert ChainPingConfig().pings == 1

    def test_timeout_default(self) -> None:
        assert ChainPingConfig().timeout_secs == 10.0

    def test_output_format_default(self) -> None:
        assert ChainPingConfig().output_format == "table"


class TestLoadConfigExplicitPath:
    """load_config(path=...) with an explicit file path."""

    def test_full_config(self, tmp_path: pytest.TempPathFactory) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text(
            textwrap.dedent("""\
                endpoints:
                  - https://eth.llamarpc.com
                  - https://rpc.ankr.com/eth
                pings: 5
                timeout_secs: 2.5
                output_format: json
            """),
            encoding="utf-8",
        )

        cfg = load_config(cfg_file)

        assert cfg.endpoints == ["https://eth.llamarpc.com", "https://rpc.ankr.com/eth"]
        assert cfg.pings == 5
        assert cfg.timeout_secs == 2.5
        assert cfg.output_format == "json"

    def test_partial_config_uses_defaults(
        self, tmp_path: pytest.TempPathFactory
    ) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("pings: 3\n", encoding="utf-8")

        cfg = load_config(cfg_file)

        assert cfg.pings == 3
        assert cfg.endpoints == []
        assert cfg.timeout_secs == 10.0
        assert cfg.output_format == "table"

    def test_single_endpoint_string(self, tmp_path: pytest.TempPathFactory) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("endpoints: http://localhost:8545\n", encoding="utf-8")

        assert load_config(cfg_file).endpoints == ["http://localhost:8545"]

    def test_integer_timeout_becomes_float(
        self, tmp_path: pytest.TempPathFactory
    ) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("timeout_secs: 3\n", encoding="utf-8")

        cfg = load_config(cfg_file)

        assert cfg.timeout_secs == 3.0
        assert isinstance(cfg.timeout_secs, float)

    def test_format_is_case_insensitive(
        self, tmp_path: pytest.TempPathFactory
    ) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("output_format: JSON\n", encoding="utf-8")

        assert load_config(cfg_file).output_format == "json"

    def test_empty_file_returns_defaults(
        self, tmp_path: pytest.TempPathFactory
    ) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("", encoding="utf-8")

        assert load_config(cfg_file) == ChainPingConfig()

    def test_unknown_keys_are_ignored(
        self, tmp_path: pytest.TempPathFactory, caplog: pytest.LogCaptureFixture
    ) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text(
            textwrap.dedent("""\
                pings: 2
                api_key: secret
            """),
            encoding="utf-8",
        )

        with caplog.at_level(logging.WARNING, logger="chain_ping.config"):
            cfg = load_config(cfg_file)

        assert cfg.pings == 2
        assert "api_key" in caplog.text

    def test_null_values_keep_defaults(
        self, tmp_path: pytest.TempPathFactory
    ) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("pings:\ntimeout_secs: ~\n", encoding="utf-8")

        assert load_config(cfg_file) == ChainPingConfig()

    def test_accepts_string_path(self, tmp_path: pytest.TempPathFactory) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("pings: 4\n", encoding="utf-8")

        assert load_config(str(cfg_file)).pings == 4


class TestLoadConfigMissingFile:
    """Behavior when the config file doesn't exist."""

    def test_explicit_path_not_found_raises(
        self, tmp_path: pytest.TempPathFactory
    ) -> None:
        missing = tmp_path / "nonexistent.yaml"

        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_config(missing)

    def test_no_default_file_returns_defaults(
        self, tmp_path: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        import chain_ping.config as config_mod

        monkeypatch.setattr(
            config_mod, "DEFAULT_CONFIG_PATH", tmp_path / "nope" / "config.yaml"
        )

        assert load_config() == ChainPingConfig()

    def test_default_file_is_used(
        self, tmp_path: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        import chain_ping.config as config_mod

        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("pings: 9\n", encoding="utf-8")
        monkeypatch.setattr(config_mod, "DEFAULT_CONFIG_PATH", cfg_file)

        assert load_config().pings == 9


class TestLoadConfigInvalid:
    """load_config should raise ConfigError on malformed files."""

    def test_invalid_yaml_raises_config_error(
        self, tmp_path: pytest.TempPathFactory
    ) -> None:
        cfg_file = tmp_path / "bad.yaml"
        cfg_file.write_text(":\n  - :\n    bad: [", encoding="utf-8")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(cfg_file)

    def test_non_mapping_top_level_raises(
        self, tmp_path: pytest.TempPathFactory
    ) -> None:
        cfg_file = tmp_path / "list.yaml"
        cfg_file.write_text("- one\n- two\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_config(cfg_file)

    @pytest.mark.parametrize("value", ["-1", "two", "true", "1.5"])
    def test_bad_pings(self, tmp_path: pytest.TempPathFactory, value: str) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text(f"pings: {value}\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="pings"):
            load_config(cfg_file)

    @pytest.mark.parametrize("value", ["0", "-2.5", "soon", ".inf"])
    def test_bad_timeout(self, tmp_path: pytest.TempPathFactory, value: str) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text(f"timeout_secs: {value}\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="timeout_secs"):
            load_config(cfg_file)

    def test_bad_endpoints(self, tmp_path: pytest.TempPathFactory) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("endpoints: {a: 1}\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="endpoints"):
            load_config(cfg_file)

    def test_bad_format(self, tmp_path: pytest.TempPathFactory) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("output_format: xml\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="output_format"):
            load_config(cfg_file)
