"""Tests for YAML configuration loading."""
from pathlib import Path

from pkg.insighthub.config import Config


class TestConfig:

    def test_defaults_when_file_missing(self, tmp_path, monkeypatch):
        monkeypatch.delenv("INSIGHTHUB_DATA", raising=False)
        cfg = Config.load(str(tmp_path / "missing.yaml"))
        assert cfg.port == 3000
        assert cfg.host == "127.0.0.1"
        assert cfg.cors_origins == ["*"]
        assert cfg.data_path == str(Path("~/.local/share/insighthub/data.json").expanduser())

    def test_yaml_values_and_unknown_keys(self, tmp_path, monkeypatch):
        monkeypatch.delenv("INSIGHTHUB_DATA", raising=False)
        path = tmp_path / "config.yaml"
        path.write_text(
            "port: 8080\n"
            "data_path: /srv/insighthub/data.json\n"
            "cors_origins: [http://localhost:5173]\n"
            "something_else: 1\n"
        )
        cfg = Config.load(str(path))
        assert cfg.port == 8080
        assert cfg.data_path == "/srv/insighthub/data.json"
        assert cfg.cors_origins == ["http://localhost:5173"]

    def test_env_data_path_wins(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text("data_path: /srv/a.json\n")
        monkeypatch.setenv("INSIGHTHUB_DATA", str(tmp_path / "b.json"))
        assert Config.load(str(path)).data_path == str(tmp_path / "b.json")

    def test_config_path_from_env(self, tmp_path, monkeypatch):
        monkeypatch.delenv("INSIGHTHUB_DATA", raising=False)
        path = tmp_path / "alt.yaml"
        path.write_text("port: 9000\n")
        monkeypatch.setenv("INSIGHTHUB_CONFIG", str(path))
        assert Config.load().port == 9000

    def test_broken_yaml_falls_back(self, tmp_path, monkeypatch):
        monkeypatch.delenv("INSIGHTHUB_DATA", raising=False)
        path = tmp_path / "config.yaml"
        path.write_text("port: [unclosed\n")
        assert Config.load(str(path)).port == 3000
