"""
Config System (foundation/config.py)

Tests Config, ConfigLoader, ConfigServiceProvider.
"""

import json
import os

import pytest

from orchestr.foundation import Config, ConfigError, ConfigLoader, ConfigServiceProvider


# ============================================================================
# Config repository
# ============================================================================

class TestConfig:

    def test_dot_notation_get(self):
        config = Config({"database": {"connections": {"sqlite": {"path": ":memory:"}}}})
        assert config.get("database.connections.sqlite.path") == ":memory:"
        assert config.get("database.connections.mysql", "none") == "none"
        assert config.get("database.connections.sqlite.path.deeper") is None

    def test_has(self):
        config = Config({"app": {"debug": False, "name": None}})
        assert config.has("app.debug")
        assert config.has("app.name")
        assert not config.has("app.missing")

    def test_set_creates_nested(self):
        config = Config()
        config.set("cache.stores.file.path", "/tmp/cache")
        assert config.all() == {"cache": {"stores": {"file": {"path": "/tmp/cache"}}}}

    def test_set_overwrites_scalar_parent(self):
        config = Config({"cache": "file"})
        config.set("cache.default", "redis")
        assert config.get("cache") == {"default": "redis"}

    def test_set_many(self):
        config = Config()
        config.set({"app.name": "shop", "app.env": "local"})
        assert config.get("app") == {"name": "shop", "env": "local"}

    def test_push_and_prepend(self):
        config = Config({"app": {"providers": ["b"]}})
        config.push("app.providers", "c")
        config.prepend("app.providers", "a")
        assert config.get("app.providers") == ["a", "b", "c"]

    def test_push_to_missing_key(self):
        config = Config()
        config.push("app.providers", "a")
        assert config.get("app.providers") == ["a"]

    def test_mapping_access(self):
        config = Config({"app": {"name": "shop"}})
        assert config["app.name"] == "shop"
        assert "app.name" in config
        assert "app.version" not in config
        with pytest.raises(KeyError):
            config["app.version"]

        config["app.version"] = "1.0"
        assert config.get("app.version") == "1.0"


# ============================================================================
# ConfigLoader
# ============================================================================

class TestConfigLoader:

    def test_loads_yaml_and_json(self, tmp_path):
        (tmp_path / "app.yaml").write_text("name: shop\ndebug: true\n")
        (tmp_path / "cache.json").write_text(json.dumps({"default": "file"}))
        (tmp_path / "notes.txt").write_text("ignored")

        config = ConfigLoader.load(tmp_path)

        assert config.get("app.name") == "shop"
        assert config.get("app.debug") is True
        assert config.get("cache.default") == "file"
        assert not config.has("notes")

    def test_empty_file_skipped(self, tmp_path):
        (tmp_path / "empty.yml").write_text("")
        assert ConfigLoader.load(tmp_path).all() == {}

    def test_missing_directory(self, tmp_path):
        assert ConfigLoader.load(tmp_path / "missing").all() == {}

    def test_overrides_deep_merge(self, tmp_path):
        (tmp_path / "database.yaml").write_text("default: sqlite\nconnections:\n  sqlite:\n    path: db.sqlite\n")
        config = ConfigLoader.load(
            tmp_path,
            overrides={"database": {"connections": {"sqlite": {"path": ":memory:"}}}},
        )
        assert config.get("database.default") == "sqlite"
        assert config.get("database.connections.sqlite.path") == ":memory:"

    def test_invalid_yaml(self, tmp_path):
        (tmp_path / "app.yaml").write_text("name: [unclosed\n")
        with pytest.raises(ConfigError) as exc:
            ConfigLoader.load(tmp_path)
        assert exc.value.code == "CONFIG_INVALID"
        assert exc.value.metadata["source"].endswith("app.yaml")

    def test_invalid_json(self, tmp_path):
        (tmp_path / "app.json").write_text("{not json")
        with pytest.raises(ConfigError):
            ConfigLoader.load(tmp_path)

    def test_top_level_must_be_mapping(self, tmp_path):
        (tmp_path / "app.yaml").write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            ConfigLoader.load(tmp_path)

    def test_env_file_loaded(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ORCHESTR_TEST_GREETING", "placeholder")
        monkeypatch.delenv("ORCHESTR_TEST_GREETING")
        env_file = tmp_path / ".env"
        env_file.write_text("ORCHESTR_TEST_GREETING=hello\n")

        ConfigLoader.load(env_file=env_file)

        assert os.environ["ORCHESTR_TEST_GREETING"] == "hello"

    def test_env_file_does_not_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ORCHESTR_TEST_GREETING", "original")
        env_file = tmp_path / ".env"
        env_file.write_text("ORCHESTR_TEST_GREETING=from-file\n")

        ConfigLoader.load(env_file=env_file)

        assert os.environ["ORCHESTR_TEST_GREETING"] == "original"

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("SHOP_CACHE__DEFAULT", "redis")
        monkeypatch.setenv("SHOP_CACHE__TTL", "60")
        monkeypatch.setenv("SHOP_APP__DEBUG", "false")
        monkeypatch.setenv("SHOP_APP__HOSTS", '["a", "b"]')

        config = ConfigLoader.load(env_prefix="SHOP_")

        assert config.get("cache.default") == "redis"
        assert config.get("cache.ttl") == 60
        assert config.get("app.debug") is False
        assert config.get("app.hosts") == ["a", "b"]


# ============================================================================
# ConfigServiceProvider
# ============================================================================

class TestConfigServiceProvider:

    def test_binds_items(self, app):
        app.register(ConfigServiceProvider(app, {"app": {"name": "shop"}}))
        config = app.make("config")
        assert isinstance(config, Config)
        assert config is app.make("config")
        assert app.make(Config) is config
        assert config.get("app.name") == "shop"

    def test_loads_from_config_path(self, app):
        os.makedirs(app.config_path())
        with open(app.config_path("app.yaml"), "w") as f:
            f.write("name: from-file\n")

        app.register(ConfigServiceProvider)
        assert app.make("config").get("app.name") == "from-file"

    def test_provides(self, app):
        provider = ConfigServiceProvider(app)
        assert provider.provides() == ["config", Config]
