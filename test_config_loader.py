"""
Config Loader Test
==================

End-to-end loading: template ladder, deep merge, environment overrides and
the typed accessors on top of the merged tree.
"""

import logging
from datetime import datetime, timedelta
from pathlib import Path

import pytest
import pytz

from confladder.config import (
    Config, DirectoryReadError, Environment, FatalConfigError, FileReadError,
    InvalidOverrideError, NotInitializedError, ParseError, PathNotFoundError,
    PathSyntaxError, TypeMismatchError,
)
from confladder.config.parsers import parse_toml, parse_yaml, serialize

LADDER = [
    "default",
    "default-inst1",
    "production",
    "production-inst1",
    "service1",
    "service1-inst1",
    "service1-production",
    "service1-production-inst1",
    "service1.example.com",
    "service1.example.com-inst1",
    "service1.example.com-production",
    "service1.example.com-production-inst1",
    "local",
    "local-inst1",
    "local-production",
    "local-production-inst1",
]


def load(config_dir, **options):
    options.setdefault("hostname", "testbox")
    return Config(config_dir, **options).initialize()


@pytest.fixture
def app_env_dir(write_config):
    write_config("default.yml", """
        root:
          prop1: foo
          prop2: 100
          prop3: false
    """)
    write_config("production.yml", """
        root:
          prop2: 200
    """)


def test_deployment_from_environment_variable(config_dir, app_env_dir, monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")

    config = load(config_dir, deployment_env="APP_ENV")

    assert config.get_string("root.prop1") == "foo"
    assert config.get_int("root.prop2") == 200
    assert config.get_bool("root.prop3") is False
    assert [f.basename for f in config.loaded_files] == ["default", "production"]


def test_unset_deployment_variable_falls_back_to_development(config_dir, app_env_dir):
    config = load(config_dir, deployment_env="APP_ENV", environ={})

    assert config.environment.deployment == "development"
    assert config.get_int("root.prop2") == 100


def test_full_ladder_merges_most_specific_last(config_dir, write_config):
    for position, basename in enumerate(LADDER, start=1):
        # File N sets keys p01..pNN, so key pK ends up owned by the last file that sets it
        keys = "\n".join(f"p{k:02d}: {basename}" for k in range(1, position + 1))
        write_config(f"{basename}.yml", keys + "\n")

    config = load(config_dir, deployment="production", instance="inst1", hostname="service1.example.com")

    assert [f.basename for f in config.loaded_files] == LADDER
    for k in range(1, len(LADDER) + 1):
        assert config.get_string(f"p{k:02d}") == LADDER[-1]


def test_full_ladder_each_file_wins_its_own_key(config_dir, write_config):
    for position, basename in enumerate(LADDER, start=1):
        # File N sets keys pNN..p16, so key pK is owned by file K
        keys = "\n".join(f"p{k:02d}: {basename}" for k in range(position, len(LADDER) + 1))
        write_config(f"{basename}.yml", keys + "\n")

    config = load(config_dir, deployment="production", instance="inst1", hostname="service1.example.com")

    for k, basename in enumerate(LADDER, start=1):
        assert config.get(f"p{k:02d}") == basename


def test_default_only_with_and_without_instance(config_dir, write_config):
    write_config("default.yml", "name: base\n")
    write_config("default-inst1.yml", "name: inst1\n")

    assert load(config_dir).get("name") == "base"
    assert load(config_dir, instance="inst1").get("name") == "inst1"


def test_empty_directory_gives_empty_tree(config_dir):
    config = load(config_dir)

    assert config.is_initialized
    assert config.as_dict() == {}
    assert config.loaded_files == []


def test_unrelated_files_are_ignored(config_dir, write_config):
    write_config("default.yml", "a: 1\n")
    write_config("staging.yml", "a: 2\n")
    write_config("README.md", "# not config\n")

    assert load(config_dir, deployment="production").get("a") == 1


def test_mixed_formats(config_dir, write_config):
    write_config("default.toml", """
        [server]
        port = 8080
        hosts = ["a", "b"]
    """)
    write_config("production.json5", """
        // comments are allowed
        {server: {port: 9090,},}
    """)
    write_config("local.hjson", """
        {
          server: {
            name: edge
          }
        }
    """)

    config = load(config_dir, deployment="production")

    assert config.get_int("server.port") == 9090
    assert config.get_string_list("server.hosts") == ["a", "b"]
    assert config.get_string("server.name") == "edge"


def test_env_file_overrides_with_string_values(config_dir, write_config):
    write_config("default.yml", """
        server:
          port: 8080
          debug: false
          tags: [a, b]
    """)
    write_config("env.yml", """
        server:
          port: SERVER_PORT
          debug: SERVER_DEBUG
          tags:
            - TAG_0
    """)

    config = load(config_dir, environ={"SERVER_PORT": "9000", "SERVER_DEBUG": "yes"})

    assert config.get("server.port") == "9000"
    assert config.get_int("server.port") == 9000
    assert config.get_bool("server.debug") is True
    assert config.get("server.tags") == ["a", "b"]
    assert config.get_string("env", default="absent") == "absent"


def test_env_file_is_not_merged_as_a_layer(config_dir, write_config):
    write_config("default.yml", "a: 1\n")
    write_config("env.yml", "a: A_VAR\n")

    assert load(config_dir, environ={}).as_dict() == {"a": 1}


def test_override_of_missing_container_aborts_initialize(config_dir, write_config):
    write_config("default.yml", "a: 1\n")
    write_config("env.yml", "database:\n  host: DB_HOST\n")

    with pytest.raises(PathNotFoundError):
        load(config_dir, environ={"DB_HOST": "db"})


def test_non_string_override_leaf_aborts_initialize(config_dir, write_config):
    write_config("default.yml", "a: 1\n")
    write_config("env.yml", "a: 5\n")

    with pytest.raises(InvalidOverrideError):
        load(config_dir, environ={})


def test_parse_error_names_the_file(config_dir, write_config, caplog):
    write_config("default.yml", "a: 1\n")
    bad = write_config("production.json", "{not json")

    with caplog.at_level(logging.ERROR):
        with pytest.raises(ParseError) as excinfo:
            load(config_dir, deployment="production")

    assert excinfo.value.path == bad
    assert "production.json" in str(excinfo.value)
    assert "Configuration initialization failed" in caplog.text


def test_non_mapping_document_is_a_parse_error(config_dir, write_config):
    write_config("default.yml", "- just\n- a list\n")

    with pytest.raises(ParseError):
        load(config_dir)


def test_file_read_error(config_dir, write_config, monkeypatch):
    write_config("default.yml", "a: 1\n")

    def refuse(self):
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(Path, "read_bytes", refuse)

    with pytest.raises(FileReadError) as excinfo:
        load(config_dir)
    assert excinfo.value.path.name == "default.yml"
    assert isinstance(excinfo.value.cause, PermissionError)


def test_missing_directory(tmp_path):
    with pytest.raises(DirectoryReadError):
        load(tmp_path / "nope")


def test_failed_reinitialize_keeps_previous_tree(config_dir, write_config):
    write_config("default.yml", "a: 1\n")
    config = load(config_dir)

    write_config("default.yml", "a: [unclosed\n")
    with pytest.raises(ParseError):
        config.initialize()

    assert config.get("a") == 1
    assert config.loaded_files[0].basename == "default"


def test_reinitialize_picks_up_changes(config_dir, write_config):
    write_config("default.yml", "a: 1\n")
    config = load(config_dir)

    write_config("default.yml", "a: 2\n")
    assert config.initialize().get("a") == 2


def test_accessors_before_initialize(config_dir):
    config = Config(config_dir, hostname="testbox")

    assert not config.is_initialized
    with pytest.raises(NotInitializedError):
        config.get("a")
    with pytest.raises(NotInitializedError):
        config.as_dict()
    with pytest.raises(FatalConfigError):
        config.must_get_string("a")


@pytest.fixture
def typed_config(config_dir, write_config):
    write_config("default.yml", """
        name: api
        port: 8080
        big: 5000000000
        negative: -1
        ratio: 0.75
        enabled: true
        started: 1635565664
        timeout: 10h
        ids: [1, 2, 3]
        names: [a, b]
        labels:
          team: core
          tier: 1
        servers:
          - host: a
            port: 1
          - host: b
            port: 2
        nothing: null
    """)
    return load(config_dir)


def test_typed_getters(typed_config):
    config = typed_config

    assert config.get_string("name") == "api"
    assert config.get_string("port") == "8080"
    assert config.get_int("port") == 8080
    assert config.get_int32("port") == 8080
    assert config.get_int64("big") == 5000000000
    assert config.get_uint("port") == 8080
    assert config.get_uint32("port") == 8080
    assert config.get_uint64("big") == 5000000000
    assert config.get_float("ratio") == 0.75
    assert config.get_float("port") == 8080.0
    assert config.get_bool("enabled") is True
    assert config.get_time("started") == datetime(2021, 10, 30, 3, 47, 44, tzinfo=pytz.utc)
    assert config.get_duration("timeout") == timedelta(hours=10)
    assert config.get_int_list("ids") == [1, 2, 3]
    assert config.get_string_list("names") == ["a", "b"]
    assert config.get_string_map("labels") == {"team": "core", "tier": 1}
    assert config.get_string("servers[1].host") == "b"
    assert config.get_int("$.servers[0].port") == 1
    assert config.get("nothing") is None
    assert config.get_string("nothing") == ""


def test_type_mismatches(typed_config):
    with pytest.raises(TypeMismatchError):
        typed_config.get_int("name")
    with pytest.raises(TypeMismatchError):
        typed_config.get_int32("big")
    with pytest.raises(TypeMismatchError):
        typed_config.get_uint("negative")
    with pytest.raises(TypeMismatchError):
        typed_config.get_bool("port")
    with pytest.raises(TypeMismatchError):
        typed_config.get_string_map("names")


def test_missing_paths_and_defaults(typed_config):
    with pytest.raises(PathNotFoundError):
        typed_config.get("missing.key")
    with pytest.raises(PathNotFoundError):
        typed_config.get_int("servers[5].port")
    with pytest.raises(PathSyntaxError):
        typed_config.get("servers[")

    assert typed_config.get_int("missing", default=3) == 3
    assert typed_config.get("missing", default=None) is None
    # default only covers missing paths, not bad values
    with pytest.raises(TypeMismatchError):
        typed_config.get_int("name", default=3)


def test_contains(typed_config):
    assert "servers[1].host" in typed_config
    assert "labels.team" in typed_config
    assert "servers[2]" not in typed_config


def test_must_getters(typed_config, caplog):
    assert typed_config.must_get_int("port") == 8080
    assert typed_config.must_get_duration("timeout") == timedelta(hours=10)
    assert typed_config.must_get("labels") == {"team": "core", "tier": 1}

    with caplog.at_level(logging.CRITICAL):
        with pytest.raises(FatalConfigError) as excinfo:
            typed_config.must_get_string("database.dsn")
    assert isinstance(excinfo.value.__cause__, PathNotFoundError)
    assert "database.dsn" in caplog.text

    with pytest.raises(FatalConfigError) as excinfo:
        typed_config.must_get_int("name")
    assert isinstance(excinfo.value.__cause__, TypeMismatchError)


def test_returned_containers_are_copies(typed_config):
    labels = typed_config.get("labels")
    labels["team"] = "changed"
    typed_config.get_string_map("labels")["tier"] = 99
    typed_config.as_dict()["servers"].clear()

    assert typed_config.get("labels") == {"team": "core", "tier": 1}
    assert len(typed_config.get("servers")) == 2


def test_prebuilt_environment(config_dir, write_config):
    write_config("default.yml", "a: 1\n")
    write_config("staging-eu.yml", "a: 2\n")
    env = Environment(deployment="staging", instance="eu", full_hostname="box")

    config = Config(config_dir, environment=env).initialize()

    assert config.get("a") == 2
    assert config.environment is env


def test_environment_conflicts_with_options(config_dir):
    env = Environment(deployment="staging", full_hostname="box")
    with pytest.raises(ValueError):
        Config(config_dir, environment=env, deployment="production")
    with pytest.raises(ValueError):
        Config(config_dir, deployment="production", deployment_env="APP_ENV")


def test_hostname_from_environment_variable(config_dir, write_config):
    write_config("default.yml", "role: generic\n")
    write_config("web01.yml", "role: short\n")
    write_config("web01.example.com-development.yml", "role: full\n")

    config = Config(config_dir, hostname_env="HOST", environ={"HOST": "web01.example.com"}).initialize()

    assert config.environment.short_hostname == "web01"
    assert config.get("role") == "full"


def test_custom_parser_registry(config_dir, write_config):
    write_config("default.yml", "a: from-yaml\n")
    write_config("default.toml", 'a = "from-toml"\n')

    config = Config(config_dir, hostname="box", parsers={".toml": parse_toml, ".yml": parse_yaml}).initialize()

    assert config.extensions == [".toml", ".yml"]
    assert config.get("a") == "from-toml"


@pytest.mark.parametrize("extension", ["yml", "toml", "json"])
def test_serialized_tree_loads_back(config_dir, extension):
    tree = {"server": {"port": 8080, "hosts": ["a", "b"], "debug": False}}
    (config_dir / f"default.{extension}").write_text(serialize(tree, extension), encoding="utf-8")

    assert load(config_dir).as_dict() == tree


def test_repr(config_dir):
    config = Config(config_dir, deployment="production", hostname="box")
    assert "production" in repr(config)
    assert "initialized=False" in repr(config)


if __name__ == "__main__":
    raise SystemExit(pytest.main([__file__, "-v"]))
