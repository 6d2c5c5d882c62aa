from __future__ import annotations

from pathlib import Path

from gorg.config import (
    DEFAULT_MAX_FIND_ITEMS,
    CliOverrides,
    config_file_path,
    load_effective_config,
)


def test_defaults_without_config_file(tmp_path: Path) -> None:
    config = load_effective_config(environ={}, home=tmp_path)
    assert config.projects_path == tmp_path / "Projects"
    assert config.index_file_path == tmp_path / "Projects" / ".gorg-db"
    assert config.max_find_items == DEFAULT_MAX_FIND_ITEMS
    assert config.git.command == "git"
    assert config.git.remote_name == "origin"
    assert config.audit_log_path is None


def test_config_file_overrides_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        "\n".join(
            [
                "[projects]",
                f'path = "{(tmp_path / "src").as_posix()}"',
                "[find]",
                "max_items = 20",
                "[git]",
                'command = "/usr/local/bin/git"',
                'remote_name = "upstream"',
                "[logging]",
                f'audit_log = "{(tmp_path / "audit.jsonl").as_posix()}"',
            ]
        ),
        encoding="utf-8",
    )
    config = load_effective_config(config_path=config_path, environ={}, home=tmp_path)
    assert config.projects_path == tmp_path / "src"
    assert config.index_file_path == tmp_path / "src" / ".gorg-db"
    assert config.max_find_items == 20
    assert config.git.command == "/usr/local/bin/git"
    assert config.git.remote_name == "upstream"
    assert config.audit_log_path == tmp_path / "audit.jsonl"


def test_explicit_index_path_is_kept(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        f'[index]\npath = "{(tmp_path / "db").as_posix()}"\n', encoding="utf-8"
    )
    config = load_effective_config(
        config_path=config_path,
        overrides=CliOverrides(projects_path=tmp_path / "elsewhere"),
        environ={},
        home=tmp_path,
    )
    assert config.projects_path == tmp_path / "elsewhere"
    assert config.index_file_path == tmp_path / "db"


def test_cli_overrides_take_precedence(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text("[find]\nmax_items = 20\n", encoding="utf-8")
    config = load_effective_config(
        config_path=config_path,
        overrides=CliOverrides(
            projects_path=tmp_path / "cli",
            max_find_items=7,
        ),
        environ={},
        home=tmp_path,
    )
    assert config.projects_path == tmp_path / "cli"
    assert config.index_file_path == tmp_path / "cli" / ".gorg-db"
    assert config.max_find_items == 7


def test_cli_index_override(tmp_path: Path) -> None:
    config = load_effective_config(
        overrides=CliOverrides(index_file_path=tmp_path / "custom-db"),
        environ={},
        home=tmp_path,
    )
    assert config.projects_path == tmp_path / "Projects"
    assert config.index_file_path == tmp_path / "custom-db"


def test_env_var_selects_config_file(tmp_path: Path) -> None:
    config_path = tmp_path / "custom.toml"
    config_path.write_text("[find]\nmax_items = 3\n", encoding="utf-8")
    config = load_effective_config(environ={"GORG_CONFIG": str(config_path)}, home=tmp_path)
    assert config.max_find_items == 3


def test_implicit_config_location(tmp_path: Path) -> None:
    assert config_file_path({}, tmp_path) == tmp_path / ".config" / "gorg" / "config.toml"
    assert config_file_path({"XDG_CONFIG_HOME": str(tmp_path / "xdg")}, tmp_path) == (
        tmp_path / "xdg" / "gorg" / "config.toml"
    )
    assert config_file_path(
        {"GORG_CONFIG": str(tmp_path / "a.toml"), "XDG_CONFIG_HOME": "/ignored"}, tmp_path
    ) == (tmp_path / "a.toml")


def test_xdg_config_is_read(tmp_path: Path) -> None:
    config_dir = tmp_path / "xdg" / "gorg"
    config_dir.mkdir(parents=True)
    (config_dir / "config.toml").write_text('[git]\nremote_name = "mine"\n', encoding="utf-8")
    config = load_effective_config(
        environ={"XDG_CONFIG_HOME": str(tmp_path / "xdg")}, home=tmp_path
    )
    assert config.git.remote_name == "mine"


def test_public_dict_is_serializable(tmp_path: Path) -> None:
    snapshot = load_effective_config(environ={}, home=tmp_path).to_public_dict()
    assert snapshot["projects_path"] == str(tmp_path / "Projects")
    assert snapshot["git"] == {"command": "git", "remote_name": "origin"}
    assert snapshot["audit_log_path"] is None
