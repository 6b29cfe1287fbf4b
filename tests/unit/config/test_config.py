# pyright: reportAny=false
import os
from pathlib import Path

import pytest
from pyfakefs.fake_filesystem import FakeFilesystem
from pytest_mock import MockerFixture

from stencil.config import (
    DEFAULT_CONFIG,
    Config,
    ConfigSourceName,
    LogFormat,
    LogLevel,
    discover_sources,
    find_project_root,
    get_user_config_path,
)
from stencil.exceptions import ConfigLoadError, ConfigValidationError

USER_CONFIG = Path("/home/user/.config/stencil/config.toml")


@pytest.fixture
def user_config_path(mocker: MockerFixture) -> Path:
    _ = mocker.patch(
        "stencil.config._discovery.get_user_config_path", return_value=USER_CONFIG
    )
    return USER_CONFIG


class TestConfigDefaults:
    def test_from_empty_dict_uses_defaults(self) -> None:
        config = Config.from_dict({})

        assert config.logging.level is LogLevel.INFO
        assert config.logging.format is LogFormat.JSON
        assert config.rendering.multi_doc_separator == "---"
        assert config.rendering.namespace == "Stencil"
        assert config.rendering.tab_size is None
        assert config.rendering.keep_trailing_newline is True

    def test_to_dict_matches_defaults(self) -> None:
        assert Config.from_dict({}).to_dict() == DEFAULT_CONFIG

    def test_get_by_dotted_key(self) -> None:
        config = Config.from_dict({"rendering": {"tab_size": 2}})

        assert config.get("rendering.tab_size") == 2
        assert config.get("rendering.missing", "fallback") == "fallback"
        assert config.get("logging.level.deeper") is None


class TestConfigValidation:
    def test_rejects_unknown_section_key(self) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            _ = Config.from_dict({"rendering": {"separator": "==="}})

        assert exc_info.value.key == "rendering.separator"

    def test_rejects_invalid_log_level(self) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            _ = Config.from_dict({"logging": {"level": "loud"}})

        assert exc_info.value.key == "logging.level"
        assert exc_info.value.value == "loud"

    def test_rejects_negative_tab_size(self) -> None:
        with pytest.raises(ConfigValidationError):
            _ = Config.from_dict({"rendering": {"tab_size": -1}})

    def test_rejects_invalid_namespace(self) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            _ = Config.from_dict({"rendering": {"namespace": "not valid"}})

        assert "pattern" in exc_info.value.expected

    def test_ignores_unknown_top_level_keys(self) -> None:
        config = Config.from_dict({"debug": 1})

        assert config.get("debug") == 1


class TestConfigFromFile:
    def test_loads_valid_toml_file(self, fs: FakeFilesystem) -> None:
        content = """
[logging]
level = "debug"
format = "text"

[rendering]
tab_size = 2
strict_undefined = true
"""
        path = Path("/project/stencil.toml")
        fs.create_file(path, contents=content)

        config = Config.from_file(path)

        assert config.logging.level is LogLevel.DEBUG
        assert config.logging.format is LogFormat.TEXT
        assert config.rendering.tab_size == 2
        assert config.rendering.strict_undefined is True
        assert config.sources[0].name is ConfigSourceName.PROJECT

    def test_raises_config_load_error_for_invalid_toml(self, fs: FakeFilesystem) -> None:
        path = Path("/project/stencil.toml")
        fs.create_file(path, contents="[rendering")

        with pytest.raises(ConfigLoadError):
            _ = Config.from_file(path)

    def test_validation_error_names_source(self, fs: FakeFilesystem) -> None:
        path = Path("/project/stencil.toml")
        fs.create_file(path, contents='[logging]\nformat = "xml"\n')

        with pytest.raises(ConfigValidationError) as exc_info:
            _ = Config.from_file(path)

        assert exc_info.value.source == str(path)


class TestConfigLoad:
    def test_merges_sources_in_precedence_order(
        self,
        fs: FakeFilesystem,
        user_config_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        fs.create_file(
            user_config_path,
            contents='[rendering]\nnamespace = "User"\ntab_size = 8\n[logging]\nlevel = "warning"\n',
        )
        fs.create_file(
            "/project/stencil.toml",
            contents='[rendering]\nnamespace = "Project"\n',
        )
        monkeypatch.setenv("STENCIL_RENDERING__TAB_SIZE", "2")

        config = Config.load(project_root=Path("/project"))

        assert config.rendering.namespace == "Project"
        assert config.rendering.tab_size == 2
        assert config.logging.level is LogLevel.WARNING
        assert [source.name for source in config.sources] == [
            ConfigSourceName.ENV,
            ConfigSourceName.PROJECT,
            ConfigSourceName.USER,
            ConfigSourceName.DEFAULT,
        ]

    def test_excludes_env_when_requested(
        self,
        fs: FakeFilesystem,
        user_config_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        fs.create_dir("/project")
        monkeypatch.setenv("STENCIL_RENDERING__TAB_SIZE", "2")

        config = Config.load(project_root=Path("/project"), include_env=False)

        assert config.rendering.tab_size is None

    def test_unrelated_env_vars_do_not_break_loading(
        self,
        fs: FakeFilesystem,
        user_config_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        fs.create_dir("/project")
        monkeypatch.setenv("STENCIL_DEBUG", "1")
        monkeypatch.setenv("STENCIL_LOG_LEVEL", "debug")

        config = Config.load(project_root=Path("/project"))

        assert config.rendering.namespace == "Stencil"


class TestDiscovery:
    def test_finds_project_root_in_parent_directory(self, fs: FakeFilesystem) -> None:
        fs.create_file("/project/stencil.toml")
        fs.create_dir("/project/charts/web")

        assert find_project_root(Path("/project/charts/web")) == Path("/project")

    def test_returns_none_without_project_file(self, fs: FakeFilesystem) -> None:
        fs.create_dir("/some/path")

        assert find_project_root(Path("/some/path")) is None

    def test_directory_named_like_project_file_is_ignored(self, fs: FakeFilesystem) -> None:
        fs.create_dir("/project/stencil.toml")

        assert find_project_root(Path("/project")) is None

    def test_user_config_path_filename(self) -> None:
        path = get_user_config_path()

        assert path.name == "config.toml"
        assert path.parent.name == "stencil"

    def test_sources_without_project_root(
        self, fs: FakeFilesystem, user_config_path: Path
    ) -> None:
        fs.create_dir("/elsewhere")
        os.chdir("/elsewhere")

        sources = discover_sources()

        assert [source.name for source in sources] == [
            ConfigSourceName.ENV,
            ConfigSourceName.USER,
            ConfigSourceName.DEFAULT,
        ]
        assert sources[1].exists is False
