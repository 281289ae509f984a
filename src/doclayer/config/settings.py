"""DoclayerSettings — one object for CLI flags, environment and doclayer.toml.

Sources, strongest first:

1. keyword arguments (the root CLI group passes its flags here)
2. ``DOCLAYER_*`` environment variables, ``__`` separating sections
   (``DOCLAYER_SERVER__CONF_FILE``)
3. ``doclayer.toml`` found by :func:`~doclayer.config.discovery.find_config`
4. the defaults on the section models

Relative paths from the TOML file are taken from the directory holding it.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from doclayer.config.discovery import find_config
from doclayer.config.models import ResolveConfig, ServerConfig

# The TOML path chosen by from_cli(), visible to settings_customise_sources()
# while the model is being built.
_pending = threading.local()


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Settings source backed by a parsed ``doclayer.toml``."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path is None or not toml_path.is_file():
            return
        try:
            with toml_path.open("rb") as fh:
                self._data = tomllib.load(fh)
        except tomllib.TOMLDecodeError as exc:
            import click

            raise click.ClickException(f"Invalid TOML in {toml_path}: {exc}") from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return dict(self._data)


class DoclayerSettings(BaseSettings):
    """Resolved settings for one CLI invocation.

    Attributes:
        project_root: Directory of the loaded ``doclayer.toml``, or the
            working directory when there is none.
        settings_path: The ``doclayer.toml`` that was read, if any.
        conf_file: httpd configuration given with ``--config`` (or
            ``DOCLAYER_CONF_FILE``); overrides ``[server] conf_file``.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "DOCLAYER_",
        "env_nested_delimiter": "__",
    }

    project_root: Path = Field(default_factory=Path.cwd)
    settings_path: Path | None = None
    conf_file: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    server: ServerConfig = Field(default_factory=ServerConfig)
    resolve: ResolveConfig = Field(default_factory=ResolveConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml = TomlSettingsSource(settings_cls, getattr(_pending, "toml_path", None))
        return init_settings, env_settings, toml

    @property
    def httpd_conf(self) -> Path | None:
        """The httpd configuration to load; None when nothing names one."""
        if self.conf_file is not None:
            return self.conf_file
        if self.server.conf_file is None:
            return None
        return self._under_root(self.server.conf_file)

    @property
    def server_root(self) -> Path | None:
        """Base for relative ``DocumentRoot`` values.

        None means "the directory of the httpd configuration file".
        """
        if self.server.server_root is None:
            return None
        return self._under_root(self.server.server_root)

    def _under_root(self, value: str) -> Path:
        path = Path(value)
        return path if path.is_absolute() else self.project_root / path

    @classmethod
    def from_cli(
        cls,
        *,
        settings_path: str | None = None,
        project_root: Path | None = None,
        **cli_flags: Any,
    ) -> DoclayerSettings:
        """Build settings for a CLI run.

        *settings_path* (``--settings``) skips discovery; otherwise
        ``doclayer.toml`` is searched upward from *project_root* or the
        working directory. A ``conf_file`` of None is dropped so it does not
        mask ``DOCLAYER_CONF_FILE``.
        """
        if settings_path:
            explicit = Path(settings_path)
            toml_path = explicit if explicit.is_file() else None
        else:
            toml_path = find_config(project_root)

        if project_root is None:
            project_root = toml_path.parent if toml_path else Path.cwd()

        flags = {k: v for k, v in cli_flags.items() if not (k == "conf_file" and v is None)}

        _pending.toml_path = toml_path
        try:
            return cls(project_root=project_root, settings_path=toml_path, **flags)
        finally:
            _pending.toml_path = None
