"""Unified settings: CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  (CLI flags passed by Click)
  2. Env vars     (``ROWFORM_*`` prefix, ``__`` for nested keys)
  3. TOML file    (``rowform.toml`` discovered via walk-up)
  4. Code defaults baked into :mod:`rowform.config.models`
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from rowform.config.discovery import find_config
from rowform.config.models import FormConfig, default_fields
from rowform.domain.schema import FieldSchema, FormSchema, Messages


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``rowform.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# TOML path handed to settings_customise_sources during construction.
_tls = threading.local()


class RowformSettings(BaseSettings):
    """Unified settings for the rowform CLI.

    Stored in ``click.Context.obj`` (via AppContext) at the CLI root.

    Attributes:
        work_dir: Directory the config was discovered from (or CWD).
        config_path: The TOML file in effect, or None when running on defaults.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "ROWFORM_",
        "env_nested_delimiter": "__",
    }

    work_dir: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    form: FormConfig = Field(default_factory=FormConfig)
    fields: dict[str, FieldSchema] = Field(default_factory=default_fields)
    messages: Messages = Field(default_factory=Messages)

    @model_validator(mode="after")
    def _schema_is_consistent(self) -> RowformSettings:
        self.form_schema()
        return self

    def form_schema(self) -> FormSchema:
        return FormSchema(fields=self.fields, messages=self.messages)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        work_dir: Path | None = None,
        **cli_flags: Any,
    ) -> RowformSettings:
        """Construct settings from a CLI invocation.

        Uses the explicit *config_path* when given, otherwise discovers
        ``rowform.toml`` by walking up from *work_dir*.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(work_dir)

        resolved = work_dir
        if resolved is None:
            resolved = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(work_dir=resolved, config_path=toml_path, **cli_flags)
        finally:
            _tls.toml_path = None
