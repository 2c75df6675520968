"""Generator settings.

Settings come from three layers, later ones winning: model defaults, an
optional YAML config file, and explicit overrides (CLI options).

Example config file::

    root_dir: ./tools
    collection_name: My API Tools
    extensions: [.js, .ts]
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from postman_collection_gen.errors import ConfigError
from postman_collection_gen.generator.collection import DEFAULT_COLLECTION_NAME, DEFAULT_ENVIRONMENT_NAME
from postman_collection_gen.scanner.extract import DEFAULT_CLIENT
from postman_collection_gen.scanner.selector import DEFAULT_EXTENSIONS, DEFAULT_SKIP_DIRS

COLLECTION_FILENAME = "postman_collection.json"
ENVIRONMENT_FILENAME = "postman_environment.template.json"


class GeneratorSettings(BaseModel):
    """Everything one generator run needs to know."""

    model_config = ConfigDict(extra="forbid")

    root_dir: Path = Path("tools")
    out_dir: Path = Path("generate_postman_schema")
    base_dir: Path = Field(default_factory=Path.cwd)  # relative paths resolve here
    collection_name: str = DEFAULT_COLLECTION_NAME
    environment_name: str = DEFAULT_ENVIRONMENT_NAME
    client_name: str = DEFAULT_CLIENT
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    skip_dirs: tuple[str, ...] = DEFAULT_SKIP_DIRS

    @field_validator("extensions")
    @classmethod
    def _dotted(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            raise ValueError("at least one extension is required")
        return tuple(ext if ext.startswith(".") else f".{ext}" for ext in value)

    @field_validator("client_name")
    @classmethod
    def _identifier(cls, value: str) -> str:
        if not value.isidentifier():
            raise ValueError(f"{value!r} is not a valid identifier")
        return value

    @property
    def root_path(self) -> Path:
        return self.base_dir / self.root_dir

    @property
    def out_path(self) -> Path:
        return self.base_dir / self.out_dir

    @property
    def collection_path(self) -> Path:
        return self.out_path / COLLECTION_FILENAME

    @property
    def environment_path(self) -> Path:
        return self.out_path / ENVIRONMENT_FILENAME


def load_settings(config_path: Path | None = None, **overrides) -> GeneratorSettings:
    """Build settings from an optional YAML file plus non-None overrides.

    Raises:
        ConfigError: if the file cannot be read or the values are invalid.
    """
    data: dict = {}
    if config_path is not None:
        data.update(_read_config_file(config_path))
    data.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return GeneratorSettings(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings: {e}") from e


def _read_config_file(config_path: Path) -> dict:
    try:
        loaded = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e}") from e

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")
    return loaded
