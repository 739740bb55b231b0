"""Configuration manager for the i18n generator.

This module provides functionality for discovering, loading, validating and
saving configuration files. YAML and JSON config files are supported, as
well as a ``[tool.i18n-generator]`` table in ``pyproject.toml`` and an
``i18nGenerator`` field in ``package.json``.
"""

import json
import logging
import tempfile
import tomllib
from pathlib import Path
from typing import Final

import yaml
from pydantic import ValidationError

from ..utils.core.exceptions import ConfigurationError
from .schema import GeneratorConfig


logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES: Final[tuple[str, ...]] = (
    "i18n.config.yml",
    "i18n.config.yaml",
    "i18n.config.json",
)
PYPROJECT_TABLE: Final[str] = "i18n-generator"
PACKAGE_JSON_FIELD: Final[str] = "i18nGenerator"

EXAMPLE_CONFIG: Final[str] = """\
languages:
  - vi
  - en
input_dir: ./src/translations
output_dir: ./public/locales
"""


class ConfigManager:
    """
    Configuration manager for generator config files with Pydantic validation.

    Keeps the most recently loaded configuration and the file it came from.
    """

    def __init__(self) -> None:
        """Initialize the configuration manager."""
        self._current_config: GeneratorConfig | None = None
        self._config_file_path: Path | None = None

    @property
    def config_file_path(self) -> Path | None:
        """Path of the file the current configuration was loaded from."""
        return self._config_file_path

    def load(self, config_path: Path | None = None, cwd: Path | None = None) -> GeneratorConfig:
        """
        Load configuration from ``config_path``, or discover it in ``cwd``.

        Raises:
            ConfigurationError: If no config is found or it is invalid
        """
        path = config_path or self.discover_config(cwd or Path.cwd())
        config = self.load_config(path)
        self._current_config = config
        self._config_file_path = path
        return config

    def get_current_config(self) -> GeneratorConfig:
        """
        Get the current configuration.

        Raises:
            RuntimeError: If no configuration has been loaded
        """
        if self._current_config is None:
            raise RuntimeError("No configuration loaded")
        return self._current_config

    @staticmethod
    def discover_config(cwd: Path) -> Path:
        """
        Find the configuration source for a project directory.

        Searches ``i18n.config.yml``, ``i18n.config.yaml``, ``i18n.config.json``,
        then ``pyproject.toml`` and ``package.json`` when they carry a
        generator section.

        Raises:
            ConfigurationError: If no configuration source exists
        """
        for name in CONFIG_FILE_NAMES:
            candidate = cwd / name
            if candidate.is_file():
                logger.info(f"Loading config from {name}")
                return candidate

        pyproject = cwd / "pyproject.toml"
        if pyproject.is_file() and ConfigManager._has_pyproject_table(pyproject):
            logger.info("Loading config from pyproject.toml")
            return pyproject

        package_json = cwd / "package.json"
        if package_json.is_file() and ConfigManager._has_package_field(package_json):
            logger.info("Loading config from package.json")
            return package_json

        raise ConfigurationError(
            f"No configuration found in {cwd}. Create i18n.config.yml with:\n\n{EXAMPLE_CONFIG}",
            context={"cwd": str(cwd)},
        )

    @staticmethod
    def load_config(config_path: Path) -> GeneratorConfig:
        """
        Load and validate configuration from a file.

        Relative ``input_dir`` and ``output_dir`` values are resolved against
        the directory containing the config file.

        Args:
            config_path: Path to a YAML, JSON, pyproject.toml or package.json file

        Returns:
            GeneratorConfig: Validated configuration object

        Raises:
            ConfigurationError: If the file is missing, unreadable or invalid
        """
        if not config_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {config_path}",
                context={"config_file": str(config_path)},
            )

        config_data = ConfigManager._read_config_data(config_path)

        try:
            config = GeneratorConfig.model_validate(config_data)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid configuration in {config_path}: {e}",
                context={"config_file": str(config_path)},
            ) from e

        base_dir = config_path.parent
        return config.model_copy(
            update={
                "input_dir": base_dir / config.input_dir,
                "output_dir": base_dir / config.output_dir,
            }
        )

    @staticmethod
    def _read_config_data(config_path: Path) -> dict[str, object]:
        """Read the raw configuration mapping from any supported source."""
        try:
            match config_path.name, config_path.suffix:
                case "pyproject.toml", _:
                    with config_path.open("rb") as f:
                        raw: object = tomllib.load(f).get("tool", {}).get(PYPROJECT_TABLE)
                case "package.json", _:
                    raw = json.loads(config_path.read_text(encoding="utf-8")).get(
                        PACKAGE_JSON_FIELD
                    )
                case _, ".json":
                    raw = json.loads(config_path.read_text(encoding="utf-8"))
                case _:
                    with config_path.open("r", encoding="utf-8") as f:
                        raw = yaml.safe_load(f)  # pyright: ignore[reportAny]
        except (yaml.YAMLError, json.JSONDecodeError, tomllib.TOMLDecodeError) as e:
            raise ConfigurationError(
                f"Invalid syntax in {config_path}: {e}",
                context={"config_file": str(config_path)},
            ) from e
        except (OSError, AttributeError) as e:
            raise ConfigurationError(
                f"Could not read configuration from {config_path}: {e}",
                context={"config_file": str(config_path)},
            ) from e

        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise ConfigurationError(
                f"Configuration in {config_path} must be a mapping, got {type(raw).__name__}",
                context={"config_file": str(config_path)},
            )
        return raw  # pyright: ignore[reportUnknownVariableType]

    @staticmethod
    def _has_pyproject_table(path: Path) -> bool:
        try:
            with path.open("rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError):
            return False
        tool = data.get("tool", {})
        return isinstance(tool, dict) and PYPROJECT_TABLE in tool

    @staticmethod
    def _has_package_field(path: Path) -> bool:
        try:
            data: object = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            return False
        return isinstance(data, dict) and PACKAGE_JSON_FIELD in data

    @staticmethod
    def apply_overrides(config: GeneratorConfig, **overrides: object) -> GeneratorConfig:
        """
        Return a copy of ``config`` with non-None overrides applied and re-validated.

        Raises:
            ConfigurationError: If an override is invalid
        """
        updates = {key: value for key, value in overrides.items() if value is not None}
        if not updates:
            return config

        try:
            return GeneratorConfig.model_validate({**config.model_dump(), **updates})
        except ValidationError as e:
            raise ConfigurationError(f"Invalid command-line override: {e}") from e

    @staticmethod
    def save_config(
        config: GeneratorConfig, config_path: Path, exclude: set[str] | None = None
    ) -> None:
        """
        Save configuration to a YAML file with atomic operation.

        Args:
            config: Configuration object to save
            config_path: Path where to save the configuration
            exclude: Field names to leave out of the file

        Raises:
            OSError: If file operations fail
        """
        config_dict = config.model_dump(mode="json", exclude=exclude)

        content_to_write = yaml.dump(
            config_dict,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
            indent=2,
        )

        # Atomic save operation using temporary file
        temp_file = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=config_path.parent,
                prefix=f".{config_path.name}.",
                suffix=".tmp",
                delete=False,
            ) as temp_file:
                _ = temp_file.write(content_to_write)
                temp_file.flush()
                temp_path = Path(temp_file.name)

            _ = temp_path.replace(config_path)

        except Exception as e:
            if temp_file and Path(temp_file.name).exists():
                Path(temp_file.name).unlink(missing_ok=True)
            raise OSError(f"Failed to save configuration to {config_path}: {e}") from e
