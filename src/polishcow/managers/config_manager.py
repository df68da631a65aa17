"""
Config Manager

Loads config.yaml (with include system support), falls back to factory
defaults, and builds the validated, immutable AppConfig.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from polishcow.models.config import AppConfig, AsciiOptions, DEFAULT_RAMP
from polishcow.models.enums import ConversionFailurePolicy, FitMode, OutputFormat
from polishcow.models.errors import ConfigError
from polishcow.utils.logger import get_logger, LogCategory
from polishcow.utils.serialization import Serializer

log = get_logger().for_category(LogCategory.CONFIG)

PACKAGE_CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"


class ConfigManager:
    """
    Main configuration manager with include system support

    Loads config.yaml and processes the include: directive to merge modular
    YAML files. Relative asset paths (sound file, animation directory) are
    resolved against the current working directory, like any CLI argument.

    Example:
        config_manager = ConfigManager()
        config_manager.load()
        config = config_manager.build()

        config.animation_sequence   # (0, 1, 0, 1, 2, 3, 4, 3, 4, 2)
        config.ascii.fit            # FitMode.BOX
    """

    def __init__(
        self,
        config_path: Union[str, Path, None] = None,
        defaults_path: Union[str, Path, None] = None,
    ):
        """
        Args:
            config_path: Path to main config.yaml (default: bundled config)
            defaults_path: Path to factory defaults fallback (default: bundled)
        """
        self.config_path = Path(config_path) if config_path else PACKAGE_CONFIG_DIR / "config.yaml"
        self.factory_defaults_path = (
            Path(defaults_path) if defaults_path else PACKAGE_CONFIG_DIR / "factory_defaults.yaml"
        )
        self.data: Dict[str, Any] = {}
        self.used_defaults = False

    def load(self) -> Dict[str, Any]:
        """
        Load YAML configuration with include system support

        Process:
        1. Load main config.yaml
        2. If it has an 'include:' list, load and merge those files
           (keys in config.yaml itself win over included ones)
        3. Fallback to factory_defaults.yaml on failure

        Raises:
            ConfigError: if neither config.yaml nor the factory defaults load
        """
        try:
            main_config = self._read_yaml(self.config_path)

            if "include" in main_config:
                log.info("Using include-based configuration")
                include_list = main_config.pop("include") or []
                merged = self._load_with_includes(include_list, self.config_path.parent)
                merged.update(main_config)
                self.data = merged
            else:
                log.info("Using monolithic configuration")
                self.data = main_config

        except Exception as ex:
            log.error(
                f"Failed to load {self.config_path.name}",
                error=str(ex),
                error_type=type(ex).__name__,
            )
            log.warn("Falling back to factory defaults")

            try:
                self.data = self._read_yaml(self.factory_defaults_path)
            except Exception as defaults_ex:
                raise ConfigError(
                    f'Config file at path "{self.config_path}" could not be loaded '
                    f"and factory defaults are unavailable.",
                    error=str(defaults_ex),
                ) from defaults_ex
            self.used_defaults = True

        return self.data

    def _read_yaml(self, path: Path) -> Dict[str, Any]:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"{path.name} must contain a mapping at top level")
        return data

    def _load_with_includes(self, include_list: List[str], config_dir: Path) -> Dict[str, Any]:
        """
        Load and merge multiple YAML files from include list

        Args:
            include_list: List of filenames to load (e.g., ["audio.yaml", "animation.yaml"])
            config_dir: Directory containing config files

        Returns:
            Merged config dict
        """
        merged: Dict[str, Any] = {}

        for filename in include_list:
            filepath = config_dir / filename
            try:
                file_data = self._read_yaml(filepath)
            except FileNotFoundError:
                log.error(f"File not found: {filename}")
                raise
            except Exception as ex:
                log.error(f"Error loading {filename}", error=str(ex))
                raise

            if file_data:
                merged.update(file_data)
                log.debug(f"Loaded {filename}", keys=str(list(file_data.keys())))

        log.debug("Config merge complete", total_keys=len(merged), keys=str(list(merged.keys())))
        return merged

    # ===== AppConfig =====

    def build(self) -> AppConfig:
        """
        Build the validated AppConfig from loaded data.

        Raises:
            ConfigError: on any invalid value
        """
        if not self.data:
            self.load()

        try:
            config = self._build(self.data)
        except ConfigError:
            raise
        except (TypeError, ValueError) as ex:
            raise ConfigError(f"Invalid configuration: {ex}", config=str(self.config_path)) from ex

        self._validate(config)
        log.debug(
            "Configuration ready",
            sound_file=str(config.sound_file),
            animation_dir=str(config.animation_dir),
            sequence=" ".join(str(i) for i in config.animation_sequence),
        )
        return config

    def _build(self, data: Dict[str, Any]) -> AppConfig:
        window = self._section(data, "window")
        audio = self._section(data, "audio")
        animation = self._section(data, "animation")
        ascii_data = self._section(data, "ascii")
        cache = self._section(data, "cache")

        if "sound_file" not in audio:
            raise ConfigError("audio.sound_file is required")
        if "directory" not in animation:
            raise ConfigError("animation.directory is required")
        if "sequence" not in animation:
            raise ConfigError("animation.sequence is required")

        sequence = animation["sequence"]
        if not isinstance(sequence, list) or not all(
            isinstance(i, int) and not isinstance(i, bool) for i in sequence
        ):
            raise ConfigError("animation.sequence must be a list of integers", sequence=repr(sequence))

        ascii_options = AsciiOptions(
            color=bool(ascii_data.get("color", True)),
            fit=Serializer.str_to_enum(ascii_data.get("fit", "box"), FitMode),
            output_format=Serializer.str_to_enum(
                ascii_data.get("output_format", "truecolor"), OutputFormat
            ),
            ramp=str(ascii_data.get("ramp", DEFAULT_RAMP)),
        )

        max_entries = cache.get("max_entries")

        return AppConfig(
            sound_file=Path(audio["sound_file"]),
            animation_dir=Path(animation["directory"]),
            animation_sequence=tuple(sequence),
            debug=bool(data.get("debug", False)),
            title_name=str(window.get("name", "Polish Cow")),
            title_author=str(window.get("author", "Sv443")),
            end_buffer=float(audio.get("end_buffer", 0.4)),
            min_size=Serializer.pair_to_ints(window.get("min_size", [80, 30]), "window.min_size"),
            min_aspect_ratio=float(window.get("min_aspect_ratio", 2.5)),
            animation_interval=float(animation.get("interval", 0.2)),
            padding=Serializer.pair_to_ints(window.get("padding", [0, 4]), "window.padding"),
            ascii=ascii_options,
            exit_grace_period=float(data.get("exit_grace_period", 10.0)),
            conversion_failure=Serializer.str_to_enum(
                cache.get("conversion_failure", "fatal"), ConversionFailurePolicy
            ),
            cache_max_entries=None if max_entries is None else int(max_entries),
        )

    @staticmethod
    def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
        section = data.get(name) or {}
        if not isinstance(section, dict):
            raise ConfigError(f"'{name}' must be a mapping", section=name)
        return section

    @staticmethod
    def _validate(config: AppConfig) -> None:
        if not config.animation_sequence:
            raise ConfigError("animation.sequence must not be empty")
        if any(i < 0 for i in config.animation_sequence):
            raise ConfigError(
                "animation.sequence must not contain negative indices",
                sequence=" ".join(str(i) for i in config.animation_sequence),
            )
        if config.animation_interval <= 0:
            raise ConfigError("animation.interval must be positive", interval=config.animation_interval)
        if config.end_buffer < 0:
            raise ConfigError("audio.end_buffer must not be negative", end_buffer=config.end_buffer)
        if config.exit_grace_period < 0:
            raise ConfigError("exit_grace_period must not be negative")
        if config.min_aspect_ratio <= 0:
            raise ConfigError("window.min_aspect_ratio must be positive")
        if min(config.min_size) <= 0:
            raise ConfigError("window.min_size must be positive", min_size=config.min_size)
        if min(config.padding) < 0:
            raise ConfigError("window.padding must not be negative", padding=config.padding)
        if config.padding[0] >= config.min_size[0] or config.padding[1] >= config.min_size[1]:
            raise ConfigError(
                "window.padding must be smaller than window.min_size",
                padding=config.padding,
                min_size=config.min_size,
            )
        if not config.ascii.ramp:
            raise ConfigError("ascii.ramp must not be empty")
        if config.cache_max_entries is not None and config.cache_max_entries < 2:
            raise ConfigError(
                "cache.max_entries must be at least 2 (or null for no limit)",
                max_entries=config.cache_max_entries,
            )

    @staticmethod
    def check_sequence_covers(config: AppConfig, frame_count: int) -> None:
        """
        Raises:
            ConfigError: if the sequence names a frame index that does not exist
        """
        highest = max(config.animation_sequence)
        if highest >= frame_count:
            raise ConfigError(
                f"Animation sequence refers to frame #{highest} but only "
                f"{frame_count} frames were found.",
                frames=frame_count,
                directory=str(config.animation_dir),
            )
