"""
Main Config class for wallrotate.
"""

import os
import logging
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Dict, Any, Optional

try:
    import tomli
except ImportError:
    raise ImportError("Required package 'tomli' not found. Install with: pip install tomli")

import tomli_w

from ..exceptions import ConfigError, ConfigValidationError
from ..notifications import NotificationConfig

from .dataclasses import (
    SourcesConfig,
    CacheConfig,
    DisplayConfig,
    PaletteConfig,
    ReloadConfig,
    LoggingConfig,
)
from .validation import (
    URL_PATTERN,
    validate_toml_structure,
)


CACHE_DIR_ENV = "WALLROTATE_CACHE_DIR"

VALID_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
VALID_URGENCIES = ['low', 'normal', 'critical']


@dataclass
class Config:
    """
    Main configuration class for wallrotate.

    Configuration is loaded from TOML files with environment variable overrides.
    Every section is optional; missing sections use dataclass defaults.
    """

    sources: SourcesConfig = field(default_factory=SourcesConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    palette: PaletteConfig = field(default_factory=PaletteConfig)
    reload: ReloadConfig = field(default_factory=ReloadConfig)
    notifications: NotificationConfig = field(default_factory=NotificationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self) -> None:
        """Validate configuration values."""
        # Validate sources
        for template in self.sources.urls:
            try:
                url = template.format(width=1, height=1, timestamp=0)
            except (KeyError, IndexError, ValueError) as e:
                raise ConfigValidationError(
                    f"Invalid placeholder in source URL {template!r}: {e}\n"
                    "Available placeholders: {width}, {height}, {timestamp}"
                )
            if not URL_PATTERN.match(url):
                raise ConfigValidationError(
                    f"Invalid source URL format: {template}\n"
                    "Expected format: http://hostname/path or https://hostname/path"
                )

        if not URL_PATTERN.match(self.sources.connectivity_url):
            raise ConfigValidationError(
                f"Invalid connectivity URL format: {self.sources.connectivity_url}"
            )

        if self.sources.tries < 1 or self.sources.tries > 10:
            raise ConfigValidationError(
                f"Tries per source ({self.sources.tries}) out of range.\n"
                "Must be between 1 and 10."
            )

        if self.sources.timeout < 1 or self.sources.timeout > 120:
            raise ConfigValidationError(
                f"Download timeout ({self.sources.timeout}s) out of range.\n"
                "Must be between 1 and 120 seconds."
            )

        if self.sources.connectivity_timeout < 1 or self.sources.connectivity_timeout > 60:
            raise ConfigValidationError(
                f"Connectivity timeout ({self.sources.connectivity_timeout}s) out of range.\n"
                "Must be between 1 and 60 seconds."
            )

        if self.sources.width <= 0 or self.sources.height <= 0:
            raise ConfigValidationError(
                f"Resolution {self.sources.width}x{self.sources.height} must be positive."
            )

        # Validate cache settings
        if self.cache.keep < 1:
            raise ConfigValidationError(
                f"Cache keep count ({self.cache.keep}) must be at least 1."
            )

        # Validate display settings
        command = self.display.command
        if command != "hyprpaper" and not command.startswith("custom:"):
            raise ConfigValidationError(
                f"Unknown wallpaper command: {command}\n"
                "Use 'hyprpaper' or 'custom:<template>'."
            )

        # Validate external program settings
        if not self.palette.command.strip():
            raise ConfigValidationError("Palette command must not be empty.")

        if not self.reload.waybar_command.strip():
            raise ConfigValidationError("Waybar command must not be empty.")

        # Validate notification settings
        if self.notifications.urgency not in VALID_URGENCIES:
            raise ConfigValidationError(
                f"Invalid notification urgency: {self.notifications.urgency}\n"
                f"Must be one of: {VALID_URGENCIES}"
            )

        # Validate logging settings
        if self.logging.level.upper() not in VALID_LEVELS:
            raise ConfigValidationError(
                f"Invalid log level: {self.logging.level}\n"
                f"Must be one of: {VALID_LEVELS}"
            )

    def get_cache_dir(self) -> Path:
        """
        Get wallpaper cache directory.

        WALLROTATE_CACHE_DIR overrides the configured directory.
        """
        override = os.environ.get(CACHE_DIR_ENV)
        if override:
            return Path(override).expanduser()
        return self.cache.get_directory()

    @classmethod
    def get_config_dir(cls) -> Path:
        """
        Get user configuration directory.

        Uses XDG_CONFIG_HOME if set, otherwise defaults to ~/.config.
        """
        xdg_config = os.environ.get("XDG_CONFIG_HOME")
        if xdg_config:
            return Path(xdg_config) / "wallrotate"
        return Path.home() / ".config" / "wallrotate"

    @classmethod
    def default_dict(cls) -> Dict[str, Any]:
        """Default configuration as a TOML-serializable dict."""
        return {
            'sources': asdict(SourcesConfig()),
            'cache': asdict(CacheConfig()),
            'display': asdict(DisplayConfig()),
            'palette': asdict(PaletteConfig()),
            'reload': asdict(ReloadConfig()),
            'notifications': asdict(NotificationConfig()),
            'logging': asdict(LoggingConfig()),
        }

    @classmethod
    def initialize_config(cls, config_file: Optional[Path] = None) -> None:
        """
        Write a default config file if none exists.

        Existing user files are never touched.
        """
        logger = logging.getLogger(__name__)
        target = config_file or cls.get_config_dir() / "config.toml"

        if target.exists():
            logger.debug(f"Config already initialized at {target}, skipping")
            return

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(tomli_w.dumps(cls.default_dict()), encoding='utf-8')
            os.chmod(target, 0o644)  # rw-r--r--
            logger.info(f"Wrote default config to {target}")
        except OSError as e:
            raise ConfigError(f"Failed to write default config to {target}: {e}")

    @classmethod
    def load(
        cls,
        config_file: Optional[Path] = None,
        initialize: bool = True,
    ) -> 'Config':
        """
        Load configuration from TOML file.

        Args:
            config_file: Optional path to config TOML file
            initialize: Whether to write a default config when none exists

        Returns:
            Config instance with loaded settings

        Raises:
            ConfigError: If the file has unknown sections/keys or wrong types
            ConfigValidationError: If a value is out of range
        """
        logger = logging.getLogger(__name__)

        if not config_file:
            config_file = cls.get_config_dir() / "config.toml"

        if initialize:
            cls.initialize_config(config_file)

        config_dict: Dict[str, Any] = {}
        if config_file.exists():
            try:
                with open(config_file, 'rb') as f:
                    config_dict = tomli.load(f)
            except tomli.TOMLDecodeError as e:
                raise ConfigError(f"Invalid TOML in {config_file}: {e}")
            except OSError as e:
                logger.warning(f"Failed to read config {config_file}: {e}")

            validate_toml_structure(config_dict, config_file)
            logger.debug(f"Loaded config from {config_file}")
        else:
            logger.debug(f"No config at {config_file}, using defaults")

        return cls(
            sources=SourcesConfig(**config_dict.get('sources', {})),
            cache=CacheConfig(**config_dict.get('cache', {})),
            display=DisplayConfig(**config_dict.get('display', {})),
            palette=PaletteConfig(**config_dict.get('palette', {})),
            reload=ReloadConfig(**config_dict.get('reload', {})),
            notifications=NotificationConfig(**config_dict.get('notifications', {})),
            logging=LoggingConfig(**config_dict.get('logging', {})),
        )
