"""
Configuration package for wallrotate.
"""

from .main import Config
from .dataclasses import (
    SourcesConfig,
    CacheConfig,
    DisplayConfig,
    PaletteConfig,
    ReloadConfig,
    LoggingConfig,
)
