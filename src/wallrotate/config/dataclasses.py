"""
Configuration dataclasses for wallrotate.

One dataclass per TOML section. Defaults here are also what
Config.initialize_config() writes out on first run.
"""

from pathlib import Path
from typing import List
from dataclasses import dataclass, field


DEFAULT_SOURCES = [
    "https://picsum.photos/{width}/{height}",
    "https://source.unsplash.com/random/{width}x{height}/?wallpaper,dark",
]


@dataclass
class SourcesConfig:
    """
    Network wallpaper providers.

    URL templates are tried in declared order. Placeholders:
    {width}, {height} and {timestamp} (seconds since epoch, for cache busting).
    """
    urls: List[str] = field(default_factory=lambda: list(DEFAULT_SOURCES))
    tries: int = 3  # Attempts per source, retries handled by the HTTP session
    timeout: int = 10  # Seconds per attempt
    connectivity_url: str = "https://picsum.photos"
    connectivity_timeout: int = 5
    width: int = 1920
    height: int = 1080

    def render_urls(self, timestamp: int) -> List[str]:
        """Expand URL templates with resolution and timestamp."""
        return [
            url.format(width=self.width, height=self.height, timestamp=timestamp)
            for url in self.urls
        ]


@dataclass
class CacheConfig:
    """Local wallpaper cache settings."""
    directory: str = "~/Pictures/wallpapers"
    keep: int = 10  # Retention: newest files kept after a successful change

    def get_directory(self) -> Path:
        """Get absolute cache directory path."""
        return Path(self.directory).expanduser()


@dataclass
class DisplayConfig:
    """
    Compositor wallpaper settings.

    command is "hyprpaper" or "custom:<template>" where the template
    may use {path} and {output}.
    """
    command: str = "hyprpaper"
    output: str = ""  # Empty means every output


@dataclass
class PaletteConfig:
    """Palette generator (pywal) settings."""
    enabled: bool = True
    command: str = "wal"
    extra_args: List[str] = field(default_factory=list)
    cache_dir: str = "~/.cache/wal"

    def get_cache_dir(self) -> Path:
        return Path(self.cache_dir).expanduser()

    def get_kitty_colors(self) -> Path:
        """Kitty colour file written by wal's default templates."""
        return self.get_cache_dir() / "colors-kitty.conf"


@dataclass
class ReloadConfig:
    """Which running programs get the refreshed palette."""
    waybar: bool = True
    kitty: bool = True
    waybar_command: str = "waybar"
    kitty_socket: str = ""  # e.g. unix:/tmp/kitty, matching kitty's listen_on


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
