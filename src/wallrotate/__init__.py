"""
wallrotate - Hyprland wallpaper rotator.

Download or reuse a wallpaper, apply it through hyprpaper, regenerate
the pywal palette and refresh Waybar and kitty.
"""

__version__ = "0.1.0"

from .config import Config
from .cache import WallpaperCache, WallpaperFile
from .fetcher import WallpaperFetcher
from .notifications import NotificationConfig, NotificationSender
from .rotator import WallpaperRotator, RotationMode, RotationOutcome, ApplyResult

__all__ = [
    "Config",
    "WallpaperCache",
    "WallpaperFile",
    "WallpaperFetcher",
    "NotificationConfig",
    "NotificationSender",
    "WallpaperRotator",
    "RotationMode",
    "RotationOutcome",
    "ApplyResult",
]
