"""Local wallpaper cache."""

from .manager import WallpaperCache, WallpaperFile

__all__ = ['WallpaperCache', 'WallpaperFile']
