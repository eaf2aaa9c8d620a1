"""Wallpaper management module."""

from .setters import WallpaperSetter, HyprpaperSetter, CustomSetter, get_setter

__all__ = ["WallpaperSetter", "HyprpaperSetter", "CustomSetter", "get_setter"]
