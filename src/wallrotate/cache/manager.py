"""
Local wallpaper cache.

A single directory of image files named with their creation timestamp.
Provides recency ordering, random selection and retention cleanup.
"""

import logging
import os
import random
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from ..exceptions import CacheError


# Same formats the fetcher accepts; hyprpaper cannot display the rest
IMAGE_SUFFIXES = {".jpg", ".jpeg", ".png", ".webp"}
PARTIAL_SUFFIX = ".part"
FILENAME_PREFIX = "wallpaper_"
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S_%f"


@dataclass(frozen=True)
class WallpaperFile:
    """Image file in the cache directory."""
    path: Path
    mtime: float

    @classmethod
    def from_path(cls, path: Path) -> 'WallpaperFile':
        return cls(path=path, mtime=path.stat().st_mtime)

    @property
    def created(self) -> Optional[datetime]:
        """Creation time embedded in the filename, None for foreign files."""
        stem = self.path.stem
        if not stem.startswith(FILENAME_PREFIX):
            return None
        try:
            return datetime.strptime(stem[len(FILENAME_PREFIX):], TIMESTAMP_FORMAT)
        except ValueError:
            return None

    @property
    def sort_key(self) -> tuple:
        """Newest-first key: mtime, then filename."""
        return (self.mtime, self.path.name)


class WallpaperCache:
    """
    Manages the wallpaper cache directory.

    Files are ordered newest first by modification time. Ties are broken by
    filename in descending order, which matches creation order for files
    this tool names itself.
    """

    def __init__(self, directory: Path, keep: int = 10) -> None:
        self.directory = directory
        self.keep = keep
        self.logger = logging.getLogger(__name__)

        self._ensure_directory()

    def list_wallpapers(self) -> List[WallpaperFile]:
        """
        List cached wallpapers.

        Returns:
            List of WallpaperFile (newest first)

        Raises:
            CacheError: If the cache directory cannot be read
        """
        try:
            paths = list(self.directory.iterdir())
        except OSError as e:
            raise CacheError(f"Failed to list cache directory {self.directory}: {e}")

        wallpapers = []
        for path in paths:
            if path.suffix.lower() not in IMAGE_SUFFIXES:
                continue
            try:
                if path.is_file():
                    wallpapers.append(WallpaperFile.from_path(path))
            except OSError as e:
                # Removed or unreadable between listing and stat
                self.logger.debug(f"Skipping {path.name}: {e}")

        wallpapers.sort(key=lambda w: w.sort_key, reverse=True)
        return wallpapers

    def newest(self) -> Optional[WallpaperFile]:
        """Most recently created wallpaper, or None for an empty cache."""
        wallpapers = self.list_wallpapers()
        return wallpapers[0] if wallpapers else None

    def random_choice(self, rng: Optional[random.Random] = None) -> Optional[WallpaperFile]:
        """Uniformly random cached wallpaper, or None for an empty cache."""
        wallpapers = self.list_wallpapers()
        if not wallpapers:
            return None
        return (rng or random).choice(wallpapers)

    def new_stem(self, now: Optional[datetime] = None) -> str:
        """Unique file stem derived from the current time."""
        now = now or datetime.now()
        stem = f"{FILENAME_PREFIX}{now.strftime(TIMESTAMP_FORMAT)}"

        # Two downloads in the same microsecond only happen with a frozen clock
        candidate, counter = stem, 1
        while any(self.directory.glob(f"{candidate}.*")):
            candidate = f"{stem}-{counter}"
            counter += 1
        return candidate

    def partial_path(self, stem: str) -> Path:
        """Where an in-flight download is written."""
        return self.directory / f"{stem}{PARTIAL_SUFFIX}"

    def prune(self, keep: Optional[int] = None) -> List[Path]:
        """
        Delete all but the newest `keep` wallpapers.

        Args:
            keep: Number of files to keep, defaults to the configured count

        Returns:
            Paths that were deleted
        """
        keep = self.keep if keep is None else keep
        stale = self.list_wallpapers()[keep:]

        deleted = []
        for wallpaper in stale:
            try:
                wallpaper.path.unlink()
                deleted.append(wallpaper.path)
                self.logger.debug(f"Deleted old wallpaper: {wallpaper.path.name}")
            except OSError as e:
                self.logger.warning(f"Failed to delete old wallpaper {wallpaper.path}: {e}")

        if deleted:
            self.logger.info(f"Cache cleanup: deleted {len(deleted)} old wallpapers, kept {keep}")
        return deleted

    def _ensure_directory(self) -> None:
        """
        Ensure cache directory exists and is writable.

        Raises:
            CacheError: If directory creation or permission check fails
        """
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheError(f"Failed to create cache directory {self.directory}: {e}")

        if not os.access(self.directory, os.W_OK):
            raise CacheError(f"Cache directory is not writable: {self.directory}")
