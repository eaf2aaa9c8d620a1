"""
Wallpaper rotation.

Ties the cache, fetcher, wallpaper setter, palette generator and program
reloader together into the two rotation modes:

- init: reuse the newest cached wallpaper, download only when the cache is empty
- change: download a new wallpaper, fall back to a random cached one

The rotator keeps no state between invocations. Everything it knows comes
from the cache directory listing.
"""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Union

from .cache import WallpaperCache, WallpaperFile
from .config import Config
from .exceptions import WallRotateError, RotationError, NoSourceAvailable, FileMissing, CacheError
from .fetcher import WallpaperFetcher
from .notifications import NotificationSender
from .theme import PaletteGenerator, ProgramReloader
from .wallpaper import WallpaperSetter, get_setter


logger = logging.getLogger(__name__)


class RotationMode(str, Enum):
    """How a rotation picks its wallpaper."""
    INIT = "init"
    CHANGE = "change"


@dataclass
class ApplyResult:
    """Per-step outcome of applying a wallpaper."""
    path: Path
    preloaded: bool = False
    wallpaper_set: bool = False
    unloaded: bool = False
    palette: bool = False
    waybar: bool = False
    kitty: bool = False

    def failed_steps(self) -> List[str]:
        steps = ["preloaded", "wallpaper_set", "unloaded", "palette", "waybar", "kitty"]
        return [step for step in steps if not getattr(self, step)]

    @property
    def ok(self) -> bool:
        return not self.failed_steps()


@dataclass
class RotationOutcome:
    """What a rotate() call ended up doing."""
    mode: RotationMode
    applied: Optional[WallpaperFile] = None
    from_network: bool = False
    apply_result: Optional[ApplyResult] = None
    pruned: List[Path] = field(default_factory=list)
    reason: Optional[str] = None  # why nothing was applied

    @property
    def is_noop(self) -> bool:
        return self.applied is None


class WallpaperRotator:
    """Select, apply and theme around a wallpaper."""

    def __init__(
        self,
        config: Config,
        cache: WallpaperCache,
        fetcher: WallpaperFetcher,
        setter: WallpaperSetter,
        palette: PaletteGenerator,
        reloader: ProgramReloader,
        notifier: Optional[NotificationSender] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config
        self.cache = cache
        self.fetcher = fetcher
        self.setter = setter
        self.palette = palette
        self.reloader = reloader
        self.notifier = notifier or NotificationSender(config.notifications)
        self.rng = rng or random.Random()

    @classmethod
    def from_config(cls, config: Config) -> 'WallpaperRotator':
        """
        Build a rotator with all collaborators from configuration.

        Raises:
            CacheError: If the cache directory is unusable
        """
        cache = WallpaperCache(config.get_cache_dir(), keep=config.cache.keep)
        return cls(
            config=config,
            cache=cache,
            fetcher=WallpaperFetcher(config.sources, cache),
            setter=get_setter(config.display.command),
            palette=PaletteGenerator(config.palette),
            reloader=ProgramReloader(config.reload, config.palette),
            notifier=NotificationSender(config.notifications),
        )

    def check_connectivity(self) -> bool:
        return self.fetcher.check_connectivity()

    def download_wallpaper(self) -> WallpaperFile:
        """
        Download a new wallpaper, gated by the connectivity probe.

        Raises:
            NoSourceAvailable: If offline or every source failed
        """
        if not self.check_connectivity():
            raise NoSourceAvailable("No network connectivity")
        return self.fetcher.download_wallpaper()

    def apply_wallpaper(self, wallpaper: Union[WallpaperFile, Path]) -> ApplyResult:
        """
        Apply a wallpaper and propagate its palette.

        Each step is best-effort: a failure is logged and the next step runs.

        Args:
            wallpaper: Cached wallpaper or path to an image

        Returns:
            ApplyResult with the outcome of every step

        Raises:
            FileMissing: If the image does not exist (nothing is touched)
        """
        path = wallpaper.path if isinstance(wallpaper, WallpaperFile) else Path(wallpaper)
        if not path.is_file():
            raise FileMissing(f"Wallpaper file does not exist: {path}")

        logger.info(f"Applying wallpaper: {path}")
        result = ApplyResult(path=path)
        output = self.config.display.output

        result.preloaded = self._step("preload", lambda: self.setter.preload(path))
        result.wallpaper_set = self._step("set wallpaper", lambda: self.setter.set(path, output))
        result.unloaded = self._step("unload", self.setter.unload_unused)
        result.palette = self._step("palette", lambda: self.palette.generate(path))
        result.waybar = self._step("waybar restart", self.reloader.restart_waybar)
        result.kitty = self._step("kitty colours", self.reloader.push_kitty_colors)

        if result.ok:
            logger.debug("All apply steps succeeded")
        else:
            logger.warning(f"Wallpaper applied with failed steps: {', '.join(result.failed_steps())}")
        return result

    def rotate(self, mode: RotationMode = RotationMode.CHANGE) -> RotationOutcome:
        """
        Run one rotation. Never raises for rotation failures.

        Args:
            mode: RotationMode.INIT or RotationMode.CHANGE

        Returns:
            RotationOutcome, with applied=None when nothing could be applied
        """
        mode = RotationMode(mode)
        logger.info(f"Starting wallpaper rotation ({mode.value})")

        try:
            if mode is RotationMode.INIT:
                outcome = self._rotate_init()
            else:
                outcome = self._rotate_change()
        except (RotationError, CacheError) as e:
            logger.error(f"Wallpaper rotation failed: {e}")
            outcome = RotationOutcome(mode=mode, reason=str(e))

        if outcome.is_noop:
            self.notifier.notify_error("No wallpaper applied", outcome.reason)
        else:
            self.notifier.notify_wallpaper_changed(outcome.applied.path, outcome.from_network)
        return outcome

    def _rotate_init(self) -> RotationOutcome:
        newest = self.cache.newest()
        if newest is not None:
            logger.info(f"Using newest cached wallpaper: {newest.path.name}")
            result = self.apply_wallpaper(newest)
            return RotationOutcome(mode=RotationMode.INIT, applied=newest, apply_result=result)

        logger.info("Wallpaper cache is empty, downloading")
        try:
            wallpaper = self.download_wallpaper()
        except NoSourceAvailable as e:
            reason = f"{e} and the cache is empty"
            logger.error(f"No wallpaper applied: {reason}")
            return RotationOutcome(mode=RotationMode.INIT, reason=reason)

        result = self.apply_wallpaper(wallpaper)
        return RotationOutcome(
            mode=RotationMode.INIT,
            applied=wallpaper,
            from_network=True,
            apply_result=result,
        )

    def _rotate_change(self) -> RotationOutcome:
        try:
            wallpaper = self.download_wallpaper()
        except NoSourceAvailable as e:
            logger.warning(f"Download failed ({e}), falling back to cache")
            return self._apply_random_cached(e)

        result = self.apply_wallpaper(wallpaper)
        pruned = self.cache.prune()
        return RotationOutcome(
            mode=RotationMode.CHANGE,
            applied=wallpaper,
            from_network=True,
            apply_result=result,
            pruned=pruned,
        )

    def _apply_random_cached(self, download_error: NoSourceAvailable) -> RotationOutcome:
        fallback = self.cache.random_choice(self.rng)
        if fallback is None:
            reason = f"{download_error} and the cache is empty"
            logger.error(f"No wallpaper applied: {reason}")
            return RotationOutcome(mode=RotationMode.CHANGE, reason=reason)

        logger.info(f"Using cached wallpaper: {fallback.path.name}")
        result = self.apply_wallpaper(fallback)
        return RotationOutcome(mode=RotationMode.CHANGE, applied=fallback, apply_result=result)

    def _step(self, name: str, action: Callable[[], bool]) -> bool:
        try:
            return action()
        except WallRotateError as e:
            logger.warning(f"Apply step '{name}' failed: {e}")
            return False
