"""Test configuration and fixtures."""

import io
import os
from pathlib import Path
from typing import Callable, Optional
from unittest.mock import Mock

import pytest
from PIL import Image

from wallrotate.cache import WallpaperCache
from wallrotate.config import Config, SourcesConfig, CacheConfig
from wallrotate.fetcher import WallpaperFetcher
from wallrotate.notifications import NotificationSender
from wallrotate.rotator import WallpaperRotator
from wallrotate.theme import PaletteGenerator, ProgramReloader
from wallrotate.wallpaper import WallpaperSetter


def image_bytes(image_format: str = "PNG", size: tuple = (16, 9)) -> bytes:
    """Encode a tiny solid-colour image."""
    buffer = io.BytesIO()
    Image.new("RGB", size, (20, 20, 30)).save(buffer, format=image_format)
    return buffer.getvalue()


def mock_response(content: bytes = b"", status_error: Optional[Exception] = None) -> Mock:
    """Create a streaming response mock for session.get."""
    response = Mock()
    response.iter_content.return_value = [content]
    if status_error:
        response.raise_for_status.side_effect = status_error
    return response


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests away from the real config and cache directories."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.delenv("WALLROTATE_CACHE_DIR", raising=False)


@pytest.fixture
def png_bytes() -> bytes:
    return image_bytes("PNG")


@pytest.fixture
def jpeg_bytes() -> bytes:
    return image_bytes("JPEG")


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "wallpapers"
    directory.mkdir()
    return directory


@pytest.fixture
def test_config(cache_dir: Path) -> Config:
    """Config pointing at the temporary cache with two local sources."""
    return Config(
        sources=SourcesConfig(
            urls=["http://localhost:8000/first", "http://localhost:8000/second"],
            tries=1,
            timeout=1,
            connectivity_url="http://localhost:8000",
        ),
        cache=CacheConfig(directory=str(cache_dir), keep=10),
    )


@pytest.fixture
def cache(test_config: Config) -> WallpaperCache:
    return WallpaperCache(test_config.get_cache_dir(), keep=test_config.cache.keep)


@pytest.fixture
def make_wallpaper(cache_dir: Path, png_bytes: bytes) -> Callable[..., Path]:
    """Factory writing a cached wallpaper with an explicit mtime."""
    def _make(name: str, mtime: float) -> Path:
        path = cache_dir / name
        path.write_bytes(png_bytes)
        os.utime(path, (mtime, mtime))
        return path
    return _make


@pytest.fixture
def mock_setter() -> Mock:
    setter = Mock(spec=WallpaperSetter)
    setter.preload.return_value = True
    setter.set.return_value = True
    setter.unload_unused.return_value = True
    return setter


@pytest.fixture
def mock_palette() -> Mock:
    palette = Mock(spec=PaletteGenerator)
    palette.generate.return_value = True
    return palette


@pytest.fixture
def mock_reloader() -> Mock:
    reloader = Mock(spec=ProgramReloader)
    reloader.restart_waybar.return_value = True
    reloader.push_kitty_colors.return_value = True
    return reloader


@pytest.fixture
def fetcher(test_config: Config, cache: WallpaperCache) -> WallpaperFetcher:
    return WallpaperFetcher(test_config.sources, cache)


@pytest.fixture
def rotator(test_config, cache, fetcher, mock_setter, mock_palette, mock_reloader) -> WallpaperRotator:
    """Rotator with real cache and fetcher, mocked external programs."""
    return WallpaperRotator(
        config=test_config,
        cache=cache,
        fetcher=fetcher,
        setter=mock_setter,
        palette=mock_palette,
        reloader=mock_reloader,
        notifier=NotificationSender(test_config.notifications),
    )
