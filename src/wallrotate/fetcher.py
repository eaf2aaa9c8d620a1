"""
Wallpaper download from network image providers.

Sources are tried strictly in declared order; the first one that delivers
a real image wins. Retries within one source are handled by the HTTP
session's retry policy.
"""

import logging
import time
from pathlib import Path
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
from PIL import Image

from . import __version__
from .cache import WallpaperCache, WallpaperFile
from .config import SourcesConfig
from .exceptions import NoSourceAvailable


logger = logging.getLogger(__name__)

# Formats hyprpaper can display, mapped to the extension we store them under
IMAGE_EXTENSIONS = {
    "JPEG": ".jpg",
    "PNG": ".png",
    "WEBP": ".webp",
}

CHUNK_SIZE = 64 * 1024


class WallpaperFetcher:
    """
    Downloads wallpapers into the cache directory.

    Handles:
    - Connectivity probing
    - Per-source retries and timeouts
    - Content validation (the body must decode as an image)
    - Cleanup of partial and invalid downloads
    """

    def __init__(self, config: SourcesConfig, cache: WallpaperCache) -> None:
        self.config = config
        self.cache = cache
        self.timeout = config.timeout

        # One try plus (tries - 1) retries per source
        retry_strategy = Retry(
            total=config.tries - 1,
            connect=config.tries - 1,
            read=config.tries - 1,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["HEAD", "GET"],
            backoff_factor=1,
            raise_on_status=False,
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)

        self.session = requests.Session()
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)
        self.session.headers.update({
            'User-Agent': f'wallrotate/{__version__}'
        })

        logger.debug(f"Fetcher initialized: {len(config.urls)} sources, "
                     f"{config.tries} tries, {config.timeout}s timeout")

    def check_connectivity(self) -> bool:
        """
        Check if the network is reachable.

        Returns:
            True if the probe URL answered without a server error
        """
        url = self.config.connectivity_url
        try:
            response = requests.head(
                url,
                timeout=self.config.connectivity_timeout,
                allow_redirects=True,
            )
            if response.status_code < 500:
                logger.debug(f"Connectivity check passed: {url}")
                return True
            logger.info(f"Connectivity check failed: HTTP {response.status_code} from {url}")
            return False
        except requests.RequestException as e:
            logger.info(f"Connectivity check failed: {url}: {e}")
            return False

    def download_wallpaper(self) -> WallpaperFile:
        """
        Download a wallpaper from the first source that delivers an image.

        Returns:
            The newly cached WallpaperFile

        Raises:
            NoSourceAvailable: If every source failed or returned non-image data
        """
        urls = self.config.render_urls(int(time.time()))
        if not urls:
            raise NoSourceAvailable("No wallpaper sources configured")

        for url in urls:
            wallpaper = self._try_source(url)
            if wallpaper is not None:
                return wallpaper

        raise NoSourceAvailable(f"All {len(urls)} wallpaper sources failed")

    def _try_source(self, url: str) -> Optional[WallpaperFile]:
        """Download and validate one source. Leaves no file behind on failure."""
        stem = self.cache.new_stem()
        partial = self.cache.partial_path(stem)

        logger.info(f"Downloading wallpaper from {url}")
        try:
            if not self._fetch(url, partial):
                return None

            image_format = self._validate(partial)
            if image_format is None:
                return None

            final = self.cache.directory / f"{stem}{IMAGE_EXTENSIONS[image_format]}"
            try:
                partial.replace(final)
                wallpaper = WallpaperFile.from_path(final)
            except OSError as e:
                logger.warning(f"Failed to store download as {final}: {e}")
                return None

            logger.info(f"Downloaded wallpaper: {final.name}")
            return wallpaper
        finally:
            try:
                if partial.exists():
                    partial.unlink()
            except OSError as e:
                logger.warning(f"Failed to remove partial download {partial}: {e}")

    def _fetch(self, url: str, target: Path) -> bool:
        """Stream url into target. Returns False on any transfer error."""
        try:
            response = self.session.get(url, timeout=self.timeout, stream=True)
            try:
                response.raise_for_status()
                with open(target, 'wb') as f:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
            finally:
                response.close()
            return True

        except requests.ConnectionError as e:
            logger.warning(f"Cannot connect to {url}: {e}")
        except requests.Timeout as e:
            logger.warning(f"Download timeout for {url}: {e}")
        except requests.HTTPError as e:
            logger.warning(f"HTTP error downloading {url}: {e}")
        except requests.RequestException as e:
            logger.warning(f"Failed to download {url}: {e}")
        except OSError as e:
            logger.warning(f"Failed to write download to {target}: {e}")
        return False

    def _validate(self, path: Path) -> Optional[str]:
        """
        Inspect the downloaded bytes.

        Returns:
            Pillow format name if the file is a supported image, otherwise None
        """
        try:
            with Image.open(path) as img:
                image_format = img.format
                img.verify()
            # verify() only checks structure; JPEG needs a full decode to
            # notice a body cut short
            with Image.open(path) as img:
                img.load()
        except Exception as e:
            # Pillow raises a mix of OSError, SyntaxError and struct errors on bad data
            logger.warning(f"Downloaded content is not a valid image: {e}")
            return None

        if image_format not in IMAGE_EXTENSIONS:
            logger.warning(f"Unsupported image format {image_format}")
            return None

        return image_format
