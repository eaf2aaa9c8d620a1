"""
Colour palette generation from the active wallpaper.

Runs pywal (`wal`). Its output lands in wal's own cache directory,
where Waybar stylesheets and kitty pick it up.
"""

from pathlib import Path

from ..config import PaletteConfig
from ..process import CommandRunner


class PaletteGenerator(CommandRunner):
    """Regenerate the colour scheme with pywal."""

    def __init__(self, config: PaletteConfig) -> None:
        super().__init__()
        self.config = config

    def build_command(self, image_path: Path) -> list[str]:
        # -n: hyprpaper owns the wallpaper, wal only computes colours
        # -q: no terminal output
        return [self.config.command, "-i", str(image_path), "-n", "-q", *self.config.extra_args]

    def generate(self, image_path: Path) -> bool:
        """
        Generate a palette for image_path.

        Returns:
            True if the generator succeeded, also when palette generation is disabled
        """
        if not self.config.enabled:
            self.logger.debug("Palette generation disabled")
            return True

        if self._run_command(self.build_command(image_path), timeout=60):
            self.logger.info(f"Generated palette from {image_path.name}")
            return True

        self.logger.warning(f"Palette generation failed for {image_path}")
        return False
