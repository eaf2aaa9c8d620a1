"""
Wallpaper setter implementations.

Each setter drives the compositor's wallpaper daemon. The three steps
(preload, set, unload) are separate calls so a failure in one does not
stop the others.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from ..exceptions import CommandError
from ..process import CommandRunner


class WallpaperSetter(CommandRunner, ABC):
    """Abstract base class for wallpaper setters."""

    def preload(self, image_path: Path) -> bool:
        """Load the image into the daemon before it is shown."""
        return True

    @abstractmethod
    def set(self, image_path: Path, output: str = "") -> bool:
        """
        Make the image the active wallpaper.

        Args:
            image_path: Path to wallpaper image
            output: Compositor output name (e.g., "DP-1"), empty for all outputs

        Returns:
            True if successful
        """
        pass

    def unload_unused(self) -> bool:
        """Drop images the daemon no longer displays."""
        return True


class HyprpaperSetter(WallpaperSetter):
    """Wallpaper setter using hyprpaper through hyprctl."""

    def _hyprpaper(self, *args: str) -> bool:
        return self._run_command(["hyprctl", "hyprpaper", *args], timeout=10)

    def preload(self, image_path: Path) -> bool:
        if self._hyprpaper("preload", str(image_path)):
            self.logger.debug(f"Preloaded {image_path} into hyprpaper")
            return True
        self.logger.warning(f"Failed to preload {image_path} into hyprpaper")
        return False

    def set(self, image_path: Path, output: str = "") -> bool:
        # hyprpaper treats an empty monitor field as "every output"
        if self._hyprpaper("wallpaper", f"{output},{image_path}"):
            self.logger.info(f"Set wallpaper on {output or 'all outputs'} via hyprpaper")
            return True
        self.logger.warning(f"Failed to set wallpaper on {output or 'all outputs'} via hyprpaper")
        return False

    def unload_unused(self) -> bool:
        if self._hyprpaper("unload", "unused"):
            self.logger.debug("Unloaded unused hyprpaper images")
            return True
        self.logger.warning("Failed to unload unused hyprpaper images")
        return False


class CustomSetter(WallpaperSetter):
    """Wallpaper setter using a custom command template."""

    def __init__(self, command_template: str) -> None:
        super().__init__()
        self.template = command_template

    def set(self, image_path: Path, output: str = "") -> bool:
        """
        Set wallpaper using a custom command template.

        Raises:
            CommandError: If the template uses an unknown placeholder
        """
        try:
            cmd_str = self.template.format(path=str(image_path), output=output)
        except (KeyError, IndexError) as e:
            raise CommandError(
                f"Invalid placeholder in custom command template: {e}. "
                "Available placeholders: {path}, {output}"
            )
        cmd = cmd_str.split()
        if not cmd:
            raise CommandError("Custom command template is empty")

        if self._run_command(cmd):
            self.logger.info(f"Set wallpaper via custom command: {cmd_str}")
            return True
        self.logger.warning(f"Failed to set wallpaper via custom command: {cmd_str}")
        return False


def get_setter(command: str) -> WallpaperSetter:
    """
    Get appropriate wallpaper setter for the given command.

    Args:
        command: "hyprpaper" or "custom:template"

    Returns:
        WallpaperSetter instance
    """
    if command.startswith("custom:"):
        return CustomSetter(command[7:])

    if command == "hyprpaper":
        return HyprpaperSetter()

    raise ValueError(f"Unknown wallpaper command: {command}. Available: ['hyprpaper', 'custom:<template>']")
