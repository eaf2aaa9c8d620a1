"""
Propagate a refreshed palette to running programs.

Waybar re-reads its stylesheet only on start, so it is restarted.
Kitty takes live colour updates through its remote control channel.
"""

from ..config import PaletteConfig, ReloadConfig
from ..process import CommandRunner


class ProgramReloader(CommandRunner):
    """Restart or recolour programs that depend on the palette."""

    def __init__(self, config: ReloadConfig, palette: PaletteConfig) -> None:
        super().__init__()
        self.config = config
        self.palette = palette

    @property
    def waybar_process(self) -> str:
        return self.config.waybar_command.split()[0]

    def restart_waybar(self) -> bool:
        """
        Restart Waybar if it is running.

        Returns:
            True if Waybar was restarted or did not need to be
        """
        if not self.config.waybar:
            return True

        name = self.waybar_process
        if not self._is_running(name):
            self.logger.debug(f"{name} not running, skipping restart")
            return True

        # pkill exits 1 when the process vanished in between, that's fine
        self._run_command(["pkill", "-x", name], timeout=5)

        if self._spawn_detached(self.config.waybar_command.split()):
            self.logger.info(f"Restarted {name}")
            return True

        self.logger.warning(f"Failed to relaunch {name}")
        return False

    def push_kitty_colors(self) -> bool:
        """
        Push the wal palette into every running kitty window.

        Returns:
            True if colours were pushed or kitty is not running
        """
        if not self.config.kitty:
            return True

        if not self._is_running("kitty"):
            self.logger.debug("kitty not running, skipping colour push")
            return True

        colors = self.palette.get_kitty_colors()
        if not colors.exists():
            self.logger.warning(f"No kitty colour file at {colors}, run wal first")
            return False

        # Launched from a keybind there is no KITTY_LISTEN_ON, so name the socket
        cmd = ["kitty", "@"]
        if self.config.kitty_socket:
            cmd.extend(["--to", self.config.kitty_socket])
        cmd.extend(["set-colors", "--all", "--configured", str(colors)])
        if self._run_command(cmd, timeout=10):
            self.logger.info("Pushed palette to kitty")
            return True

        self.logger.warning("Failed to push palette to kitty (is allow_remote_control enabled?)")
        return False
