"""
External process helpers.

Every call into hyprctl, wal, pgrep/pkill, waybar and kitty goes through
CommandRunner so failures are logged the same way and never raise.
"""

import logging
import subprocess
import time
from typing import List


class CommandRunner:
    """Base class for components that drive external programs."""

    def __init__(self) -> None:
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _run_command(self, cmd: List[str], timeout: int = 30) -> bool:
        """
        Run a command and return success status.

        Args:
            cmd: Command to run as list of strings
            timeout: Timeout in seconds

        Returns:
            True if command exited with status 0
        """
        cmd_str = ' '.join(cmd)  # For logging purposes

        try:
            self.logger.debug(f"Running command: {cmd_str}")
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)

            if result.returncode != 0:
                error_msg = f"Command failed with exit code {result.returncode}: {cmd_str}"
                if result.stderr:
                    error_msg += f"\nStderr: {result.stderr.strip()}"
                elif result.stdout:
                    error_msg += f"\nStdout: {result.stdout.strip()}"

                self.logger.warning(error_msg)
                return False

            self.logger.debug(f"Command succeeded: {cmd_str}")
            return True

        except subprocess.TimeoutExpired:
            self.logger.warning(f"Command timed out after {timeout}s: {cmd_str}")
            return False
        except FileNotFoundError:
            self.logger.warning(f"Command not found: {cmd[0]} - ensure {cmd[0]} is installed and in PATH")
            return False
        except PermissionError as e:
            self.logger.warning(f"Permission denied executing command: {cmd_str}: {e}")
            return False
        except OSError as e:
            self.logger.warning(f"OS error executing command {cmd_str}: {e}")
            return False

    def _spawn_detached(self, cmd: List[str]) -> bool:
        """
        Start a long-running program detached from this process.

        Returns:
            True if the program is still alive shortly after launch
        """
        cmd_str = ' '.join(cmd)

        try:
            process = subprocess.Popen(
                cmd,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True
            )
        except OSError as e:
            self.logger.warning(f"Failed to launch {cmd_str}: {e}")
            return False

        # Give it a moment to start and check if it's still running
        time.sleep(0.5)

        if process.poll() is None:
            self.logger.debug(f"Background command started: {cmd_str}")
            return True

        self.logger.warning(f"Background command exited immediately: {cmd_str}")
        return False

    def _is_running(self, process_name: str) -> bool:
        """Check if a process with this exact name is running."""
        try:
            result = subprocess.run(
                ["pgrep", "-x", process_name],
                capture_output=True,
                timeout=5,
            )
            return result.returncode == 0
        except (subprocess.TimeoutExpired, OSError):
            return False
