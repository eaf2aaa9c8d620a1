"""
Desktop notifications for wallpaper changes.

Uses notify-send (libnotify), which the session's notification daemon
(dunst, mako, ...) picks up.
"""

import logging
import subprocess
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class NotificationConfig:
    """Configuration for desktop notifications."""
    enabled: bool = False
    show_preview: bool = True  # Show wallpaper thumbnail in notification
    timeout_ms: int = 5000  # Notification timeout in milliseconds
    urgency: str = "normal"  # low, normal, critical


class NotificationSender:
    """Send desktop notifications for rotation events."""

    def __init__(self, config: Optional[NotificationConfig] = None) -> None:
        self.config = config or NotificationConfig()
        self._notify_send_path: Optional[str] = None

        if self.config.enabled:
            self._notify_send_path = shutil.which("notify-send")
            if not self._notify_send_path:
                logger.warning("notify-send not found, notifications disabled")

    def is_available(self) -> bool:
        """Check if notifications are enabled and notify-send was found."""
        return self.config.enabled and self._notify_send_path is not None

    def notify_wallpaper_changed(self, image_path: Path, from_network: bool) -> bool:
        """
        Send notification when a wallpaper was applied.

        Args:
            image_path: Path to the applied wallpaper
            from_network: Whether the image was freshly downloaded

        Returns:
            True if notification was sent successfully
        """
        if not self.is_available():
            return False

        origin = "downloaded" if from_network else "from cache"
        return self._send_notification(
            title="Wallpaper Updated",
            body=f"{image_path.name} ({origin})",
            icon=str(image_path) if self.config.show_preview else None,
        )

    def notify_error(self, message: str, details: Optional[str] = None) -> bool:
        """
        Send notification for a rotation that applied nothing.

        Args:
            message: Error message
            details: Optional error details

        Returns:
            True if notification was sent successfully
        """
        if not self.is_available():
            return False

        body = message
        if details:
            body += f"\n{details[:200]}"

        return self._send_notification(
            title="Wallpaper Rotation Failed",
            body=body,
            urgency="critical",
        )

    def _send_notification(
        self,
        title: str,
        body: str,
        icon: Optional[str] = None,
        urgency: Optional[str] = None,
    ) -> bool:
        """
        Send a notification using notify-send.

        Args:
            title: Notification title
            body: Notification body text
            icon: Optional icon path or name
            urgency: Urgency level (low, normal, critical)

        Returns:
            True if notification was sent successfully
        """
        if not self._notify_send_path:
            return False

        cmd = [
            self._notify_send_path,
            "--app-name=wallrotate",
            f"--expire-time={self.config.timeout_ms}",
            f"--urgency={urgency or self.config.urgency}",
        ]

        if icon:
            cmd.append(f"--icon={icon}")

        cmd.extend([title, body])

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                timeout=5,
            )

            if result.returncode != 0:
                logger.warning(f"notify-send failed: {result.stderr.decode()}")
                return False

            logger.debug(f"Notification sent: {title}")
            return True

        except subprocess.TimeoutExpired:
            logger.warning("notify-send timed out")
            return False
        except OSError as e:
            logger.warning(f"Failed to send notification: {e}")
            return False
