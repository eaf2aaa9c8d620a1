"""Tests for wallpaper setters and the shared command runner."""

import subprocess
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from wallrotate.exceptions import CommandError
from wallrotate.wallpaper.setters import CustomSetter, HyprpaperSetter, get_setter


IMAGE = Path("/tmp/wallpapers/wallpaper_20250101_000000_000000.png")


def completed(returncode: int = 0, stderr: str = "") -> Mock:
    return Mock(returncode=returncode, stdout="", stderr=stderr)


class TestHyprpaperSetter:
    """Test hyprctl hyprpaper invocations."""

    def test_preload(self):
        setter = HyprpaperSetter()
        with patch("wallrotate.process.subprocess.run", return_value=completed()) as mock_run:
            assert setter.preload(IMAGE) is True

        assert mock_run.call_args[0][0] == ["hyprctl", "hyprpaper", "preload", str(IMAGE)]

    def test_set_specific_output(self):
        setter = HyprpaperSetter()
        with patch("wallrotate.process.subprocess.run", return_value=completed()) as mock_run:
            assert setter.set(IMAGE, "DP-1") is True

        assert mock_run.call_args[0][0] == ["hyprctl", "hyprpaper", "wallpaper", f"DP-1,{IMAGE}"]

    def test_set_all_outputs(self):
        setter = HyprpaperSetter()
        with patch("wallrotate.process.subprocess.run", return_value=completed()) as mock_run:
            setter.set(IMAGE)

        assert mock_run.call_args[0][0][-1] == f",{IMAGE}"

    def test_unload_unused(self):
        setter = HyprpaperSetter()
        with patch("wallrotate.process.subprocess.run", return_value=completed()) as mock_run:
            assert setter.unload_unused() is True

        assert mock_run.call_args[0][0] == ["hyprctl", "hyprpaper", "unload", "unused"]

    def test_nonzero_exit_returns_false(self):
        setter = HyprpaperSetter()
        with patch("wallrotate.process.subprocess.run", return_value=completed(1, "no such monitor")):
            assert setter.set(IMAGE, "HDMI-A-9") is False

    def test_missing_hyprctl_returns_false(self):
        setter = HyprpaperSetter()
        with patch("wallrotate.process.subprocess.run", side_effect=FileNotFoundError("hyprctl")):
            assert setter.preload(IMAGE) is False

    def test_timeout_returns_false(self):
        setter = HyprpaperSetter()
        timeout = subprocess.TimeoutExpired(cmd="hyprctl", timeout=10)
        with patch("wallrotate.process.subprocess.run", side_effect=timeout):
            assert setter.unload_unused() is False


class TestCustomSetter:
    """Test custom command templates."""

    def test_template_expansion(self):
        setter = CustomSetter("swww img {path} --outputs {output}")
        with patch("wallrotate.process.subprocess.run", return_value=completed()) as mock_run:
            assert setter.set(IMAGE, "DP-1") is True

        assert mock_run.call_args[0][0] == ["swww", "img", str(IMAGE), "--outputs", "DP-1"]

    def test_preload_and_unload_are_noops(self):
        setter = CustomSetter("feh --bg-fill {path}")
        with patch("wallrotate.process.subprocess.run") as mock_run:
            assert setter.preload(IMAGE) is True
            assert setter.unload_unused() is True

        mock_run.assert_not_called()

    def test_invalid_placeholder(self):
        setter = CustomSetter("swww img {file}")

        with pytest.raises(CommandError) as exc_info:
            setter.set(IMAGE)

        assert "{path}" in str(exc_info.value)


class TestGetSetter:

    def test_hyprpaper(self):
        assert isinstance(get_setter("hyprpaper"), HyprpaperSetter)

    def test_custom(self):
        setter = get_setter("custom:feh --bg-fill {path}")

        assert isinstance(setter, CustomSetter)
        assert setter.template == "feh --bg-fill {path}"

    def test_unknown(self):
        with pytest.raises(ValueError):
            get_setter("nitrogen")


class TestDetachedSpawn:
    """Test the background launch helper used for Waybar."""

    def test_still_running_is_success(self):
        setter = HyprpaperSetter()
        process = Mock()
        process.poll.return_value = None
        with patch("wallrotate.process.subprocess.Popen", return_value=process) as mock_popen, \
                patch("wallrotate.process.time.sleep"):
            assert setter._spawn_detached(["waybar"]) is True

        assert mock_popen.call_args[1]["start_new_session"] is True

    def test_immediate_exit_is_failure(self):
        setter = HyprpaperSetter()
        process = Mock()
        process.poll.return_value = 1
        with patch("wallrotate.process.subprocess.Popen", return_value=process), \
                patch("wallrotate.process.time.sleep"):
            assert setter._spawn_detached(["waybar"]) is False

    def test_launch_error_is_failure(self):
        setter = HyprpaperSetter()
        with patch("wallrotate.process.subprocess.Popen", side_effect=FileNotFoundError("waybar")):
            assert setter._spawn_detached(["waybar"]) is False
