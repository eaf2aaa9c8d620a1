"""
Common exception classes for wallrotate.

Provides domain-specific exceptions for consistent error handling across modules.
All exceptions inherit from WallRotateError for unified catching at CLI level.
"""


class WallRotateError(Exception):
    """
    Base exception for all wallrotate errors.

    All domain-specific exceptions inherit from this class, allowing
    callers to catch all wallrotate errors with a single except clause.
    """
    pass


# ============================================================================
# Configuration Errors
# ============================================================================

class ConfigError(WallRotateError):
    """
    Configuration-related errors.

    Raised when:
    - Config file is malformed
    - Config contains unknown sections or keys
    - A key has the wrong type
    """
    pass


class ConfigValidationError(ConfigError):
    """
    Config value validation failed.

    Raised when a config value is present but invalid (e.g., out of range,
    invalid URL format, unknown log level).
    """
    pass


# ============================================================================
# Rotation Errors
# ============================================================================

class RotationError(WallRotateError):
    """
    Wallpaper rotation errors.

    Base class for the two failure kinds a rotation step can report.
    The rotator turns both into logged fallbacks; neither ends the process.
    """
    pass


class NoSourceAvailable(RotationError):
    """
    No wallpaper could be downloaded.

    Raised when every configured source failed to transfer or returned
    content that is not a valid image, or when the connectivity probe failed.
    """
    pass


class FileMissing(RotationError):
    """Wallpaper file to apply does not exist on disk."""
    pass


# ============================================================================
# Cache Errors
# ============================================================================

class CacheError(WallRotateError):
    """
    Wallpaper cache directory errors.

    Raised when the cache directory cannot be created or is not writable.
    """
    pass


# ============================================================================
# Command Errors
# ============================================================================

class CommandError(WallRotateError):
    """
    External command errors (hyprctl, wal, waybar, kitty).

    Raised when an external command template is unusable.
    Runtime command failures are logged, not raised.
    """
    pass

