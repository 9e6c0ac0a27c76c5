"""ffprobe helpers for uploaded media."""
import logging
import shutil
import subprocess
import sys

logger = logging.getLogger(__name__)


def _resolve_bin(name, win_fallback=None, linux_fallback=None):
    if sys.platform.startswith("win"):
        return shutil.which(name) or win_fallback
    return shutil.which(name) or linux_fallback


FFPROBE = _resolve_bin(
    "ffprobe",
    win_fallback=r"C:\ffmpeg\bin\ffprobe.exe",
    linux_fallback="/usr/bin/ffprobe",
)


def get_media_duration(path: str) -> float | None:
    """
    Get media duration in seconds using ffprobe.
    Returns None if ffprobe is missing or fails.
    """
    if not FFPROBE:
        logger.warning("[PROBE] ffprobe not found, cannot detect duration")
        return None

    cmd = [
        FFPROBE,
        "-v", "error",
        "-show_entries", "format=duration",
        "-of", "default=noprint_wrappers=1:nokey=1",
        path,
    ]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=30)
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.warning("[PROBE] ffprobe error: %s", e)
        return None

    if result.returncode != 0:
        logger.warning("[PROBE] ffprobe failed: %s", result.stderr)
        return None
    try:
        return float(result.stdout.strip())
    except ValueError:
        return None
