import random
import time
from pathlib import Path

SAFE_FILENAME_CHARS = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789.-"
)


def ensure_data_dirs(data_path: Path, uploads_dir: Path) -> Path:
    data_path.mkdir(parents=True, exist_ok=True)
    uploads_dir.mkdir(parents=True, exist_ok=True)
    return data_path


def sanitize_filename(name: str) -> str:
    """Replace every character outside [A-Za-z0-9.-] with an underscore.

    No path separator can survive, so the result is always a single path
    component.
    """
    return "".join(c if c in SAFE_FILENAME_CHARS else "_" for c in name)


def generate_stored_name(original_name: str) -> str:
    """Build ``<epoch millis>-<random>-<sanitized name>`` for a new blob."""
    timestamp = int(time.time() * 1000)
    suffix = random.randint(0, 10**9)
    return f"{timestamp}-{suffix}-{sanitize_filename(original_name)}"
