"""File utility functions for reading inputs and writing debug artifacts."""

from datetime import datetime
from pathlib import Path
from typing import Optional
from loguru import logger


def read_text(file_path: str | Path) -> str:
    """Read a UTF-8 text file.

    Args:
        file_path: Path to the file (can be string or Path object)

    Returns:
        str: Content of the file

    Raises:
        FileNotFoundError: If the file doesn't exist
        IOError: If there's an error reading the file
    """
    path = Path(file_path)

    if not path.exists():
        logger.error(f"File not found: {path}")
        raise FileNotFoundError(f"File not found: {path}")

    if not path.is_file():
        logger.error(f"Path is not a file: {path}")
        raise ValueError(f"Path is not a file: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            content = f.read()

        logger.info(f"Successfully read file: {path} ({len(content)} chars)")
        return content

    except Exception as e:
        logger.error(f"Error reading file {path}: {e}")
        raise IOError(f"Failed to read file {path}: {e}") from e


def read_text_safe(file_path: str | Path) -> Optional[str]:
    """Read a text file, returning None instead of raising."""
    try:
        return read_text(file_path)
    except Exception as e:
        logger.warning(f"Could not read file {file_path}: {e}")
        return None


def save_artifact(
    content: str,
    output_dir: str | Path,
    prefix: str,
    suffix: str,
    timestamp: Optional[datetime] = None,
) -> Optional[Path]:
    """Write a timestamped debug artifact such as ``enriched_page_20250101_120000.html``.

    Failures are logged and reported as None; artifacts are never required.
    """
    stamp = (timestamp or datetime.now()).strftime("%Y%m%d_%H%M%S")
    path = Path(output_dir) / f"{prefix}_{stamp}{suffix}"
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
    except OSError as e:
        logger.error(f"Error saving artifact {path}: {e}")
        return None

    logger.info(f"Saved artifact to {path}")
    return path
