"""Environment-scoped ``.env`` file loading.

Files are parsed with python-dotenv's ``dotenv_values`` without variable
expansion and without touching ``os.environ``: ``KEY=VALUE`` lines,
comments and blank lines skipped, matching surrounding quotes stripped.
A missing or unreadable file yields no variables.
"""

import asyncio
import logging
from pathlib import Path

from dotenv import dotenv_values

logger = logging.getLogger(__name__)


def read_dotenv_file(path: str | Path) -> dict[str, str]:
    """Parse a ``.env`` file into a name → value mapping.

    Args:
        path: Location of the file.

    Returns:
        The parsed variables; empty if the file is missing or unreadable.
        Keys declared without ``=`` are ignored.
    """
    path_obj = Path(path)
    if not path_obj.is_file():
        logger.debug(f"Dotenv file not found: {path_obj}")
        return {}

    try:
        parsed = dotenv_values(dotenv_path=path_obj, interpolate=False, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Failed to read dotenv file {path_obj}: {e}")
        return {}

    variables = {key: value for key, value in parsed.items() if value is not None}
    logger.debug(f"Loaded {len(variables)} variable(s) from dotenv file {path_obj}")
    return variables


async def load_dotenv_file(root_dir: str | Path, dotenv_path: str) -> dict[str, str]:
    """Read a dotenv file relative to a collection root without blocking the loop."""
    full_path = Path(root_dir) / dotenv_path
    return await asyncio.to_thread(read_dotenv_file, full_path)
