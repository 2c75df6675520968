"""Source file selection.

Only immediate subdirectories of the root whose name starts with a number
(``1_simulate_transaction``, ``2-cards``, ``10``) are scanned, in numeric
order. Each selected directory is walked depth-first for source files.
"""

import re
from pathlib import Path

from postman_collection_gen.logger import get_logger

logger = get_logger(__name__)

NUMBERED_DIR_RE = re.compile(r"(\d+)(?:[_-].*)?", re.ASCII)

DEFAULT_EXTENSIONS = (".js",)
DEFAULT_SKIP_DIRS = ("node_modules",)


def select_source_files(
    root_dir: Path | str,
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS,
    skip_dirs: tuple[str, ...] = DEFAULT_SKIP_DIRS,
) -> list[Path]:
    """Collect source files from the numbered directories under ``root_dir``.

    Returns an empty list when ``root_dir`` does not exist or is not a directory.
    Files are grouped by directory (ascending number), then listed in
    depth-first order within each directory.
    """
    root = Path(root_dir)
    if not root.is_dir():
        logger.warning("Source root %s is not a directory, nothing to scan", root)
        return []

    numbered = _numbered_dirs(root)
    if not numbered:
        logger.info("No numbered directories found in %s", root)
        return []

    max_index = max(index for index, _ in numbered)
    selected = [(index, path) for index, path in numbered if 1 <= index <= max_index]
    selected.sort(key=lambda entry: entry[0])

    files: list[Path] = []
    for index, directory in selected:
        found = _walk_source_files(directory, tuple(extensions), set(skip_dirs))
        logger.debug("Directory %s (#%d): %d source files", directory.name, index, len(found))
        files.extend(found)
    return files


def _numbered_dirs(root: Path) -> list[tuple[int, Path]]:
    """Return ``(number, path)`` for each child directory with a numeric prefix."""
    result = []
    for entry in _list_dir(root):
        if entry.is_symlink() or not entry.is_dir():
            continue
        match = NUMBERED_DIR_RE.fullmatch(entry.name)
        if match:
            result.append((int(match.group(1)), entry))
    return result


def _walk_source_files(directory: Path, extensions: tuple[str, ...], skip_dirs: set[str]) -> list[Path]:
    """Depth-first walk using an explicit stack; entries are visited in name order."""
    found: list[Path] = []
    stack = list(reversed(_list_dir(directory)))
    while stack:
        entry = stack.pop()
        if entry.name in skip_dirs or entry.is_symlink():
            continue
        if entry.is_dir():
            stack.extend(reversed(_list_dir(entry)))
        elif entry.is_file() and entry.name.endswith(extensions):
            found.append(entry)
    return found


def _list_dir(directory: Path) -> list[Path]:
    try:
        return sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as e:
        logger.warning("Cannot list %s: %s", directory, e)
        return []
