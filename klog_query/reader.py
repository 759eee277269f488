"""File acquisition — glob expansion, data-directory listing, text loading."""

import glob
import logging
import os

from klog_query.merge import FileInfo
from klog_query.parser import normalize_newlines

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = (".klg", ".klog", ".txt")


def read_text(filepath: str) -> str:
    """Read a UTF-8 file with line endings normalized to ``\\n``.

    Raises UnicodeDecodeError if the file is not valid UTF-8.
    """
    try:
        with open(filepath, "r", encoding="utf-8", newline="") as f:
            return normalize_newlines(f.read())
    except UnicodeDecodeError:
        logger.error("File %s is not valid UTF-8", filepath)
        raise


def expand_paths(raw_paths: list[str]) -> list[str]:
    """Expand globs, deduplicate, and validate that files exist.

    Raises FileNotFoundError if a non-glob path doesn't exist.
    Raises FileNotFoundError if expansion produces zero files.
    """
    expanded = []
    seen = set()

    for raw in raw_paths:
        if any(c in raw for c in ("*", "?", "[")):
            candidates = sorted(glob.glob(raw))
        else:
            if not os.path.isfile(raw):
                raise FileNotFoundError(f"File not found: {raw}")
            candidates = [raw]
        for path in candidates:
            if path not in seen:
                seen.add(path)
                expanded.append(path)

    if not expanded:
        raise FileNotFoundError("No klog files found matching the given paths")

    return expanded


def list_data_files(data_dir: str, extensions=DEFAULT_EXTENSIONS) -> list[FileInfo]:
    """List klog files in *data_dir* with their modification time in whole seconds."""
    if not os.path.isdir(data_dir):
        raise FileNotFoundError(f"Directory not found: {data_dir}")

    files = []
    for name in sorted(os.listdir(data_dir)):
        path = os.path.join(data_dir, name)
        if not name.endswith(tuple(extensions)) or not os.path.isfile(path):
            continue
        files.append(FileInfo(name=name, path=path, mtime=int(os.path.getmtime(path))))
    return files


def load_files(paths: list[str]) -> list[tuple[str, str]]:
    """Read each path, returning ``(name, content)`` pairs for the parser."""
    loaded = []
    for path in paths:
        content = read_text(path)
        logger.info("Read %s (%d bytes)", path, len(content))
        loaded.append((path, content))
    return loaded
