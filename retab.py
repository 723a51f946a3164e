#!/usr/bin/env python3
"""
retab

Walk a directory tree and normalize whitespace in source files in place:
tabs become four spaces and trailing spaces are removed.

Files are rewritten only when a line actually changed. No backup is made,
the rewrite is destructive; use --dry-run to see what would change first.
"""

import argparse
import logging
import os
import shutil
import sys
import tempfile
import time
from pathlib import Path
from typing import Iterable, List, Optional, Set, Tuple

from tqdm import tqdm

__version__ = "1.0.0"

TAB_REPLACEMENT = "    "

DEFAULT_PATTERNS = [".java"]

DEFAULT_IGNORE_DIRS = [
    ".git",
    ".github",
    "__pycache__",
    "node_modules",
    "venv",
    ".venv",
]


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()],
)
logger = logging.getLogger("retab")


def normalize_line(line: str) -> str:
    """Expand tabs to four spaces and strip trailing spaces (spaces only)."""
    return line.replace("\t", TAB_REPLACEMENT).rstrip(" ")


def normalize_lines(lines: Iterable[str]) -> Tuple[List[str], bool]:
    """
    Normalize every line in order.

    Returns the new lines and whether any of them differs from the input.
    """
    normalized: List[str] = []
    changed = False
    for line in lines:
        new_line = normalize_line(line)
        if new_line != line:
            changed = True
        normalized.append(new_line)
    return normalized, changed


def _glob_for(pattern: str) -> str:
    # A bare extension like ".java" means "*.java"
    if pattern.startswith(".") and "/" not in pattern and "\\" not in pattern:
        return f"*{pattern}"
    return pattern


def find_files(
    root_dir: str,
    file_patterns: Optional[List[str]],
    ignore_dirs: Optional[List[str]] = None,
    walk_errors: Optional[List[str]] = None,
) -> List[str]:
    """
    Find regular files under root_dir matching any of the patterns.

    Directories that cannot be listed are logged, and their paths are
    appended to walk_errors when a list is given.
    """
    if ignore_dirs is None:
        ignore_dirs = DEFAULT_IGNORE_DIRS

    if not file_patterns:
        file_patterns = DEFAULT_PATTERNS

    globs: List[str] = [_glob_for(p.strip()) for p in file_patterns if p.strip()]
    ignore_dirs_set: Set[str] = set(ignore_dirs)
    all_files: List[str] = []

    def _on_walk_error(err: OSError) -> None:
        dir_path = err.filename if err.filename is not None else root_dir
        logger.error("Cannot list directory %s: %s", dir_path, str(err))
        if walk_errors is not None:
            walk_errors.append(str(dir_path))

    for root, dirs, files in os.walk(root_dir, onerror=_on_walk_error):
        dirs[:] = sorted(d for d in dirs if d not in ignore_dirs_set)

        for filename in sorted(files):
            if not any(Path(filename).match(g) for g in globs):
                continue
            file_path: str = os.path.join(root, filename)
            if os.path.islink(file_path) or not os.path.isfile(file_path):
                logger.debug("Skipping non-regular file: %s", file_path)
                continue
            all_files.append(file_path)

    return all_files


def _read_file(file_path: str) -> Tuple[str, str]:
    """Read a whole file, returning its text and the encoding that worked."""
    try:
        with open(file_path, "r", newline="", encoding="utf-8") as f:
            return f.read(), "utf-8"
    except UnicodeDecodeError:
        logger.warning(
            "UTF-8 decoding failed for %s, falling back to latin-1", file_path
        )
    with open(file_path, "r", newline="", encoding="latin-1") as f:
        return f.read(), "latin-1"


def _chomp(line: str) -> str:
    if line.endswith("\r"):
        return line[:-1]
    return line


def _split_lines(content: str) -> List[str]:
    # Only "\n" ends a line; a "\r" elsewhere is line content. A final
    # terminator does not start another line.
    if not content:
        return []
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [_chomp(line) for line in lines]


def _write_lines(file_path: str, lines: List[str], encoding: str) -> None:
    """Replace file_path with lines, never leaving it half written."""
    fd, tmp_path = tempfile.mkstemp(
        dir=os.path.dirname(os.path.abspath(file_path)),
        prefix=f".{os.path.basename(file_path)}.",
        suffix=".tmp",
    )
    try:
        # Text mode turns each "\n" into the platform line terminator
        with os.fdopen(fd, "w", encoding=encoding) as f:
            for line in lines:
                f.write(line + "\n")
        shutil.copymode(file_path, tmp_path)
        os.replace(tmp_path, file_path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


def process_file(file_path: str, dry_run: bool = False) -> bool:
    """
    Normalize whitespace in a single file.

    Returns True if the file needed changes. Files that need none are
    never opened for writing. OSError propagates to the caller.
    """
    content, encoding_used = _read_file(file_path)
    lines, changed = normalize_lines(_split_lines(content))

    if not changed:
        logger.debug("No changes needed for file: %s", file_path)
        return False

    if dry_run:
        logger.info("Would update: %s", file_path)
        return True

    _write_lines(file_path, lines, encoding_used)

    logger.debug("Updated file: %s", file_path)
    return True


def process_files(
    files: List[str], dry_run: bool = False
) -> Tuple[int, List[str]]:
    """
    Process files one at a time in the given order.

    A file that cannot be read or written is logged and remembered, and
    the run moves on. Returns the number of changed files and the paths
    that failed.
    """
    changed_count = 0
    failed: List[str] = []

    for file_path in tqdm(files, desc="Processing files", unit="file"):
        try:
            if process_file(file_path, dry_run=dry_run):
                changed_count += 1
        except OSError as e:
            failed.append(file_path)
            logger.error("Error processing %s: %s", file_path, str(e))

    logger.info(
        "Changed: %d, Unchanged: %d, Errors: %d",
        changed_count,
        len(files) - changed_count - len(failed),
        len(failed),
    )
    return changed_count, failed


def main() -> int:  # pylint: disable=too-many-return-statements
    try:
        parser = argparse.ArgumentParser(
            description="Expand tabs to spaces and strip trailing spaces in place"
        )
        parser.add_argument(
            "root_dir",
            nargs="?",
            default=None,
            help="Root directory to process (default: current directory)",
        )
        parser.add_argument(
            "file_patterns",
            nargs="*",
            default=None,
            help="File patterns to match, e.g. '.java' or '*.c' (default: .java)",
        )
        parser.add_argument(
            "--ignore-dirs",
            nargs="+",
            default=[],
            help="Directories to skip "
            "(default: .git, .github, __pycache__, node_modules, venv, .venv)",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Report files that would change without writing them",
        )
        parser.add_argument(
            "--verbose", action="store_true", help="Enable verbose logging"
        )
        parser.add_argument(
            "--version",
            action="version",
            version=f"retab v{__version__}",
            help="Show program version and exit",
        )

        args = parser.parse_args()

        if args.verbose:
            logger.setLevel(logging.DEBUG)

        root_dir: str = args.root_dir if args.root_dir else os.getcwd()
        if not os.path.isdir(root_dir):
            logger.error("Error: '%s' is not a valid directory.", root_dir)
            return 1
        root_dir = os.path.abspath(root_dir)

        file_patterns: List[str] = args.file_patterns or DEFAULT_PATTERNS
        ignore_dirs: List[str] = args.ignore_dirs or DEFAULT_IGNORE_DIRS

        logger.info(
            "Searching for files in %s matching patterns: %s",
            root_dir,
            " ".join(file_patterns),
        )
        logger.debug("Ignoring directories: %s", ", ".join(ignore_dirs))

        start_time: float = time.time()

        walk_errors: List[str] = []
        files: List[str] = find_files(
            root_dir, file_patterns, ignore_dirs, walk_errors=walk_errors
        )
        failed: List[str] = []

        if not files:
            logger.warning("No matching files found.")
        else:
            logger.info("Found %d files to process.", len(files))

            changed_count, failed = process_files(files, dry_run=args.dry_run)

            execution_time: float = time.time() - start_time
            logger.info(
                "Done! %s %d of %d files in %.2f seconds.",
                "Would change" if args.dry_run else "Changed",
                changed_count,
                len(files),
                execution_time,
            )

        if walk_errors:
            logger.error("Failed to list %d directories:", len(walk_errors))
            for dir_path in walk_errors:
                logger.error("  %s", dir_path)
        if failed:
            logger.error("Failed to process %d files:", len(failed))
            for file_path in failed:
                logger.error("  %s", file_path)
        return 1 if walk_errors or failed else 0
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user.")
        return 130
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.error("An unexpected error occurred: %s", str(e))
        if logger.level <= logging.DEBUG:
            import traceback  # pylint: disable=import-outside-toplevel

            logger.debug("Traceback: %s", traceback.format_exc())
        return 1


if __name__ == "__main__":
    sys.exit(main())
