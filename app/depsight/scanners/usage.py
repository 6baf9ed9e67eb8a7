"""Source usage scanner for declared dependencies.

Walks a project's source tree and reports which package names are
imported or required by at least one file. Matching is lexical: there
is no parsing, alias resolution, or execution, so dynamic imports are
missed and commented-out imports still count.
"""

import asyncio
import logging
import os
import re
from collections.abc import Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from depsight.core.config import DEFAULT_EXCLUDED_DIRS, DEFAULT_SOURCE_EXTENSIONS

logger = logging.getLogger(__name__)


def build_import_patterns(name: str) -> tuple[re.Pattern[str], ...]:
    """Build the patterns that detect an import of a package.

    Args:
        name: Package name (e.g., 'lodash', '@scope/pkg').

    Returns:
        Compiled patterns for keyword imports (exact or subpath),
        exact keyword imports, and call-style require().
    """
    escaped = re.escape(name)
    return (
        # import x from 'name' / from "name/sub" / require 'name'
        re.compile(rf"""(?:import|require|from)\s+['"]{escaped}(?:/|['"])"""),
        re.compile(rf"""(?:import|require|from)\s+['"]{escaped}['"]"""),
        # require('name') / require("name/sub")
        re.compile(rf"""require\(\s*['"]{escaped}(?:/[^'"]*)?['"]\s*\)"""),
    )


def references_package(content: str, patterns: tuple[re.Pattern[str], ...]) -> bool:
    """Check if source text matches any of a package's import patterns."""
    return any(pattern.search(content) for pattern in patterns)


class UsageScanner:
    """Detects which declared packages are referenced in source files.

    Files are read concurrently. A name is marked used on its first
    match and is not tested against later files.

    Args:
        extensions: File extensions (without dot) treated as source.
        excluded_dirs: Directory names whose subtrees are skipped.
        max_workers: Number of threads reading files.

    Example:
        >>> scanner = UsageScanner()
        >>> used = scanner.scan({"react", "lodash"}, Path("."))
    """

    def __init__(
        self,
        *,
        extensions: Iterable[str] = DEFAULT_SOURCE_EXTENSIONS,
        excluded_dirs: Iterable[str] = DEFAULT_EXCLUDED_DIRS,
        max_workers: int = 8,
    ) -> None:
        self._extensions = frozenset(f".{ext.lstrip('.').lower()}" for ext in extensions)
        self._excluded_dirs = frozenset(excluded_dirs)
        self._max_workers = max(1, max_workers)

    def iter_source_files(self, root: Path) -> Iterator[Path]:
        """Yield source files under root, skipping excluded directories.

        Args:
            root: Directory to walk.

        Yields:
            Paths of files with a source extension.

        Raises:
            NotADirectoryError: If root is not a directory.
        """
        if not root.is_dir():
            msg = f"Not a directory: {root}"
            raise NotADirectoryError(msg)

        for dirpath, dirnames, filenames in os.walk(root, onerror=self._log_walk_error):
            # Prune in place so os.walk never descends into excluded trees
            dirnames[:] = [d for d in dirnames if d not in self._excluded_dirs]
            for filename in filenames:
                if os.path.splitext(filename)[1].lower() in self._extensions:
                    yield Path(dirpath) / filename

    def scan(self, names: Iterable[str], root: Path) -> set[str]:
        """Return the subset of names referenced by at least one source file.

        Unreadable files count as containing no match. If the file set
        cannot be enumerated at all, no usage information is returned.

        Args:
            names: Candidate package names.
            root: Project root directory.

        Returns:
            Set of names found in source.
        """
        candidates = {name: build_import_patterns(name) for name in dict.fromkeys(names)}
        used: set[str] = set()
        if not candidates:
            return used

        try:
            files = list(self.iter_source_files(root))
        except OSError as e:
            logger.warning("Cannot enumerate source files under %s: %s", root, e)
            return used

        logger.debug("Scanning %d source files for %d packages", len(files), len(candidates))

        def scan_file(path: Path) -> None:
            if len(used) == len(candidates):
                return
            content = self._read_source(path)
            if content is None:
                return
            for name, patterns in candidates.items():
                if name in used:
                    continue
                if references_package(content, patterns):
                    # set.add is idempotent; a duplicate detection is harmless
                    used.add(name)

        with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
            # Consume the iterator so worker exceptions surface here
            for _ in executor.map(scan_file, files):
                pass

        return used

    async def scan_async(self, names: Iterable[str], root: Path) -> set[str]:
        """Run scan() in a worker thread without blocking the event loop."""
        return await asyncio.to_thread(self.scan, list(names), root)

    @staticmethod
    def _read_source(path: Path) -> str | None:
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Skipping unreadable file %s: %s", path, e)
            return None

    @staticmethod
    def _log_walk_error(error: OSError) -> None:
        logger.debug("Cannot read directory %s: %s", error.filename, error)
