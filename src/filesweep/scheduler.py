"""
Scheduler: runs resolved files through a processor on a thread pool.

Files are loaded and processed concurrently, but results are always returned
in ascending path order, independent of completion order. A failure in one
file becomes an error message on that file and never affects its siblings.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed

from filesweep.processors import Processor
from filesweep.vfile import VirtualFile

logger = logging.getLogger(__name__)


def default_concurrency() -> int:
    return min(32, (os.cpu_count() or 1) + 4)


class Scheduler:
    def __init__(self, processor: Processor, concurrency: int | None = None) -> None:
        self._processor: Processor = processor
        self._concurrency: int = max(1, concurrency or default_concurrency())

    def run(self, files: Sequence[VirtualFile]) -> list[VirtualFile]:
        """
        Process every file that has no resolution error and return all files
        sorted by path. Files with errors skip the processor entirely.
        """
        pending = [f for f in files if not f.has_errors]
        logger.debug(
            "Dispatching %d of %d files (concurrency %d)",
            len(pending),
            len(files),
            self._concurrency,
        )

        if self._concurrency == 1 or len(pending) <= 1:
            for vfile in pending:
                self._process_one(vfile)
        else:
            with ThreadPoolExecutor(max_workers=self._concurrency) as executor:
                futures = {executor.submit(self._process_one, f): f for f in pending}
                for future in as_completed(futures):
                    # `_process_one` records failures on the file itself.
                    future.result()

        return sorted(files, key=lambda f: str(f.path))

    def _process_one(self, vfile: VirtualFile) -> None:
        try:
            if vfile.content is None:
                vfile.content = vfile.path.read_text(encoding="utf-8")
            self._processor.process(vfile)
        except Exception as e:
            logger.debug("Processing failed for %s: %s", vfile.path, e)
            vfile.error(describe_error(e))


def describe_error(error: Exception) -> str:
    if isinstance(error, FileNotFoundError):
        return "No such file or directory"
    if isinstance(error, IsADirectoryError):
        return "Cannot read a directory"
    if isinstance(error, UnicodeDecodeError):
        return "Cannot decode file as UTF-8"
    return str(error) or type(error).__name__
