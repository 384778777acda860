"""Fixture writer: creates the target directory and writes content verbatim."""

from __future__ import annotations

from pathlib import Path

from fixture_dumper.core.errors import StorageError
from fixture_dumper.core.logging import get_logger

logger = get_logger(__name__)


class FixtureWriter:
    encoding = "utf-8"

    def write(self, path: Path | str, filename: str, content: str) -> Path:
        """Write *content* to ``path/filename``, creating *path* recursively."""
        directory = Path(path)
        target = directory / filename
        try:
            directory.mkdir(parents=True, exist_ok=True)
            # newline="" keeps line endings exactly as rendered
            with open(target, "w", encoding=self.encoding, newline="") as f:
                f.write(content)
        except OSError as e:
            raise StorageError(f"Cannot write fixture {target}: {e}", cause=e).with_context(
                path=str(target)
            ) from e

        logger.info("writer.fixture_written", path=str(target), size=len(content))
        return target
