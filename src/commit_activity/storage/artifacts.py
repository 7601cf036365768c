"""Artifact storage: JSON time-series files in one flat data directory.

Filenames are logical names only. Anything that could address a path
outside the data directory is rejected before touching the filesystem.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from ..documents import TimeSeriesDocument
from ..exceptions import ArtifactParseError, InvalidInputError, NotFoundError, StorageError
from ..intervals import DateRange, Granularity
from ..logging_config import get_logger

logger = get_logger(__name__)

ARTIFACT_SUFFIX = ".json"


def artifact_filename(repo_name: str, date_range: DateRange, granularity: Granularity) -> str:
    """``<repo>_<start>_to_<end>_<granularity>.json``"""
    start = date_range.start.isoformat()
    end = date_range.end.isoformat()
    return validate_filename(f"{repo_name}_{start}_to_{end}_{granularity.value}{ARTIFACT_SUFFIX}")


def validate_filename(filename: str) -> str:
    """Return *filename* if it names a file directly inside the data directory.

    Raises:
        InvalidInputError: For empty names, ``.``/``..``, NUL bytes or any
            path separator
    """
    if not isinstance(filename, str) or not filename:
        raise InvalidInputError("filename", filename, "must not be empty")
    if "/" in filename or "\\" in filename:
        raise InvalidInputError("filename", filename, "must not contain path separators")
    if "\x00" in filename or filename in (".", ".."):
        raise InvalidInputError("filename", filename, "not a valid file name")
    return filename


class ArtifactStore:
    """Lists, reads and writes artifacts in *data_dir*."""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    def list_artifacts(self) -> list[str]:
        """Artifact filenames, most recently modified first.

        Raises:
            NotFoundError: If the data directory does not exist
            StorageError: If the directory cannot be read
        """
        if not self.data_dir.is_dir():
            raise NotFoundError("Data directory", self.data_dir.name)

        try:
            candidates = [
                p
                for p in self.data_dir.iterdir()
                if p.is_file() and p.suffix == ARTIFACT_SUFFIX and not p.name.startswith(".")
            ]
        except OSError as e:
            raise StorageError("list artifacts", str(e))

        entries: list[tuple[int, str]] = []
        for path in candidates:
            try:
                entries.append((path.stat().st_mtime_ns, path.name))
            except FileNotFoundError:
                # Deleted or replaced between listing and stat.
                logger.debug("Artifact %s disappeared while listing", path.name)
            except OSError as e:
                raise StorageError("list artifacts", str(e))
        entries.sort(key=lambda entry: (-entry[0], entry[1]))
        return [name for _, name in entries]

    def read_raw(self, filename: str) -> Any:
        """Decoded JSON content of an artifact.

        Raises:
            InvalidInputError: If *filename* is unsafe
            NotFoundError: If the file does not exist
            ArtifactParseError: If the content is not valid JSON
            StorageError: If the file cannot be read
        """
        path = self.data_dir / validate_filename(filename)
        if not path.is_file():
            raise NotFoundError("File", filename)

        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ArtifactParseError(filename, str(e))
        except FileNotFoundError:
            raise NotFoundError("File", filename)
        except OSError as e:
            raise StorageError(f"read {filename}", str(e))
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning("Artifact %s is not valid JSON: %s", filename, e)
            raise ArtifactParseError(filename, e.msg)

    def read_artifact(self, filename: str) -> TimeSeriesDocument:
        """Read and validate an artifact as a TimeSeriesDocument."""
        return TimeSeriesDocument.from_dict(self.read_raw(filename), source=filename)

    def write_artifact(self, filename: str, document: TimeSeriesDocument) -> Path:
        """Write *document* atomically, replacing any file of the same name."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        target = self.data_dir / validate_filename(filename)

        fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, prefix=".tmp-", suffix=ARTIFACT_SUFFIX)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document.to_dict(), f, indent=2, ensure_ascii=False)
                f.write("\n")
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug("Wrote artifact %s", target)
        return target
