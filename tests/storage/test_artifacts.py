"""Tests for the artifact store."""

import datetime as dt
import json
import os
from pathlib import Path

import pytest

from commit_activity.exceptions import (
    ArtifactParseError,
    InvalidDocumentError,
    InvalidInputError,
    NotFoundError,
    StorageError,
)
from commit_activity.intervals import DateRange, Granularity
from commit_activity.storage import ArtifactStore, artifact_filename


def write_json(path, content, mtime):
    path.write_text(json.dumps(content))
    os.utime(path, (mtime, mtime))


class TestListArtifacts:
    def test_newest_first(self, tmp_path):
        write_json(tmp_path / "old.json", {}, 1_000_000)
        write_json(tmp_path / "new.json", {}, 3_000_000)
        write_json(tmp_path / "mid.json", {}, 2_000_000)

        assert ArtifactStore(tmp_path).list_artifacts() == ["new.json", "mid.json", "old.json"]

    def test_only_visible_json_files(self, tmp_path):
        (tmp_path / "notes.txt").write_text("hi")
        (tmp_path / ".tmp-123.json").write_text("{}")
        (tmp_path / "sub.json").mkdir()
        (tmp_path / "real.json").write_text("{}")

        assert ArtifactStore(tmp_path).list_artifacts() == ["real.json"]

    def test_missing_directory(self, tmp_path):
        with pytest.raises(NotFoundError):
            ArtifactStore(tmp_path / "nope").list_artifacts()


class TestReadArtifact:
    @pytest.mark.parametrize("name", ["../secret.json", "a/b.json", "..\\b.json", "", "..", "a\x00.json"])
    def test_rejects_unsafe_names(self, tmp_path, name):
        with pytest.raises(InvalidInputError):
            ArtifactStore(tmp_path).read_raw(name)

    def test_missing_file(self, tmp_path):
        with pytest.raises(NotFoundError) as exc_info:
            ArtifactStore(tmp_path).read_raw("absent.json")
        assert str(tmp_path) not in str(exc_info.value)

    def test_invalid_json(self, tmp_path):
        (tmp_path / "broken.json").write_text("{not json")

        with pytest.raises(ArtifactParseError) as exc_info:
            ArtifactStore(tmp_path).read_raw("broken.json")
        assert isinstance(exc_info.value, InvalidDocumentError)

    def test_read_document(self, tmp_path, team_document):
        (tmp_path / "team.json").write_text(json.dumps(team_document.to_dict()))
        assert ArtifactStore(tmp_path).read_artifact("team.json") == team_document

    def test_schema_error_names_file(self, tmp_path):
        (tmp_path / "odd.json").write_text(json.dumps({"data": []}))

        with pytest.raises(InvalidDocumentError) as exc_info:
            ArtifactStore(tmp_path).read_artifact("odd.json")
        assert exc_info.value.source == "odd.json"


class TestFilesystemFailures:
    """OS errors surface as domain errors."""

    def test_file_vanishing_during_listing_is_skipped(self, tmp_path, monkeypatch):
        write_json(tmp_path / "kept.json", {}, 1_000_000)
        write_json(tmp_path / "gone.json", {}, 2_000_000)
        real_stat = Path.stat

        def flaky_stat(self, *args, **kwargs):
            if self.name == "gone.json":
                raise FileNotFoundError(self)
            return real_stat(self, *args, **kwargs)

        monkeypatch.setattr(Path, "stat", flaky_stat)

        assert ArtifactStore(tmp_path).list_artifacts() == ["kept.json"]

    def test_unreadable_directory(self, tmp_path, monkeypatch):
        def denied(self):
            raise PermissionError(13, "Permission denied", str(self))

        monkeypatch.setattr(Path, "iterdir", denied)

        with pytest.raises(StorageError) as exc_info:
            ArtifactStore(tmp_path).list_artifacts()
        assert exc_info.value.message == "Unable to list artifacts"

    def test_unreadable_file(self, tmp_path, monkeypatch):
        write_json(tmp_path / "a.json", {}, 1_000_000)

        def denied(self, *args, **kwargs):
            raise PermissionError(13, "Permission denied", str(self))

        monkeypatch.setattr(Path, "read_text", denied)

        with pytest.raises(StorageError):
            ArtifactStore(tmp_path).read_raw("a.json")


class TestWriteArtifact:
    def test_writes_pretty_json_and_creates_dir(self, tmp_path, team_document):
        store = ArtifactStore(tmp_path / "out")

        path = store.write_artifact("team.json", team_document)

        assert path.read_text().startswith('{\n  "data": [')
        assert store.read_artifact("team.json") == team_document
        assert store.list_artifacts() == ["team.json"]

    def test_rejects_unsafe_name(self, tmp_path, team_document):
        with pytest.raises(InvalidInputError):
            ArtifactStore(tmp_path).write_artifact("../team.json", team_document)


class TestArtifactFilename:
    def test_pattern(self):
        date_range = DateRange(dt.date(2024, 1, 1), dt.date(2024, 3, 31))
        name = artifact_filename("webapp", date_range, Granularity.WEEK)
        assert name == "webapp_2024-01-01_to_2024-03-31_week.json"
