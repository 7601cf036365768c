"""Artifact storage for collected time-series documents."""

from .artifacts import ArtifactStore, artifact_filename, validate_filename

__all__ = ["ArtifactStore", "artifact_filename", "validate_filename"]
