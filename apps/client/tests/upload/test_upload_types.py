"""Tests for maquette/upload/types.py and maquette/upload/naming.py."""

import dataclasses
from pathlib import Path

import pytest

from maquette.upload.naming import DEFAULT_FILENAMES, default_namer
from maquette.upload.types import (
    CANONICAL_VARIANTS,
    DEFAULT_MIME_TYPE,
    ArtifactSet,
    UploadRequest,
    Variant,
)


class TestVariant:
    def test_default_has_no_query_value(self):
        assert Variant.DEFAULT.query_value is None
        assert Variant.DEFAULT.label == "default"

    def test_named_variants_query_values(self):
        assert [v.query_value for v in CANONICAL_VARIANTS[1:]] == ["match", "interactive", "gesture"]

    def test_nomatch_is_not_canonical(self):
        assert Variant.NOMATCH not in CANONICAL_VARIANTS
        assert Variant.NOMATCH.query_value == "nomatch"

    def test_artifact_names(self):
        assert Variant.DEFAULT.artifact_name == "zip"
        assert Variant.MATCH.artifact_name == "non_interactive"
        assert Variant.INTERACTIVE.artifact_name == "interactive"
        assert Variant.GESTURE.artifact_name == "gesture"


class TestUploadRequest:
    def test_empty_bytes_rejected(self):
        with pytest.raises(ValueError):
            UploadRequest(b"", "a.png", "image/png")

    def test_empty_mime_type_rejected(self):
        with pytest.raises(ValueError):
            UploadRequest(b"x", "a.png", "")

    def test_is_immutable(self):
        request = UploadRequest(b"x", "a.png", "image/png")
        with pytest.raises(dataclasses.FrozenInstanceError):
            request.filename = "b.png"

    def test_from_picker_defaults(self):
        request = UploadRequest.from_picker(b"x")
        assert request.filename == "photo.png"
        assert request.mime_type == "image/png"

    def test_from_picker_guesses_from_extension(self):
        request = UploadRequest.from_picker(b"x", "IMG_0001.jpg")
        assert request.mime_type == "image/jpeg"

    def test_from_picker_prefers_explicit_mime_type(self):
        request = UploadRequest.from_picker(b"x", "IMG_0001.jpg", "image/heic")
        assert request.mime_type == "image/heic"

    def test_from_picker_falls_back_to_jpeg(self):
        request = UploadRequest.from_picker(b"x", "asset-identifier-without-extension")
        assert request.mime_type == DEFAULT_MIME_TYPE

    def test_from_path(self, tmp_path):
        image = tmp_path / "pose.png"
        image.write_bytes(b"\x89PNG")

        request = UploadRequest.from_path(image)

        assert request.image_bytes == b"\x89PNG"
        assert request.filename == "pose.png"
        assert request.mime_type == "image/png"

    def test_from_path_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            UploadRequest.from_path(tmp_path / "missing.jpg")


class TestArtifactSet:
    def _make(self) -> ArtifactSet:
        return ArtifactSet({
            Variant.DEFAULT: Path("/a/maquette_variants.zip"),
            Variant.MATCH: Path("/a/maquette_modified_rings.glb"),
        })

    def test_lookup_by_variant_and_name(self):
        artifacts = self._make()
        assert artifacts[Variant.MATCH] == artifacts["non_interactive"]

    def test_contains(self):
        artifacts = self._make()
        assert Variant.DEFAULT in artifacts
        assert "zip" in artifacts
        assert "gesture" not in artifacts
        assert "unknown" not in artifacts
        assert 42 not in artifacts

    def test_get_with_default(self):
        artifacts = self._make()
        assert artifacts.get("gesture") is None
        assert artifacts.get("zip") == Path("/a/maquette_variants.zip")

    def test_missing_key_raises(self):
        with pytest.raises(KeyError):
            self._make()["interactive"]

    def test_cannot_be_mutated(self):
        artifacts = self._make()
        with pytest.raises(TypeError):
            artifacts.paths[Variant.GESTURE] = Path("/a/x.png")

    def test_to_dict(self):
        assert self._make().to_dict() == {
            "zip": "/a/maquette_variants.zip",
            "non_interactive": "/a/maquette_modified_rings.glb",
        }

    def test_is_hashable(self):
        assert hash(ArtifactSet({})) == hash(ArtifactSet())
        assert hash(self._make()) == hash(self._make())
        assert len({self._make(), self._make(), ArtifactSet({})}) == 2


class TestDefaultNamer:
    def test_every_variant_has_a_file_name(self):
        assert set(DEFAULT_FILENAMES) == set(Variant)

    def test_file_names_are_distinct(self):
        assert len(set(DEFAULT_FILENAMES.values())) == len(Variant)

    def test_known_names(self):
        assert default_namer(Variant.DEFAULT) == "maquette_variants.zip"
        assert default_namer(Variant.MATCH) == "maquette_modified_rings.glb"
        assert default_namer(Variant.INTERACTIVE) == "maquette_interactive.glb"
        assert default_namer(Variant.GESTURE) == "maquette_gesture.png"
