"""Tests for source normalization and file name sanitizing."""

from pathlib import Path

import pytest

from medialibrary.exceptions import UnknownType
from medialibrary.sources import (
    LocalPath,
    RemoteRef,
    SourceContext,
    SourceKind,
    TemporaryRef,
    UploadedHandle,
    default_sanitizer,
    resolve,
)


class TestResolve:
    def test_local_path(self):
        resolved = resolve(LocalPath("/tmp/photos/beach day.jpg"))
        assert resolved.location == "/tmp/photos/beach day.jpg"
        assert resolved.file_name == "beach day.jpg"
        assert resolved.media_name == "beach day"
        assert resolved.kind is SourceKind.LOCAL

    @pytest.mark.parametrize("value", ["/tmp/a/report.pdf", Path("/tmp/a/report.pdf")])
    def test_strings_and_paths_are_local(self, value):
        """Test that str and PathLike are shorthand for LocalPath."""
        resolved = resolve(value)
        assert resolved.kind is SourceKind.LOCAL
        assert resolved.file_name == "report.pdf"
        assert resolved.media_name == "report"

    def test_remote_ref(self):
        resolved = resolve(RemoteRef("s3", "incoming/abc123", "Quarterly report", "q3.pdf"))
        assert resolved.location == "incoming/abc123"
        assert resolved.file_name == "q3.pdf"
        assert resolved.media_name == "Quarterly report"
        assert resolved.kind is SourceKind.REMOTE

    def test_remote_ref_defaults_names_to_key(self):
        resolved = resolve(RemoteRef("s3", "incoming/q3.pdf"))
        assert resolved.file_name == "q3.pdf"
        assert resolved.media_name == "q3"

    def test_uploaded_handle(self):
        resolved = resolve(UploadedHandle("/tmp/php1234", "Holiday Photo.jpeg"))
        assert resolved.location == "/tmp/php1234"
        assert resolved.file_name == "Holiday Photo.jpeg"
        assert resolved.media_name == "Holiday Photo"
        assert resolved.kind is SourceKind.UPLOADED

    def test_temporary_ref_is_not_normalized(self):
        resolved = resolve(TemporaryRef("tmp-1"))
        assert resolved.kind is SourceKind.TEMPORARY
        assert resolved.location == ""

    @pytest.mark.parametrize("value", [42, None, b"/tmp/file", {"path": "/tmp/x"}])
    def test_unknown_types_rejected(self, value):
        with pytest.raises(UnknownType):
            resolve(value)


class TestSanitizer:
    @pytest.mark.parametrize(
        ("file_name", "expected"),
        [
            ("my file.jpg", "my-file.jpg"),
            ("a#b.png", "a-b.png"),
            ("dir/name.txt", "dir-name.txt"),
            ("dir\\name.txt", "dir-name.txt"),
            ("# / \\.txt", "-----.txt"),
        ],
    )
    def test_replaces_unsafe_characters(self, file_name: str, expected: str):
        assert default_sanitizer(file_name) == expected

    @pytest.mark.parametrize("file_name", ["clean.png", "a-b_c.d.tar.gz", "ünïcode.pdf"])
    def test_clean_names_are_unchanged(self, file_name: str):
        assert default_sanitizer(file_name) == file_name
        assert default_sanitizer(default_sanitizer(file_name)) == file_name


def test_context_for_source_copies_resolved_names():
    context = SourceContext.for_source("/tmp/x/My Doc.pdf")
    assert context.file_name == "My Doc.pdf"
    assert context.media_name == "My Doc"
    assert context.kind is SourceKind.LOCAL
    assert context.preserve_original is False
    assert context.file_name_sanitizer is default_sanitizer
