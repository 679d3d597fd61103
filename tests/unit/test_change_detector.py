"""
Unit tests for the ChangeDetector component.
"""

import pytest

from core.exceptions import FilesystemException, ParsingException
from models.target import Target
from services.components.change_detector import ChangeDetector


class TestChangeDetector:
    """Test suite for ChangeDetector"""

    @pytest.fixture
    def detector(self, tmp_path):
        return ChangeDetector(tmp_path / "output")

    @pytest.mark.parametrize(
        "resource_path, expected",
        [
            ("/deadbeef/abcdefg", "abcdefg"),
            ("/c/1a2b3c", "1a2b3c"),
            ("abcdefg", "abcdefg"),
            ("/a/b/c/d", "d"),
        ],
    )
    def test_version_segment(self, resource_path, expected):
        assert ChangeDetector.version_segment(resource_path) == expected

    @pytest.mark.parametrize("resource_path", ["/deadbeef/", "", "/a/..", "/a/."])
    def test_version_segment_rejects_unusable(self, resource_path):
        with pytest.raises(ParsingException):
            ChangeDetector.version_segment(resource_path)

    def test_archive_dir_layout(self, detector, target, tmp_path):
        path = detector.archive_dir(target, "/deadbeef/abcdefg")
        assert path == tmp_path / "output" / "example.com" / "abcdefg"

    def test_new_version_check_is_idempotent(self, detector, target):
        """Checking twice without archiving reports new both times"""
        assert detector.is_new_version(target, "/deadbeef/abcdefg") is True
        assert detector.is_new_version(target, "/deadbeef/abcdefg") is True

    def test_not_new_after_mark_archived(self, detector, target):
        path = detector.mark_archived(target, "/deadbeef/abcdefg")

        assert path.is_dir()
        for _ in range(3):
            assert detector.is_new_version(target, "/deadbeef/abcdefg") is False

    def test_keyed_on_trailing_segment_only(self, detector, target):
        detector.mark_archived(target, "/deadbeef/abcdefg")
        # Different hash, same trailing segment
        assert detector.is_new_version(target, "/cafebabe/abcdefg") is False
        assert detector.is_new_version(target, "/deadbeef/hijklmn") is True

    def test_keyed_per_host(self, detector, target):
        detector.mark_archived(target, "/deadbeef/abcdefg")
        other = Target(host="other.org", siteKey="abc")
        assert detector.is_new_version(other, "/deadbeef/abcdefg") is True

    def test_any_existing_entry_counts(self, detector, target, tmp_path):
        host_dir = tmp_path / "output" / "example.com"
        host_dir.mkdir(parents=True)
        (host_dir / "abcdefg").write_text("not a directory")

        assert detector.is_new_version(target, "/deadbeef/abcdefg") is False

    def test_mark_archived_is_repeatable(self, detector, target):
        first = detector.mark_archived(target, "/deadbeef/abcdefg")
        second = detector.mark_archived(target, "/deadbeef/abcdefg")
        assert first == second

    def test_mark_archived_failure(self, tmp_path, target):
        blocker = tmp_path / "output"
        blocker.write_text("a file where the output root should be")
        detector = ChangeDetector(blocker)

        with pytest.raises(FilesystemException):
            detector.mark_archived(target, "/deadbeef/abcdefg")
