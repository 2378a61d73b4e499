"""Tests for artifact naming and scoped cleanup."""

import threading
from unittest.mock import patch

import pytest

from preprocessing import ArtifactSet


class TestReserve:
    def test_creates_empty_file_next_to_source(self, sample_image):
        with ArtifactSet() as artifacts:
            path = artifacts.reserve(sample_image, "sharpening")
            assert path.exists()
            assert path.stat().st_size == 0
            assert path.parent == sample_image.parent
            assert path.name.startswith(f"upload_sharpening_{artifacts.token}_")
            assert path.suffix == ".png"

    def test_custom_directory_is_created(self, sample_image, tmp_path):
        target = tmp_path / "nested" / "artifacts"
        with ArtifactSet(target) as artifacts:
            path = artifacts.reserve(sample_image, "median_blur")
            assert path.parent == target

    def test_same_label_never_collides(self, sample_image):
        with ArtifactSet() as artifacts:
            paths = {artifacts.reserve(sample_image, "auto_rotate") for _ in range(20)}
            assert len(paths) == 20

    def test_runs_have_distinct_tokens(self):
        assert ArtifactSet().token != ArtifactSet().token

    def test_concurrent_runs_do_not_collide(self, sample_image):
        reserved = []
        lock = threading.Lock()

        def worker():
            artifacts = ArtifactSet()
            paths = [artifacts.reserve(sample_image, "sharpening") for _ in range(10)]
            with lock:
                reserved.extend(paths)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(set(reserved)) == 80


class TestCleanup:
    def test_deletes_every_tracked_file(self, sample_image):
        artifacts = ArtifactSet()
        paths = [artifacts.reserve(sample_image, f"s{i}") for i in range(3)]
        counts = artifacts.cleanup()
        assert counts == {"deleted": 3, "missing": 0, "failed": 0}
        assert not any(p.exists() for p in paths)
        assert sample_image.exists()

    def test_second_cleanup_is_noop(self, sample_image):
        artifacts = ArtifactSet()
        artifacts.reserve(sample_image, "x")
        artifacts.cleanup()
        assert artifacts.cleanup() == {"deleted": 0, "missing": 0, "failed": 0}
        assert len(artifacts) == 0

    def test_missing_file_is_counted(self, sample_image):
        artifacts = ArtifactSet()
        path = artifacts.reserve(sample_image, "x")
        path.unlink()
        assert artifacts.cleanup()["missing"] == 1

    def test_failure_does_not_stop_other_deletions(self, sample_image):
        artifacts = ArtifactSet()
        first = artifacts.reserve(sample_image, "a")
        second = artifacts.reserve(sample_image, "b")
        original_unlink = type(first).unlink

        def flaky_unlink(self, *args, **kwargs):
            if self == first:
                raise PermissionError("locked")
            return original_unlink(self, *args, **kwargs)

        with patch.object(type(first), "unlink", flaky_unlink):
            counts = artifacts.cleanup()

        assert counts == {"deleted": 1, "missing": 0, "failed": 1}
        assert not second.exists()
        first.unlink()

    def test_context_manager_cleans_up_on_error(self, sample_image):
        with pytest.raises(RuntimeError):
            with ArtifactSet() as artifacts:
                path = artifacts.reserve(sample_image, "x")
                raise RuntimeError("boom")
        assert not path.exists()
