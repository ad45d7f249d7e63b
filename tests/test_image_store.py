"""
Test content-addressed image storage.

Covers:
- idempotent, deduplicated writes
- reference format (sha256 hex + .jpg)
- path-traversal and extension validation
- "invalid" vs "not found" separation
"""

import hashlib
import os
import stat

import pytest

from core.errors import InvalidPathError, NotFoundError, ValidationError
from images.store import FileImageStore, InMemoryImageStore, build_image_path, image_reference

JPEG_A = b"\xff\xd8\xff\xe0image-a\xff\xd9"
JPEG_B = b"\xff\xd8\xff\xe0image-b\xff\xd9"


def _stored_files(directory):
    return sorted(p.name for p in directory.iterdir() if p.name != "default.jpg")


class TestPut:
    def test_reference_is_sha256_hex_with_jpg_extension(self, image_store):
        ref = image_store.put(JPEG_A)
        assert ref == hashlib.sha256(JPEG_A).hexdigest() + ".jpg"

    def test_writes_file_with_content(self, image_store, image_dir):
        ref = image_store.put(JPEG_A)
        assert (image_dir / ref).read_bytes() == JPEG_A

    def test_same_bytes_stored_once(self, image_store, image_dir):
        first = image_store.put(JPEG_A)
        mtime = os.stat(image_dir / first).st_mtime_ns

        second = image_store.put(JPEG_A)

        assert first == second
        assert _stored_files(image_dir) == [first]
        assert os.stat(image_dir / first).st_mtime_ns == mtime

    def test_different_bytes_get_different_references(self, image_store, image_dir):
        ref_a = image_store.put(JPEG_A)
        ref_b = image_store.put(JPEG_B)
        assert ref_a != ref_b
        assert _stored_files(image_dir) == sorted([ref_a, ref_b])

    def test_existing_file_is_not_rewritten(self, image_store, image_dir):
        ref = image_reference(JPEG_A)
        (image_dir / ref).write_bytes(b"pre-existing")

        assert image_store.put(JPEG_A) == ref
        assert (image_dir / ref).read_bytes() == b"pre-existing"

    def test_empty_bytes_rejected(self, image_store, image_dir):
        with pytest.raises(ValidationError):
            image_store.put(b"")
        assert _stored_files(image_dir) == []

    def test_creates_missing_root(self, tmp_path):
        store = FileImageStore(tmp_path / "not" / "yet")
        ref = store.put(JPEG_A)
        assert (tmp_path / "not" / "yet" / ref).is_file()

    def test_no_temp_files_left_behind(self, image_store, image_dir):
        image_store.put(JPEG_A)
        image_store.put(JPEG_B)
        assert not [p for p in image_dir.iterdir() if p.name.startswith(".tmp_")]

    def test_new_file_mode_follows_umask(self, image_store, image_dir, umask_022):
        ref = image_store.put(JPEG_A)
        assert stat.S_IMODE(os.stat(image_dir / ref).st_mode) == 0o644


class TestResolve:
    def test_resolves_stored_image(self, image_store, image_dir):
        ref = image_store.put(JPEG_A)
        path = image_store.resolve(ref)
        assert path.read_bytes() == JPEG_A
        assert path.parent == image_dir

    def test_accepts_jpeg_extension(self, image_store, image_dir):
        (image_dir / "photo.jpeg").write_bytes(JPEG_A)
        assert image_store.resolve("photo.jpeg") == image_dir / "photo.jpeg"

    def test_missing_image_is_not_found(self, image_store):
        with pytest.raises(NotFoundError):
            image_store.resolve("missing.jpg")

    def test_directory_named_like_image_is_not_found(self, image_store, image_dir):
        (image_dir / "folder.jpg").mkdir()
        with pytest.raises(NotFoundError):
            image_store.resolve("folder.jpg")

    def test_empty_name_rejected(self, image_store):
        with pytest.raises(ValidationError):
            image_store.resolve("")

    @pytest.mark.parametrize(
        "name",
        [
            "../secret.jpg",
            "../../etc/passwd.jpg",
            "sub/../../secret.jpg",
            "..%2Fsecret.jpg",
            "%2e%2e%2fsecret.jpg",
            "..\\secret.jpg",
            "/etc/secret.jpg",
        ],
    )
    def test_traversal_rejected(self, image_store, image_dir, name):
        # A real file outside the root must still not be reachable.
        (image_dir.parent / "secret.jpg").write_bytes(JPEG_A)
        with pytest.raises(InvalidPathError):
            image_store.resolve(name)

    @pytest.mark.parametrize(
        "name",
        ["notes.txt", "image.png", "image.jpg.exe", "image", "image.jpg\x00.png", "image.JPG", "image.Jpeg"],
    )
    def test_wrong_extension_rejected(self, image_store, image_dir, name):
        (image_dir / "notes.txt").write_text("hello")
        with pytest.raises(InvalidPathError):
            image_store.resolve(name)

    def test_bare_extension_name_passes_validation(self, image_store):
        with pytest.raises(NotFoundError):
            image_store.resolve(".jpg")

    def test_validation_runs_before_existence_check(self, image_store):
        # Neither file exists; the unsafe one must still be reported as invalid.
        with pytest.raises(InvalidPathError):
            image_store.resolve("../missing.jpg")
        with pytest.raises(NotFoundError):
            image_store.resolve("missing.jpg")

    def test_inner_parent_segments_are_cleaned(self, image_store, image_dir):
        ref = image_store.put(JPEG_A)
        assert image_store.resolve(f"sub/../{ref}") == image_dir / ref


def test_build_image_path_stays_under_root(tmp_path):
    path = build_image_path(tmp_path, "a/b/../c.jpg")
    assert path == tmp_path / "a" / "c.jpg"


class TestInMemoryImageStore:
    def test_put_is_idempotent(self):
        store = InMemoryImageStore()
        assert store.put(JPEG_A) == store.put(JPEG_A)
        assert len(store.blobs) == 1

    def test_resolve_shares_validation(self):
        store = InMemoryImageStore()
        ref = store.put(JPEG_A)
        assert store.resolve(ref).name == ref
        with pytest.raises(InvalidPathError):
            store.resolve("../" + ref)
        with pytest.raises(NotFoundError):
            store.resolve("missing.jpg")
