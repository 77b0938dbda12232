import hashlib
import os

import pytest

from patchcatalog.fingerprint import calculate_checksum


def test_checksum_is_md5_of_directory_and_content(tmp_path):
    patch = tmp_path / "testfile.mmp"
    patch.write_bytes(b"test data")

    expected = hashlib.md5(str(tmp_path).encode("utf-8") + b"test data").hexdigest()
    assert calculate_checksum(str(patch)) == expected


def test_checksum_is_stable_and_lowercase_hex(tmp_path):
    patch = tmp_path / "testfile.mmp"
    patch.write_bytes(b"\x00\x01\x02")

    first = calculate_checksum(str(patch))
    assert first == calculate_checksum(str(patch))
    assert len(first) == 32
    assert first == first.lower()
    int(first, 16)


def test_same_bytes_in_another_directory_differ(tmp_path):
    a = tmp_path / "bank01" / "patch01" / "same.mmp"
    b = tmp_path / "bank02" / "patch01" / "same.mmp"
    for p in (a, b):
        p.parent.mkdir(parents=True)
        p.write_bytes(b"identical")

    assert calculate_checksum(str(a)) != calculate_checksum(str(b))


def test_different_bytes_in_same_directory_differ(tmp_path):
    a = tmp_path / "a.mmp"
    b = tmp_path / "b.mmp"
    a.write_bytes(b"one")
    b.write_bytes(b"two")

    assert calculate_checksum(str(a)) != calculate_checksum(str(b))


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        calculate_checksum(os.path.join(str(tmp_path), "missing.mmp"))
