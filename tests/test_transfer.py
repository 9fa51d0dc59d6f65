"""Tests for the transfer executor."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from bucket_mirror.errors import TransferError
from bucket_mirror.transfer import SizeMismatchError, transfer


class TestSuccessfulTransfer:
    def test_writes_all_bytes(self, fake_store, tmp_path: Path):
        store = fake_store([{"k": b"abcdefghij"}])
        dest = tmp_path / "k"

        written = transfer(store, "k", str(dest), expected_size=10, chunk_size=3)

        assert written == 10
        assert dest.read_bytes() == b"abcdefghij"

    def test_truncates_existing_file(self, fake_store, tmp_path: Path):
        dest = tmp_path / "k"
        dest.write_bytes(b"previous content that is longer")
        store = fake_store([{"k": b"new"}])

        transfer(store, "k", str(dest))

        assert dest.read_bytes() == b"new"

    def test_empty_object(self, fake_store, tmp_path: Path):
        store = fake_store([{"empty": b""}])
        dest = tmp_path / "empty"

        assert transfer(store, "empty", str(dest), expected_size=0) == 0
        assert dest.exists()


class TestFailedTransferLeavesNoFile:
    def test_stream_error(self, fake_store, tmp_path: Path):
        store = fake_store([{"k": b"0123456789"}])
        store.fail_keys = {"k": 5}
        dest = tmp_path / "k"

        with pytest.raises(TransferError) as exc_info:
            transfer(store, "k", str(dest), chunk_size=5)

        assert exc_info.value.key == "k"
        assert isinstance(exc_info.value.cause, ConnectionError)
        assert not dest.exists()

    def test_size_mismatch(self, fake_store, tmp_path: Path):
        store = fake_store([{"k": b"short"}])
        dest = tmp_path / "k"

        with pytest.raises(TransferError) as exc_info:
            transfer(store, "k", str(dest), expected_size=100)

        assert isinstance(exc_info.value.cause, SizeMismatchError)
        assert exc_info.value.cause.received == 5
        assert not dest.exists()

    def test_write_failure(self, tmp_path: Path, monkeypatch):
        real_open = open

        class DiskFull:
            def __init__(self, path, mode):
                self.f = real_open(path, mode)

            def __enter__(self):
                return self

            def __exit__(self, *exc):
                self.f.close()

            def write(self, data):
                raise OSError(28, "No space left on device")

        monkeypatch.setattr("bucket_mirror.transfer.open", DiskFull, raising=False)
        store = MagicMock()
        store.iter_object.return_value = (chunk for chunk in [b"abc", b"def"])
        dest = tmp_path / "k"

        with pytest.raises(TransferError) as exc_info:
            transfer(store, "k", str(dest), chunk_size=3)

        assert "No space left" in str(exc_info.value)
        assert not dest.exists()

    def test_get_failure_removes_previous_stale_copy(self, tmp_path: Path):
        dest = tmp_path / "k"
        dest.write_bytes(b"stale")
        store = MagicMock()
        store.iter_object.side_effect = ConnectionError("refused")

        with pytest.raises(TransferError):
            transfer(store, "k", str(dest))

        assert not dest.exists()


class TestStreamClosed:
    def test_stream_closed_after_write_failure(self, tmp_path: Path, monkeypatch):
        closed = []

        def chunks():
            try:
                yield b"abc"
                yield b"def"
            finally:
                closed.append(True)

        class ReadOnlyDisk:
            def __init__(self, path, mode):
                pass

            def __enter__(self):
                return self

            def __exit__(self, *exc):
                pass

            def write(self, data):
                raise OSError(30, "Read-only file system")

        monkeypatch.setattr("bucket_mirror.transfer.open", ReadOnlyDisk, raising=False)
        store = MagicMock()
        store.iter_object.return_value = chunks()

        with pytest.raises(TransferError):
            transfer(store, "k", str(tmp_path / "k"), chunk_size=3)

        assert closed == [True]
