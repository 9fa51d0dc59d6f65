import logging

import pytest

from bucket_mirror.store import ObjectDescriptor, ObjectStore


class FakeStore(ObjectStore):
    """In-memory bucket. ``pages`` is a list of {key: content} dicts."""

    def __init__(self, pages=None, bucket_name="test-bucket"):
        self.bucket_name = bucket_name
        self.pages = pages if pages is not None else [{}]
        self.fail_page = None
        self.fail_keys = {}
        self.pages_fetched = 0
        self.get_calls = []

    @classmethod
    def sized(cls, sizes, **kwargs):
        return cls([{key: b"x" * size for key, size in sizes.items()}], **kwargs)

    def iter_pages(self):
        for index, page in enumerate(self.pages):
            if self.fail_page == index:
                raise ConnectionError("listing page unavailable")
            self.pages_fetched += 1
            yield [ObjectDescriptor(key=k, size=len(v)) for k, v in page.items()]

    def iter_object(self, key, chunk_size):
        self.get_calls.append(key)
        data = next(page[key] for page in self.pages if key in page)
        for offset in range(0, len(data), chunk_size):
            if key in self.fail_keys and offset >= self.fail_keys[key]:
                raise ConnectionError("connection reset by peer")
            yield data[offset : offset + chunk_size]


@pytest.fixture
def local_root(tmp_path):
    return str(tmp_path / "mirror")


@pytest.fixture
def fake_store():
    return FakeStore


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
