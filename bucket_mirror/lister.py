import logging
from typing import Iterator

from .errors import ListError
from .store import ObjectDescriptor, ObjectStore

logger = logging.getLogger(__name__)


def iter_pages(store: ObjectStore) -> Iterator[list[ObjectDescriptor]]:
    """Lazily yield listing pages, wrapping any fetch failure in ListError.

    A failure ends the sequence; nothing is retried here.
    """
    pages = store.iter_pages()
    while True:
        try:
            page = next(pages)
        except StopIteration:
            return
        except Exception as e:
            raise ListError(e) from e
        yield page


def list_objects(store: ObjectStore) -> Iterator[ObjectDescriptor]:
    for page in iter_pages(store):
        yield from page
