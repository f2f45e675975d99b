"""Cache layout and hit/miss checks over a Store.

Status checks never touch the network; the caller decides what to fetch.
"""
from enum import Enum

from harvester.tools.store import Store


IMAGES_DIR = "images"
TICKETS_DIR = "tickets"
EXPLANATIONS_DIR = "explanations"
TICKET_CATALOG_NAME = "catalog.json"


class CacheStatus(str, Enum):
    HIT = "hit"
    MISS = "miss"


def _status(found: bool) -> CacheStatus:
    return CacheStatus.HIT if found else CacheStatus.MISS


# Layout keys

def catalog_key(kind: str) -> str:
    return f"{kind}.json"


def image_key(image_id: int, extension: str) -> str:
    return f"{IMAGES_DIR}/{image_id}.{extension}"


def image_error_key(image_id: int) -> str:
    return image_key(image_id, "error")


def explanation_key(exam_ticket_id: int) -> str:
    return f"{EXPLANATIONS_DIR}/{exam_ticket_id}.txt"


def ticket_dir(language_id: int, category_id: int | None = None) -> str:
    if category_id is None:
        return f"{TICKETS_DIR}/{language_id}"
    return f"{TICKETS_DIR}/{language_id}/{category_id}"


def ticket_catalog_key(language_id: int, category_id: int) -> str:
    return f"{ticket_dir(language_id, category_id)}/{TICKET_CATALOG_NAME}"


def ticket_key(language_id: int, category_id: int, ticket_id: int) -> str:
    return f"{ticket_dir(language_id, category_id)}/{ticket_id}.json"


# Status checks

def catalog_status(store: Store, kind: str) -> CacheStatus:
    return _status(store.exists(catalog_key(kind)))


def image_status(store: Store, image_id: int) -> CacheStatus:
    """
    HIT when any file in images/ has a stem equal to image_id.

    The stem is everything before the first dot, so both ``7.png`` and the
    ``7.error`` marker count as cached.
    """
    wanted = str(image_id)
    for name in store.listdir(IMAGES_DIR):
        if name.split(".")[0] == wanted:
            return CacheStatus.HIT
    return CacheStatus.MISS


def explanation_status(store: Store, exam_ticket_id: int) -> CacheStatus:
    return _status(store.exists(explanation_key(exam_ticket_id)))


def ticket_status(store: Store, language_id: int, category_id: int, ticket_id: int) -> CacheStatus:
    return _status(store.exists(ticket_key(language_id, category_id, ticket_id)))
