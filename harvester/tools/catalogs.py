"""Language and category catalogs: read from cache or fetch once and persist."""
import json
import logging
from typing import Literal

from harvester.models.exam import Category, Language
from harvester.tools.cache import (
    EXPLANATIONS_DIR,
    IMAGES_DIR,
    TICKETS_DIR,
    CacheStatus,
    catalog_key,
    catalog_status,
)
from harvester.tools.remote import ExamApiClient
from harvester.tools.store import Store, dump_json


logger = logging.getLogger(__name__)

CatalogKind = Literal["languages", "categories"]


def prepare_bases(store: Store) -> None:
    """Ensure the cache root and its top-level directories exist."""
    for key in ("", IMAGES_DIR, TICKETS_DIR, EXPLANATIONS_DIR):
        if not store.exists(key):
            logger.info(f"Creating {key or 'assets root'}...")
            store.mkdir(key)


def load_catalog(store: Store, client: ExamApiClient, kind: CatalogKind) -> list[dict]:
    """
    Return the raw catalog for kind.

    A cached catalog file is never re-fetched. On a miss the catalog is
    fetched, written to ``<kind>.json`` and returned. Fetch errors and
    corrupt cached JSON propagate.
    """
    fetchers = {
        "languages": client.fetch_languages,
        "categories": client.fetch_categories,
    }
    if kind not in fetchers:
        raise ValueError(f"Unknown catalog kind: {kind}")

    key = catalog_key(kind)
    if catalog_status(store, kind) == CacheStatus.HIT:
        logger.info(f"✓ Using cached {kind} catalog")
        return json.loads(store.read_text(key))

    data = fetchers[kind]()
    logger.info(f"Writing {kind} catalog...")
    store.write_text(key, dump_json(data))
    return data


def load_languages(store: Store, client: ExamApiClient) -> list[Language]:
    return [Language.model_validate(item) for item in load_catalog(store, client, "languages")]


def load_categories(store: Store, client: ExamApiClient) -> list[Category]:
    return [Category.model_validate(item) for item in load_catalog(store, client, "categories")]
