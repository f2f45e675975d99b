"""Cache-populating walk over languages x categories x tickets.

Every step is gated by the cache except the ticket list of a cell, which is
re-fetched and overwritten on every run. A ticket record, once written, is
never touched again.
"""
import logging
from dataclasses import dataclass, replace
from typing import Callable, Optional

from harvester.models.exam import Category, Language, Ticket, ticket_record
from harvester.tools.cache import (
    CacheStatus,
    explanation_key,
    explanation_status,
    image_error_key,
    image_key,
    image_status,
    ticket_catalog_key,
    ticket_dir,
    ticket_key,
    ticket_status,
)
from harvester.tools.remote import ExamApiClient
from harvester.tools.store import Store, dump_json


logger = logging.getLogger(__name__)

IMAGE_ERROR_MARKER = "NOT IMAGE"


@dataclass(frozen=True)
class HarvestCursor:
    """Position of the walk; deeper levels are None until entered."""
    language_id: Optional[int] = None
    category_id: Optional[int] = None
    ticket_id: Optional[int] = None

    def __str__(self) -> str:
        return f"language={self.language_id} category={self.category_id} ticket={self.ticket_id}"


class HarvestError(RuntimeError):
    """A hard failure during the walk, tagged with where it happened."""

    def __init__(self, cursor: HarvestCursor, error: Exception):
        super().__init__(f"Harvest failed at {cursor}: {error}")
        self.cursor = cursor


def new_stats() -> dict:
    return {
        "cells": 0,
        "tickets": 0,
        "tickets_written": 0,
        "tickets_skipped": 0,
        "explanations_fetched": 0,
        "explanations_missing": 0,
        "images_fetched": 0,
        "images_missing": 0,
        "images_skipped": 0,
    }


def harvest(
    store: Store,
    client: ExamApiClient,
    languages: list[Language],
    categories: list[Category],
    progress_callback: Optional[Callable[[Language, Category], None]] = None,
) -> dict:
    """
    Populate the ticket, explanation and image caches for every
    (language, category) cell, in catalog order.

    Args:
        store: Cache store (directories from prepare_bases must exist)
        client: Remote API client
        languages: Language catalog
        categories: Category catalog
        progress_callback: Optional callback(language, category) after each cell

    Returns:
        dict of counters, see new_stats()

    Raises:
        HarvestError: on any hard failure; the original error is __cause__
    """
    stats = new_stats()

    for language in languages:
        cursor = HarvestCursor(language_id=language.id)
        _ensure_dir(store, ticket_dir(language.id))

        for category in categories:
            cell = replace(cursor, category_id=category.id)
            harvest_cell(store, client, language, category, stats, cell)
            stats["cells"] += 1
            if progress_callback:
                progress_callback(language, category)

    return stats


def harvest_cell(
    store: Store,
    client: ExamApiClient,
    language: Language,
    category: Category,
    stats: dict,
    cursor: HarvestCursor,
) -> None:
    """Refresh one cell's ticket list and fill the gaps for each ticket."""
    _ensure_dir(store, ticket_dir(language.id, category.id))

    try:
        raw_tickets = client.fetch_tickets(category.id, language.id)
    except Exception as e:
        raise HarvestError(cursor, e) from e

    logger.info(f"Writing tickets catalog for language {language.id}, category {category.id}")
    store.write_text(ticket_catalog_key(language.id, category.id), dump_json(raw_tickets))

    for raw_ticket in raw_tickets:
        ticket_cursor = cursor
        try:
            ticket = Ticket.model_validate(raw_ticket)
            ticket_cursor = replace(cursor, ticket_id=ticket.id)
            harvest_ticket(store, client, language, category, ticket, raw_ticket, stats)
        except Exception as e:
            raise HarvestError(ticket_cursor, e) from e


def harvest_ticket(
    store: Store,
    client: ExamApiClient,
    language: Language,
    category: Category,
    ticket: Ticket,
    raw_ticket: dict,
    stats: dict,
) -> None:
    """Fill the image and record gaps for one ticket; raw_ticket is stored as sent."""
    stats["tickets"] += 1

    # Image check runs even when the ticket record is already cached
    if ticket.image_id:
        if image_status(store, ticket.image_id) == CacheStatus.MISS:
            ensure_image(store, client, ticket.image_id, stats)
        else:
            stats["images_skipped"] += 1

    if ticket_status(store, language.id, category.id, ticket.id) == CacheStatus.HIT:
        stats["tickets_skipped"] += 1
        return

    explanation = resolve_explanation(store, client, ticket.exam_ticket_id, stats)

    logger.info(f"Writing ticket {ticket.id}")
    store.write_text(
        ticket_key(language.id, category.id, ticket.id),
        dump_json(ticket_record(raw_ticket, explanation)),
    )
    stats["tickets_written"] += 1


def ensure_image(store: Store, client: ExamApiClient, image_id: int, stats: dict) -> None:
    """Fetch an uncached image; leave an .error marker if the API has none."""
    image = client.fetch_image(image_id)
    if image is None:
        store.write_text(image_error_key(image_id), IMAGE_ERROR_MARKER)
        stats["images_missing"] += 1
        return

    logger.info(f"Writing image {image_id}.{image.extension}")
    store.write_bytes(image_key(image_id, image.extension), image.content)
    stats["images_fetched"] += 1


def resolve_explanation(
    store: Store,
    client: ExamApiClient,
    exam_ticket_id: int,
    stats: dict,
) -> Optional[str]:
    """
    Return the explanation for exam_ticket_id, fetching it at most once.

    An empty cached file stands for a known-missing explanation.
    """
    key = explanation_key(exam_ticket_id)
    if explanation_status(store, exam_ticket_id) == CacheStatus.HIT:
        return store.read_text(key) or None

    explanation = client.fetch_explanation(exam_ticket_id)
    if explanation is None:
        stats["explanations_missing"] += 1
    else:
        stats["explanations_fetched"] += 1

    logger.info(f"Writing explanation {exam_ticket_id}")
    store.write_text(key, explanation or "")
    return explanation


def _ensure_dir(store: Store, key: str) -> None:
    if not store.exists(key):
        logger.info(f"Creating {key}...")
        store.mkdir(key)
