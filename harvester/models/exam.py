"""Exam question bank models mirrored from the remote API."""
from pydantic import BaseModel, ConfigDict, Field


class _ApiModel(BaseModel):
    """Accepts camelCase API payloads and tolerates unknown fields."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class Language(_ApiModel):
    id: int
    language: str = ""


class Category(_ApiModel):
    id: int
    category_name: str = Field(default="", alias="categoryName")


class Ticket(_ApiModel):
    """
    Keys of one exam question scoped to a (language, category) pair.

    Only the ids used for cache keys are read; the question, answers and
    any other fields stay in the raw payload and are stored untouched.
    """
    id: int
    exam_ticket_id: int = Field(alias="examTicketId")
    image_id: int | None = Field(default=None, alias="imageId")


def ticket_record(raw_ticket: dict, explanation: str | None) -> dict:
    """Raw ticket payload merged with its resolved explanation."""
    return {**raw_ticket, "explanation": explanation}


class TicketImage(BaseModel):
    """Downloaded image bytes; extension is the content-type subtype."""
    id: int
    extension: str
    content: bytes
