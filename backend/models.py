"""Request/response models for the community channel API."""

from typing import Optional

from pydantic import BaseModel, Field


# --- Requests ---

class StateBody(BaseModel):
    move_counter: int = Field(ge=0, le=0x3FFF)
    x: int = Field(ge=0, le=0xF)
    y: int = Field(ge=0, le=0xF)
    outcome: int = Field(default=0, ge=0, le=0x3)


class MoveBody(BaseModel):
    """Next move; the counter is derived from previous_counter."""
    previous_counter: int = Field(ge=0, le=0x3FFF)
    x: int = Field(ge=0, le=0xF)
    y: int = Field(ge=0, le=0xF)
    outcome: int = Field(default=0, ge=0, le=0x3)


# --- Responses ---

class StateResponse(BaseModel):
    prefix: str
    marker_as: int
    move_counter: int
    x: int
    y: int
    outcome: int
    outcome_label: str


class PublishResponse(BaseModel):
    marker_as: int
    move_counter: int
    counter_community: int
    position_community: int
    communities: list[str] = []


class ErrorDetail(BaseModel):
    code: str
    message: str
    retryable: bool = False
    missing: Optional[list[str]] = None
