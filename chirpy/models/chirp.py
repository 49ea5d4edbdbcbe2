"""Chirp request and storage models."""

from pydantic import BaseModel, Field


class Chirp(BaseModel):
    """A stored chirp. Immutable once created."""

    id: int
    body: str


class ChirpRequest(BaseModel):
    """Request body for posting a chirp.

    Length is checked by ``ChirpService`` rather than here so an oversized
    body is reported as ``ChirpTooLong``.
    """

    body: str = Field(...)
