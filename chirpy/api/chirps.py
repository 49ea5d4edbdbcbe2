"""Chirp API endpoints."""

from typing import List

import structlog
from fastapi import APIRouter, Depends, status

from chirpy.api.dependencies import get_current_user_id
from chirpy.models.chirp import Chirp, ChirpRequest
from chirpy.services.chirp_service import ChirpService

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/chirps", tags=["Chirps"])


@router.post("", status_code=status.HTTP_201_CREATED)
def post_chirp(
    request: ChirpRequest,
    user_id: int = Depends(get_current_user_id),
) -> Chirp:
    """Post a chirp (access token required).

    Raises:
        ChirpTooLong: If the body exceeds 140 characters (400)
    """
    chirp = ChirpService().post_chirp(request.body)
    logger.info("chirp_posted", chirp_id=chirp.id, user_id=user_id)
    return chirp


@router.get("")
def list_chirps() -> List[Chirp]:
    """List all chirps in ascending id order."""
    return ChirpService().list_chirps()


@router.get("/{chirp_id}")
def get_chirp(chirp_id: int) -> Chirp:
    """Get one chirp.

    Raises:
        NotFound: If no chirp has this id (404)
    """
    return ChirpService().get_chirp(chirp_id)
