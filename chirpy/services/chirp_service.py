"""Chirp service: posting, lookup, and profanity masking."""

from typing import Iterable, List, Optional

import structlog

from chirpy.config import get_settings
from chirpy.database import StoreManager, get_store_manager
from chirpy.exceptions import ChirpTooLong, NotFound
from chirpy.models.chirp import Chirp

logger = structlog.get_logger(__name__)

PROFANITY_MASK = "****"


def clean_body(body: str, profane_words: Iterable[str]) -> str:
    """Replace profane words with a fixed mask.

    Words are split on single spaces and compared case-insensitively as
    whole words, so punctuation attached to a word prevents a match.
    Spacing and non-matching words are preserved exactly.

    Args:
        body: Raw chirp text
        profane_words: Denylist (matched case-insensitively)

    Returns:
        Masked text
    """
    banned = {w.lower() for w in profane_words}
    return " ".join(
        PROFANITY_MASK if word.lower() in banned else word for word in body.split(" ")
    )


class ChirpService:
    """Append-only chirp repository on top of the chirps store."""

    def __init__(self, stores: Optional[StoreManager] = None):
        self.settings = get_settings()
        self.stores = stores or get_store_manager()

    def post_chirp(self, body: str) -> Chirp:
        """Validate, clean, and store a chirp.

        Args:
            body: Raw chirp text

        Returns:
            The stored Chirp

        Raises:
            ChirpTooLong: If body exceeds the configured maximum length
        """
        max_length = self.settings.chirp_max_length
        if len(body) > max_length:
            logger.info("chirp_rejected_too_long", length=len(body), max_length=max_length)
            raise ChirpTooLong(len(body), max_length)

        cleaned = clean_body(body, self.settings.profane_words_list)

        with self.stores.chirps.transaction() as chirps:
            chirp = Chirp(id=len(chirps) + 1, body=cleaned)
            chirps.append(chirp)

        logger.info("chirp_created", chirp_id=chirp.id, masked=cleaned != body)
        return chirp

    def get_chirp(self, chirp_id: int) -> Chirp:
        """Get a chirp by id.

        Raises:
            NotFound: If no chirp has this id
        """
        for chirp in self.stores.chirps.load():
            if chirp.id == chirp_id:
                return chirp
        raise NotFound(f"Cannot find chirp with ID {chirp_id}")

    def list_chirps(self) -> List[Chirp]:
        """Return all chirps in ascending id order."""
        return self.stores.chirps.load()
