"""Unit tests for ChirpService and the profanity mask."""

import pytest

from chirpy.exceptions import ChirpTooLong, NotFound
from chirpy.models.chirp import Chirp
from chirpy.services.chirp_service import PROFANITY_MASK, clean_body

PROFANE = ["kerfuffle", "sharbert", "fornax"]


class TestCleanBody:
    """Tests for clean_body word masking."""

    def test_clean_text_unchanged(self):
        body = "I had something interesting for breakfast"
        assert clean_body(body, PROFANE) == body

    def test_masks_profane_word(self):
        assert (
            clean_body("I hear Mastodon is better than Chirpy. sharbert I need to migrate", PROFANE)
            == "I hear Mastodon is better than Chirpy. **** I need to migrate"
        )

    def test_match_is_case_insensitive(self):
        assert clean_body("What a KerFuffle today", PROFANE) == "What a **** today"

    def test_masks_every_occurrence(self):
        assert clean_body("fornax and Fornax", PROFANE) == "**** and ****"

    def test_attached_punctuation_prevents_match(self):
        assert clean_body("Sharbert! is fine", PROFANE) == "Sharbert! is fine"

    def test_substring_is_not_masked(self):
        assert clean_body("kerfuffles abound", PROFANE) == "kerfuffles abound"

    def test_spacing_preserved(self):
        assert clean_body("  fornax   twice  ", PROFANE) == "  ****   twice  "

    def test_mask_is_four_characters(self):
        assert PROFANITY_MASK == "****"


class TestPostChirp:
    """Tests for ChirpService.post_chirp."""

    def test_assigns_increasing_ids(self, chirp_service):
        first = chirp_service.post_chirp("first")
        second = chirp_service.post_chirp("second")

        assert (first.id, second.id) == (1, 2)

    def test_stores_cleaned_body(self, chirp_service, stores):
        chirp = chirp_service.post_chirp("this is a kerfuffle")

        assert chirp.body == "this is a ****"
        assert stores.chirps.load() == [chirp]

    def test_exactly_max_length_is_accepted(self, chirp_service):
        body = "a" * 140

        assert chirp_service.post_chirp(body).body == body

    def test_too_long_is_rejected_before_storage(self, chirp_service):
        chirp_service.post_chirp("existing")

        with pytest.raises(ChirpTooLong) as exc_info:
            chirp_service.post_chirp("a" * 141)

        assert exc_info.value.status_code == 400
        assert len(chirp_service.list_chirps()) == 1

    def test_length_is_checked_before_masking(self, chirp_service):
        # 15 words of "kerfuffle" + spaces exceed 140 even though the mask is shorter
        body = " ".join(["kerfuffle"] * 15)
        assert len(body) > 140

        with pytest.raises(ChirpTooLong):
            chirp_service.post_chirp(body)

    def test_length_counts_characters_not_bytes(self, chirp_service):
        body = "é" * 140

        assert chirp_service.post_chirp(body).body == body


class TestGetAndList:
    """Tests for ChirpService.get_chirp and list_chirps."""

    def test_post_then_get_round_trip(self, chirp_service):
        posted = chirp_service.post_chirp("hello world")

        assert chirp_service.get_chirp(posted.id) == posted

    def test_get_missing_raises_not_found(self, chirp_service):
        with pytest.raises(NotFound) as exc_info:
            chirp_service.get_chirp(404)

        assert exc_info.value.status_code == 404

    def test_list_empty(self, chirp_service):
        assert chirp_service.list_chirps() == []

    def test_list_in_ascending_id_order(self, chirp_service):
        for body in ("one", "two", "three"):
            chirp_service.post_chirp(body)

        assert chirp_service.list_chirps() == [
            Chirp(id=1, body="one"),
            Chirp(id=2, body="two"),
            Chirp(id=3, body="three"),
        ]
