"""
Tests for the Idea Swipe data models.

Covers draft validation, tag normalization, rating validation,
serialization and the newest-first ordering helper.
"""

from datetime import datetime, timedelta, timezone

import pytest

from ideaswipe.errors import ValidationError
from ideaswipe.models import (
    Idea,
    IdeaDraft,
    IdeaStats,
    IdeaWithStats,
    Interaction,
    normalize_tags,
    sort_newest_first,
    validate_judgment,
    validate_rating,
)
from ideaswipe.models.timestamps import parse_iso, to_iso

from tests.test_config import EXPECTED, MESSAGES, TEST_DATA, get_sample_idea


# =============================================================================
# IdeaDraft validation
# =============================================================================

class TestIdeaDraftValidation:
    """Tests for IdeaDraft field rules."""

    def test_valid_draft_is_accepted(self):
        """A complete payload builds a draft without errors."""
        draft = IdeaDraft(**get_sample_idea(0))

        assert draft.title == "EcoTrack"
        assert draft.tags == ["sustainability", "mobile-app"]
        assert draft.image_ref is None

    def test_title_and_description_are_trimmed(self):
        """Surrounding whitespace is removed from title and description."""
        payload = get_sample_idea(0)
        payload["title"] = "  EcoTrack  "
        payload["description"] = "   " + payload["description"] + "   "

        draft = IdeaDraft(**payload)

        assert draft.title == "EcoTrack"
        assert not draft.description.startswith(" ")
        assert not draft.description.endswith(" ")

    @pytest.mark.parametrize("title", ["", "   ", None])
    def test_empty_title_rejected(self, title):
        """A missing or blank title is a validation error."""
        payload = get_sample_idea(0)
        payload["title"] = title

        with pytest.raises(ValidationError) as exc_info:
            IdeaDraft(**payload)

        assert MESSAGES["title_required"] in str(exc_info.value)

    def test_title_at_limit_accepted(self):
        """A title of exactly the maximum length is valid."""
        payload = get_sample_idea(0)
        payload["title"] = "x" * EXPECTED["limits"]["max_title_length"]

        draft = IdeaDraft(**payload)

        assert len(draft.title) == EXPECTED["limits"]["max_title_length"]

    def test_title_over_limit_rejected(self):
        """A title one character over the limit is rejected."""
        payload = get_sample_idea(0)
        payload["title"] = "x" * (EXPECTED["limits"]["max_title_length"] + 1)

        with pytest.raises(ValidationError) as exc_info:
            IdeaDraft(**payload)

        assert MESSAGES["title_too_long"] in str(exc_info.value)

    def test_description_at_minimum_accepted(self):
        """A description of exactly the minimum length is valid."""
        payload = get_sample_idea(0)
        payload["description"] = "d" * EXPECTED["limits"]["min_description_length"]

        IdeaDraft(**payload)

    def test_short_description_rejected(self):
        """A description under the minimum length is rejected."""
        payload = get_sample_idea(0)
        payload["description"] = "Too short"

        with pytest.raises(ValidationError) as exc_info:
            IdeaDraft(**payload)

        assert MESSAGES["description_too_short"] in str(exc_info.value)

    @pytest.mark.parametrize("tags", [[], ["", "  "], None, "ai"])
    def test_missing_tags_rejected(self, tags):
        """At least one non-blank tag is required, and tags must be a list."""
        payload = get_sample_idea(0)
        payload["tags"] = tags

        with pytest.raises(ValidationError):
            IdeaDraft(**payload)

    def test_missing_author_rejected(self):
        """author_id is required."""
        payload = get_sample_idea(0)
        payload["author_id"] = ""

        with pytest.raises(ValidationError) as exc_info:
            IdeaDraft(**payload)

        assert MESSAGES["author_required"] in str(exc_info.value)

    def test_all_failures_reported_together(self):
        """
        GIVEN: A payload with several invalid fields
        WHEN: The draft is built
        THEN: ValidationError.errors lists every failure
        """
        with pytest.raises(ValidationError) as exc_info:
            IdeaDraft(title="", description="short", tags=[], author_id="")

        assert len(exc_info.value.errors) == 4

    def test_blank_image_ref_becomes_none(self):
        """An empty image reference is treated as absent."""
        payload = get_sample_idea(0)
        payload["image_ref"] = "   "

        draft = IdeaDraft(**payload)

        assert draft.image_ref is None

    def test_from_dict_missing_keys_become_validation_errors(self):
        """Missing payload keys raise ValidationError, not TypeError."""
        with pytest.raises(ValidationError):
            IdeaDraft.from_dict({"title": "Only a title"})

    def test_from_dict_rejects_non_object(self):
        """A non-dict payload is a validation error."""
        with pytest.raises(ValidationError):
            IdeaDraft.from_dict(["not", "a", "dict"])

    def test_validation_error_is_value_error(self):
        """Callers catching ValueError also catch validation failures."""
        with pytest.raises(ValueError):
            IdeaDraft(title="", description="", tags=[], author_id="")


class TestTagNormalization:
    """Tests for normalize_tags."""

    def test_tags_trimmed_lowercased_and_deduplicated(self):
        """Tags are normalized and duplicates dropped in first-seen order."""
        data = TEST_DATA["tag_normalization"]

        assert normalize_tags(data["input"]) == data["expected"]

    def test_non_string_tags_skipped(self):
        """Non-string entries are ignored."""
        assert normalize_tags(["ai", 3, None, "AI"]) == ["ai"]

    def test_draft_stores_normalized_tags(self):
        """IdeaDraft applies normalization on construction."""
        payload = get_sample_idea(0)
        payload["tags"] = ["Mobile-App", "mobile-app ", "Health"]

        draft = IdeaDraft(**payload)

        assert draft.tags == ["mobile-app", "health"]


# =============================================================================
# Idea
# =============================================================================

class TestIdea:
    """Tests for the stored Idea record."""

    def test_from_draft_assigns_id_and_timestamp(self):
        """Each idea gets a fresh id and the given created_at."""
        draft = IdeaDraft(**get_sample_idea(1))
        created = datetime(2025, 1, 1, tzinfo=timezone.utc)

        first = Idea.from_draft(draft, created_at=created)
        second = Idea.from_draft(draft, created_at=created)

        assert first.id != second.id
        assert first.created_at == created
        assert first.image_ref == "ideas/codebuddy.png"

    def test_to_dict_from_dict_preserves_fields(self):
        """An idea survives serialization with its timestamp intact."""
        idea = Idea.from_draft(IdeaDraft(**get_sample_idea(1)))

        restored = Idea.from_dict(idea.to_dict())

        assert restored == idea

    def test_to_dict_uses_iso_timestamp(self):
        """created_at is serialized as an ISO string."""
        idea = Idea.from_draft(
            IdeaDraft(**get_sample_idea(0)),
            created_at=datetime(2025, 3, 4, 5, 6, 7, tzinfo=timezone.utc),
        )

        assert idea.to_dict()["created_at"] == "2025-03-04T05:06:07.000000+00:00"

    def test_str_includes_title_and_tags(self):
        """The string form shows the title and tags."""
        idea = Idea.from_draft(IdeaDraft(**get_sample_idea(0)))

        assert str(idea) == "EcoTrack [sustainability, mobile-app]"


class TestSortNewestFirst:
    """Tests for the listing order helper."""

    def test_orders_by_created_at_descending(self):
        """Newer ideas come first."""
        base = datetime(2025, 1, 1, tzinfo=timezone.utc)
        draft = IdeaDraft(**get_sample_idea(0))
        ideas = [
            Idea.from_draft(draft, created_at=base + timedelta(seconds=offset))
            for offset in (1, 3, 2)
        ]

        ordered = sort_newest_first(ideas)

        assert [i.created_at for i in ordered] == [
            base + timedelta(seconds=3),
            base + timedelta(seconds=2),
            base + timedelta(seconds=1),
        ]

    def test_ties_broken_by_id_ascending(self):
        """Ideas created at the same instant are ordered by id."""
        created = datetime(2025, 1, 1, tzinfo=timezone.utc)
        draft = IdeaDraft(**get_sample_idea(0))
        ideas = [
            Idea(title=draft.title, description=draft.description, tags=draft.tags,
                 author_id=draft.author_id, id=idea_id, created_at=created)
            for idea_id in ("c", "a", "b")
        ]

        assert [i.id for i in sort_newest_first(ideas)] == ["a", "b", "c"]


# =============================================================================
# Interaction
# =============================================================================

class TestRatingValidation:
    """Tests for validate_rating."""

    @pytest.mark.parametrize("rating", EXPECTED["ratings"]["valid"])
    def test_valid_ratings_accepted(self, rating):
        """Ratings inside [1, 10] are returned unchanged."""
        assert validate_rating(rating) == rating

    def test_none_is_accepted(self):
        """A missing rating is allowed."""
        assert validate_rating(None) is None

    @pytest.mark.parametrize("rating", EXPECTED["ratings"]["invalid"])
    def test_out_of_range_rejected(self, rating):
        """Ratings outside [1, 10] are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            validate_rating(rating)

        assert MESSAGES["rating_range"] in str(exc_info.value)

    @pytest.mark.parametrize("rating", EXPECTED["ratings"]["wrong_type"])
    def test_non_integer_rejected(self, rating):
        """Floats, strings and booleans are not ratings."""
        with pytest.raises(ValidationError):
            validate_rating(rating)


class TestJudgmentValidation:
    """Tests for validate_judgment."""

    def test_valid_judgment_passes(self):
        validate_judgment("user-1", "idea-1", True, 7)

    @pytest.mark.parametrize("swipe", ["true", 1, None])
    def test_non_boolean_swipe_rejected(self, swipe):
        """swipe must be a real boolean."""
        with pytest.raises(ValidationError) as exc_info:
            validate_judgment("user-1", "idea-1", swipe, None)

        assert MESSAGES["swipe_type"] in str(exc_info.value)

    def test_blank_ids_rejected(self):
        """Both ids are required; each failure is listed."""
        with pytest.raises(ValidationError) as exc_info:
            validate_judgment("", "  ", True, None)

        assert len(exc_info.value.errors) == 2

    def test_rating_errors_included(self):
        """Rating failures are reported alongside the other fields."""
        with pytest.raises(ValidationError) as exc_info:
            validate_judgment("", "idea-1", True, 11)

        assert len(exc_info.value.errors) == 2


class TestInteraction:
    """Tests for the Interaction record."""

    def test_pair_key(self):
        interaction = Interaction(user_id="u1", idea_id="i1", swipe=True)

        assert interaction.pair_key == ("u1", "i1")

    def test_to_dict_from_dict(self):
        """An interaction survives serialization."""
        interaction = Interaction(user_id="u1", idea_id="i1", swipe=False, rating=4)

        restored = Interaction.from_dict(interaction.to_dict())

        assert restored == interaction

    def test_from_dict_coerces_stored_swipe(self):
        """Integer swipe values from storage become booleans."""
        restored = Interaction.from_dict({
            "id": "x",
            "user_id": "u1",
            "idea_id": "i1",
            "swipe": 1,
            "rating": None,
            "created_at": "2025-01-01T00:00:00Z",
        })

        assert restored.swipe is True
        assert restored.created_at.tzinfo is not None


# =============================================================================
# Stats records and timestamps
# =============================================================================

class TestIdeaStatsRecord:
    """Tests for IdeaStats presentation helpers."""

    def test_accept_percentage_rounds_half_up(self):
        """0.125 rounds to 13, not to the even 12."""
        assert IdeaStats(total=8, accept_fraction=0.125).accept_percentage == 13

    def test_empty_stats_defaults(self):
        stats = IdeaStats()

        assert stats.to_dict() == EXPECTED["empty_stats"]
        assert stats.has_ratings is False

    def test_idea_with_stats_nests_stats(self):
        """The combined record is the idea dict plus a stats key."""
        idea = Idea.from_draft(IdeaDraft(**get_sample_idea(0)))
        item = IdeaWithStats(idea=idea, stats=IdeaStats(total=1, accept_fraction=1.0, mean_rating=9.0))

        data = item.to_dict()

        assert data["id"] == idea.id
        assert data["stats"]["accept_percentage"] == 100
        assert data["stats"]["mean_rating"] == 9.0


class TestTimestamps:
    """Tests for ISO timestamp helpers."""

    def test_to_iso_is_fixed_width(self):
        """Whole seconds still carry microseconds so strings sort correctly."""
        a = to_iso(datetime(2025, 1, 1, 0, 0, 0, tzinfo=timezone.utc))
        b = to_iso(datetime(2025, 1, 1, 0, 0, 0, 500, tzinfo=timezone.utc))

        assert len(a) == len(b)
        assert a < b

    def test_naive_datetime_treated_as_utc(self):
        assert to_iso(datetime(2025, 1, 1)).endswith("+00:00")

    def test_parse_iso_accepts_z_suffix(self):
        parsed = parse_iso("2025-01-01T10:00:00.000Z")

        assert parsed == datetime(2025, 1, 1, 10, tzinfo=timezone.utc)

    def test_parse_iso_empty_is_none(self):
        assert parse_iso("") is None
        assert parse_iso(None) is None
