"""Tests for multi-criterion ratings."""

import pytest
from pydantic import ValidationError

from book_recommender.repositories import rating_repository
from book_recommender.schemas.rating import Criterion, RatingCreate, RatingFields, RatingOutcome
from book_recommender.services import library_service, rating_service


def rating_for(user_id="alice", book_id=101, library_name="SciFi", scores=(5, 4, 3, 5, 4), **extra):
    style, content, enjoyment, originality, edition = scores
    return RatingCreate(
        user_id=user_id,
        book_id=book_id,
        library_name=library_name,
        style=style,
        content=content,
        enjoyment=enjoyment,
        originality=originality,
        edition=edition,
        **extra,
    )


class TestSaveRating:
    """Test saving a rating."""

    def test_alice_scenario(self, db, test_users, test_books):
        """Should store the mean as overall and list it for the user."""
        library_service.create_library(db, "alice", "SciFi")
        library_service.add_book(db, "alice", "SciFi", 101)

        outcome = rating_service.save_rating(db, rating_for())

        assert outcome == RatingOutcome.SAVED
        [detail] = rating_service.list_detailed_by_user(db, "alice")
        assert detail.overall == pytest.approx(4.2)
        assert detail.book_title == "Dune"
        assert detail.library_name == "SciFi"

    def test_library_created_on_demand(self, db, test_users, test_books):
        """Should create the named library if the user has none."""
        rating_service.save_rating(db, rating_for(library_name="Favourites"))

        assert library_service.name_exists(db, "alice", "Favourites") is True

    def test_consistent_overall_accepted(self, db, test_users, test_books):
        """Should accept a supplied overall equal to the mean."""
        outcome = rating_service.save_rating(db, rating_for(overall=4.2))

        assert outcome == RatingOutcome.SAVED

    def test_inconsistent_overall_rejected(self, db, test_users, test_books):
        """Should refuse an overall that is not the mean of the scores."""
        outcome = rating_service.save_rating(db, rating_for(overall=5.0))

        assert outcome == RatingOutcome.INVALID_SCORES
        assert rating_service.count_ratings(db, 101) == 0

    @pytest.mark.parametrize("scores", [(0, 4, 3, 5, 4), (5, 4, 3, 5, 6), (-1, 1, 1, 1, 1)])
    def test_out_of_range_scores_rejected(self, db, test_users, test_books, scores):
        """Should refuse any score outside 1-5 before writing anything."""
        outcome = rating_service.save_rating(db, rating_for(scores=scores))

        assert outcome == RatingOutcome.INVALID_SCORES
        assert library_service.name_exists(db, "alice", "SciFi") is False

    def test_second_rating_rejected(self, db, test_users, test_books):
        """Should allow one rating per user and book."""
        rating_service.save_rating(db, rating_for())

        outcome = rating_service.save_rating(db, rating_for(scores=(1, 1, 1, 1, 1)))

        assert outcome == RatingOutcome.ALREADY_RATED
        assert rating_service.average_overall(db, 101) == pytest.approx(4.2)

    def test_constraint_backstop_reports_already_rated(self, db, test_users, test_books, monkeypatch):
        """Should report a duplicate caught only by the uniqueness constraint."""
        rating_service.save_rating(db, rating_for())
        monkeypatch.setattr(rating_repository, "exists", lambda *args, **kwargs: False)

        outcome = rating_service.save_rating(db, rating_for(library_name="Other"))

        assert outcome == RatingOutcome.ALREADY_RATED
        assert library_service.name_exists(db, "alice", "Other") is False

    def test_unknown_user(self, db, test_users, test_books):
        """Should fail when no library can be created for the user."""
        outcome = rating_service.save_rating(db, rating_for(user_id="nobody"))

        assert outcome == RatingOutcome.LIBRARY_UNAVAILABLE

    def test_unknown_book(self, db, test_users, test_books):
        """Should refuse books that are not in the catalogue."""
        outcome = rating_service.save_rating(db, rating_for(book_id=9999))

        assert outcome == RatingOutcome.NOT_FOUND

    def test_library_name_with_slash_rejected(self):
        """Should refuse library names that cannot appear in a library URL."""
        with pytest.raises(ValidationError):
            rating_for(library_name="Sci/Fi")

    def test_is_already_rated(self, db, test_users, test_books):
        """Should report whether a user rated a book."""
        assert rating_service.is_already_rated(db, 101, "alice") is False

        rating_service.save_rating(db, rating_for())

        assert rating_service.is_already_rated(db, 101, "alice") is True
        assert rating_service.is_already_rated(db, 101, "bob") is False


class TestAggregates:
    """Test per-book averages and counts."""

    def test_unrated_book_aggregates_are_zero(self, db, test_users, test_books):
        """Should report zero rather than failing for an unrated book."""
        assert rating_service.average_overall(db, 202) == 0.0
        assert rating_service.count_ratings(db, 202) == 0
        for criterion in Criterion:
            assert rating_service.average_of(db, criterion, 202) == 0.0

    def test_averages_across_raters(self, db, test_users, test_books):
        """Should average each criterion over every rating of the book."""
        rating_service.save_rating(db, rating_for("alice", scores=(5, 4, 3, 5, 4)))
        rating_service.save_rating(db, rating_for("bob", scores=(3, 2, 5, 1, 4)))
        rating_service.save_rating(db, rating_for("carol", scores=(4, 3, 1, 2, 2)))

        assert rating_service.count_ratings(db, 101) == 3
        assert rating_service.average_of(db, Criterion.STYLE, 101) == pytest.approx(4.0, abs=1e-9)
        assert rating_service.average_of(db, Criterion.ENJOYMENT, 101) == pytest.approx(3.0, abs=1e-9)
        assert rating_service.average_of(db, Criterion.ORIGINALITY, 101) == pytest.approx(8 / 3, abs=1e-9)
        assert rating_service.average_overall(db, 101) == pytest.approx((4.2 + 3.0 + 2.4) / 3)

    def test_summary(self, db, test_users, test_books):
        """Should report every aggregate in one summary."""
        rating_service.save_rating(db, rating_for("alice", scores=(5, 4, 3, 5, 4)))
        rating_service.save_rating(db, rating_for("bob", scores=(3, 4, 3, 1, 4)))

        summary = rating_service.summarize_book(db, 101)

        assert summary.count == 2
        assert summary.average_overall == pytest.approx(3.6)
        assert summary.averages[Criterion.STYLE] == pytest.approx(4.0)
        assert summary.averages[Criterion.EDITION] == pytest.approx(4.0)

    def test_load_for_book(self, db, test_users, test_books):
        """Should return every rating of the book."""
        rating_service.save_rating(db, rating_for("alice", final_comment="A classic"))
        rating_service.save_rating(db, rating_for("bob"))

        records = rating_service.load_for_book(db, 101)

        assert {r.user_id for r in records} == {"alice", "bob"}
        assert any(r.final_comment == "A classic" for r in records)


class TestRatingChanges:
    """Test updating and deleting ratings."""

    def test_update_rating(self, db, test_users, test_books):
        """Should replace every score and recompute the overall."""
        rating_service.save_rating(db, rating_for(style_note="dense"))
        fields = RatingFields(style=1, content=1, enjoyment=1, originality=1, edition=1)

        outcome = rating_service.update_rating(db, "alice", 101, fields)

        assert outcome == RatingOutcome.SAVED
        [record] = rating_service.load_for_book(db, 101)
        assert record.overall == pytest.approx(1.0)
        assert record.style_note is None

    def test_update_invalid_scores(self, db, test_users, test_books):
        """Should refuse out-of-range scores on update."""
        rating_service.save_rating(db, rating_for())
        fields = RatingFields(style=9, content=1, enjoyment=1, originality=1, edition=1)

        assert rating_service.update_rating(db, "alice", 101, fields) == RatingOutcome.INVALID_SCORES

    def test_update_missing(self, db, test_users, test_books):
        """Should report not found when there is nothing to update."""
        fields = RatingFields(style=1, content=1, enjoyment=1, originality=1, edition=1)

        assert rating_service.update_rating(db, "alice", 101, fields) == RatingOutcome.NOT_FOUND

    def test_delete_rating(self, db, test_users, test_books):
        """Should delete once and then report nothing to delete."""
        rating_service.save_rating(db, rating_for())

        assert rating_service.delete_rating(db, "alice", 101) is True
        assert rating_service.delete_rating(db, "alice", 101) is False
        assert rating_service.is_already_rated(db, 101, "alice") is False

    def test_rating_survives_library_deletion(self, db, test_users, test_books):
        """Should keep the rating when its library is deleted."""
        rating_service.save_rating(db, rating_for())

        library_service.delete_library(db, "alice", "SciFi")

        [detail] = rating_service.list_detailed_by_user(db, "alice")
        assert detail.library_name is None
        assert detail.library_id is None
        assert rating_service.count_ratings(db, 101) == 1
