"""Tests for catalogue lookups."""

from book_recommender.models import Book
from book_recommender.repositories import book_repository
from book_recommender.services import book_service


class TestBookLookup:
    """Test book search functions."""

    def test_get_book(self, db, test_books):
        """Should return a book by id."""
        book = book_service.get_book(db, 101)

        assert book.title == "Dune"
        assert book.authors == "Frank Herbert"

    def test_get_missing_book(self, db, test_books):
        """Should return None for an unknown id."""
        assert book_service.get_book(db, 9999) is None

    def test_search_by_id(self, db, test_books):
        """Should return zero or one result."""
        assert [b.id for b in book_service.search_by_id(db, 202)] == [202]
        assert book_service.search_by_id(db, 9999) == []

    def test_search_by_title_partial_case_insensitive(self, db, test_books):
        """Should match part of a title regardless of case, ordered by title."""
        results = book_service.search_by_title(db, "dUNE")

        assert [b.title for b in results] == ["Dune", "Dune Messiah"]

    def test_search_by_author(self, db, test_books):
        """Should match part of an author name."""
        results = book_service.search_by_author(db, "asimov")

        assert [b.title for b in results] == ["Foundation", "I, Robot"]

    def test_search_by_author_and_year(self, db, test_books):
        """Should restrict an author search to one year."""
        results = book_service.search_by_author_and_year(db, "herbert", 1969)

        assert [b.id for b in results] == [606]

    def test_no_matches(self, db, test_books):
        """Should return an empty list when nothing matches."""
        assert book_service.search_by_title(db, "Neuromancer") == []
        assert book_service.search_by_author(db, "   ") == []

    def test_wildcards_match_literally(self, db, test_books):
        """Should treat % and _ in a query as ordinary characters."""
        db.add(Book(id=707, title="100% Wolf", authors="Jayne_Lyons", publication_year=2009))
        db.commit()

        assert [b.id for b in book_service.search_by_title(db, "%")] == [707]
        assert book_service.search_by_title(db, "_une") == []
        assert [b.id for b in book_service.search_by_title(db, "0% w")] == [707]
        assert [b.id for b in book_service.search_by_author(db, "e_l")] == [707]
        assert book_service.search_by_author(db, "%") == []
        assert book_service.search_by_author_and_year(db, "_", 1965) == []

    def test_repository_without_session(self, db, test_books):
        """Should run lookups in their own session."""
        assert book_repository.book_exists(101) is True
        assert [b.id for b in book_repository.search_by_author("Simmons")] == [202]
