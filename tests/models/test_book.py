"""Tests for the Book model and query-side models."""

import pytest
from pydantic import ValidationError

from bookworm.models.book import Book
from bookworm.models.query import MetadataOverride, SearchView, SortClause


class TestBook:
    """Tests for Book."""

    def test_minimal_book(self):
        book = Book(id="a", title="Dune")

        assert book.author == ""
        assert book.categories == []
        assert book.published_year is None

    def test_year_from_date(self):
        assert Book(id="a", title="Dune", published_date="1965-08-01").published_year == 1965

    def test_explicit_year_wins(self):
        book = Book(id="a", title="Dune", published_date="1965-08-01", published_year=1966)

        assert book.published_year == 1966

    def test_unparseable_date(self):
        assert Book(id="a", title="Dune", published_date="unknown").published_year is None

    def test_extra_fields_kept(self):
        """Unknown catalog columns survive into the row."""
        book = Book(id="a", title="Dune", shelf="B3")

        assert book.model_dump()["shelf"] == "B3"

    def test_title_required(self):
        with pytest.raises(ValidationError):
            Book(id="a")

    def test_categories_not_shared(self):
        first, second = Book(id="a", title="A"), Book(id="b", title="B")
        first.categories.append("Fiction")

        assert second.categories == []


class TestQueryModels:
    """Tests for the small query-side models."""

    def test_override_query_text(self):
        override = MetadataOverride(field="publisher", value="Penguin Random House")

        assert override.as_query_text() == 'publisher:"Penguin Random House"'

    def test_sort_direction(self):
        assert SortClause(column="title", direction="asc").ascending
        assert not SortClause(column="title").ascending

    def test_search_view_defaults(self):
        view = SearchView()

        assert view.items == ()
        assert view.loading is False
        assert view.has_more is True
        assert view.error is None
