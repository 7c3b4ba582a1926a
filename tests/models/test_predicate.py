"""Tests for predicate tree nodes."""

from bookworm.models.book import Book
from bookworm.models.predicate import AllOf, AnyOf, Contains, Eq, ILike, Range, column_value
from bookworm.models.query import CompiledQuery


ROW = {
    "title": "Dune",
    "author": "Frank Herbert",
    "published_year": 1965,
    "published_date": "1965-08-01",
    "categories": ["Fiction", "Classics"],
    "narrator": None,
}


class TestLeaves:
    """Tests for single-column predicates."""

    def test_eq(self):
        assert Eq(column="title", value="Dune").matches(ROW)
        assert not Eq(column="title", value="dune").matches(ROW)

    def test_ilike_is_case_insensitive_substring(self):
        assert ILike(column="author", value="HERB").matches(ROW)
        assert not ILike(column="author", value="kafka").matches(ROW)

    def test_ilike_on_missing_column(self):
        """Missing and null columns never match."""
        assert not ILike(column="narrator", value="").matches(ROW)
        assert not ILike(column="publisher", value="").matches(ROW)

    def test_range_inclusive(self):
        assert Range(column="published_year", gte=1965, lte=1965).matches(ROW)
        assert Range(column="published_year", gte=1960).matches(ROW)
        assert not Range(column="published_year", lte=1964).matches(ROW)

    def test_range_on_dates(self):
        """ISO date strings compare in date order."""
        year = Range(column="published_date", gte="1965-01-01", lte="1965-12-31")

        assert year.matches(ROW)
        assert not year.matches({"published_date": "1966-01-01"})

    def test_range_incomparable_value(self):
        """A value that cannot be compared does not match."""
        assert not Range(column="published_year", gte=1960).matches({"published_year": "old"})
        assert not Range(column="published_year", gte=1960).matches({})

    def test_contains(self):
        assert Contains(column="categories", value="Classics").matches(ROW)
        assert not Contains(column="categories", value="Class").matches(ROW)
        assert not Contains(column="title", value="Dune").matches(ROW)


class TestGroups:
    """Tests for AND and OR groups."""

    def test_any_of(self):
        group = AnyOf(clauses=(Eq(column="title", value="Emma"), ILike(column="title", value="un")))

        assert group.matches(ROW)

    def test_empty_any_of_matches_nothing(self):
        assert not AnyOf().matches(ROW)

    def test_empty_all_of_matches_everything(self):
        assert AllOf().matches(ROW)
        assert AllOf().matches({})

    def test_nested(self):
        tree = AllOf(
            clauses=(
                Range(column="published_year", gte=1960, lte=1970),
                AnyOf(clauses=(Contains(column="categories", value="Poetry"),
                               Contains(column="categories", value="Fiction"))),
            )
        )

        assert tree.matches(ROW)
        assert not tree.matches({**ROW, "categories": ["Poetry-ish"]})


class TestSerialization:
    """Predicate trees are plain data."""

    def test_validate_from_dict(self):
        """The kind tag selects the node type."""
        tree = AllOf.model_validate(
            {
                "kind": "and",
                "clauses": [
                    {"kind": "ilike", "column": "title", "value": "dune"},
                    {"kind": "or", "clauses": [{"kind": "contains", "column": "categories", "value": "Fiction"}]},
                ],
            }
        )

        assert isinstance(tree.clauses[0], ILike)
        assert isinstance(tree.clauses[1].clauses[0], Contains)
        assert tree.matches(ROW)

    def test_rendering(self):
        tree = AllOf(
            clauses=(
                ILike(column="title", value="dune"),
                AnyOf(clauses=(Contains(column="categories", value="Fiction"),)),
                Range(column="published_year", gte=1960),
            )
        )

        assert str(tree) == (
            "title ILIKE '%dune%' AND (categories @> {'Fiction'}) "
            "AND published_year >= 1960"
        )

    def test_compiled_query_round_trip(self):
        query = CompiledQuery.model_validate(
            {"predicate": {"clauses": [{"kind": "eq", "column": "type", "value": "ebook"}]},
             "sort": {"column": "title", "direction": "asc"}}
        )

        assert query.predicate.clauses == (Eq(column="type", value="ebook"),)
        assert query.limit == 20


def test_column_value_reads_models():
    """Rows may be mappings or objects."""
    book = Book(id="a", title="Dune")

    assert column_value(book, "title") == "Dune"
    assert column_value(book, "no_such_column") is None
    assert column_value({"title": "Dune"}, "title") == "Dune"
