"""
Tests for django_restful.transformers module.
"""

import datetime
import uuid
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from django_restful.transformers import Serializer, Transformer, _split_includes, is_collection, serialize_value, transform


class MockPublisher:
    id = 7
    name = "Penguin"


class MockAuthor:
    id = 3
    name = "Ann"
    publisher = MockPublisher()


class MockBook:
    id = 1
    title = "Alpha"
    price = 5
    author = MockAuthor()


class PublisherTransformer(Transformer):
    fields = ["id", "name"]


class AuthorTransformer(Transformer):
    fields = ["id", "name"]
    available_includes = ["publisher"]

    def include_publisher(self, author):
        return self.item(author.publisher, PublisherTransformer())


class BookTransformer(Transformer):
    fields = ["id", "title", "price"]
    available_includes = ["author", "orphan"]

    def include_author(self, book):
        return self.item(book.author, AuthorTransformer())


class TestSerializeValue:
    def test_scalars_pass_through(self):
        assert serialize_value(5) == 5
        assert serialize_value("x") == "x"
        assert serialize_value(True) is True
        assert serialize_value(None) is None

    def test_float_stays_number(self):
        assert serialize_value(2.5) == 2.5

    def test_dates(self):
        assert serialize_value(datetime.date(2024, 5, 1)) == "2024-05-01"

    def test_uuid(self):
        value = uuid.UUID("12345678-1234-5678-1234-567812345678")
        assert serialize_value(value) == "12345678-1234-5678-1234-567812345678"

    def test_decimal(self):
        assert serialize_value(Decimal("10.50")) == "10.50"

    def test_related_object_uses_pk(self):
        related = MagicMock(spec=["pk"])
        related.pk = 9
        assert serialize_value(related) == "9"


class TestSplitIncludes:
    def test_groups_by_first_segment(self):
        assert _split_includes({"author", "author.publisher", "tags"}) == {"author": {"publisher"}, "tags": set()}

    def test_child_only_still_requests_parent(self):
        assert _split_includes({"author.publisher"}) == {"author": {"publisher"}}


class TestIsCollection:
    def test_single_values(self):
        assert is_collection(None) is False
        assert is_collection(MockBook()) is False
        assert is_collection({"id": 1}) is False

    def test_sequences(self):
        assert is_collection([]) is True
        assert is_collection([MockBook()]) is True


class TestTransform:
    """Tests for transform function."""

    def test_item(self):
        document = transform(MockBook(), BookTransformer())
        assert document == {"data": {"id": 1, "title": "Alpha", "price": 5}}

    def test_missing_item(self):
        assert transform(None, BookTransformer()) == {"data": None}

    def test_collection_without_pagination(self):
        document = transform([MockBook()], BookTransformer())
        assert document == {"data": [{"id": 1, "title": "Alpha", "price": 5}]}
        assert "meta" not in document

    def test_collection_with_pagination(self):
        pagination = {"total": 1, "current_page": 1}
        document = transform([MockBook()], BookTransformer(), pagination=pagination)
        assert document["meta"] == {"pagination": pagination}

    def test_include(self):
        document = transform(MockBook(), BookTransformer(), frozenset({"author"}))
        assert document["data"]["author"] == {"data": {"id": 3, "name": "Ann"}}

    def test_nested_include(self):
        document = transform(MockBook(), BookTransformer(), frozenset({"author", "author.publisher"}))
        author = document["data"]["author"]["data"]
        assert author["publisher"] == {"data": {"id": 7, "name": "Penguin"}}

    def test_unknown_includes_ignored(self):
        document = transform(MockBook(), BookTransformer(), frozenset({"reviews", "orphan", "author.nope"}))
        assert document["data"] == {"id": 1, "title": "Alpha", "price": 5, "author": {"data": {"id": 3, "name": "Ann"}}}

    def test_includes_passed_to_serializer_unchanged(self):
        serializer = MagicMock()
        serializer.serialize.return_value = {"data": "sentinel"}
        includes = frozenset({"author", "author.publisher"})

        result = transform(MockBook(), BookTransformer(), includes, serializer=serializer)

        assert result == {"data": "sentinel"}
        args, kwargs = serializer.serialize.call_args
        assert args[2] is includes

    def test_max_depth(self):
        document = Serializer(max_depth=1).serialize(MockBook(), BookTransformer(), frozenset({"author.publisher"}))
        assert "publisher" not in document["data"]["author"]["data"]

    def test_mapping_records(self):
        document = transform([{"id": 2, "title": "Bravo"}], BookTransformer())
        assert document == {"data": [{"id": 2, "title": "Bravo", "price": None}]}


class TestTransformModels:
    """Transforming real model instances."""

    def test_collection_include(self, books):
        from django_restful.tests.testapp.models import Author
        from django_restful.tests.testapp.transformers import AuthorTransformer as ModelAuthorTransformer

        ann = Author.objects.get(name="Ann")
        document = transform(ann, ModelAuthorTransformer(), frozenset({"books", "publisher"}))

        assert [b["title"] for b in document["data"]["books"]["data"]] == ["Alpha", "Bravo"]
        assert document["data"]["publisher"]["data"]["name"] == "Penguin"

    def test_null_relation(self, books):
        from django_restful.tests.testapp.models import Book
        from django_restful.tests.testapp.transformers import BookTransformer as ModelBookTransformer

        echo = Book.objects.get(title="Echo")
        document = transform(echo, ModelBookTransformer(), frozenset({"author"}))
        assert document["data"]["author"] == {"data": None}
