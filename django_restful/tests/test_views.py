"""
Tests for django_restful.views module.
"""

import json

import pytest
from django.test import RequestFactory


def make_view(**attrs):
    from django_restful.tests.testapp.models import Book
    from django_restful.tests.testapp.transformers import BookTransformer
    from django_restful.views import RestfulView

    body = {"model": Book, "transformer": BookTransformer()}
    body.update(attrs)
    return type("BookView", (RestfulView,), body).as_view()


def content(response):
    return json.loads(response.content)


@pytest.fixture
def rf():
    return RequestFactory()


class TestGet:
    def test_list_with_filters_and_order(self, rf, books):
        request = rf.get("/books/", {"price[GTE]": "10", "price[LTE]": "50", "_order": "-price"})
        response = make_view()(request)

        assert response.status_code == 200
        data = content(response)
        assert [b["price"] for b in data["data"]] == [50, 25, 10]
        assert data["meta"]["pagination"]["total"] == 3

    def test_list_escape_parameter(self, rf, books):
        request = rf.get("/books/", {"_filter[title][LIKE]": "lph"})
        response = make_view()(request)
        assert [b["title"] for b in content(response)["data"]] == ["Alpha"]

    def test_show(self, rf, books):
        request = rf.get(f"/books/{books[1].pk}/", {"_include": "author"})
        response = make_view()(request, pk=books[1].pk)

        data = content(response)["data"]
        assert data["title"] == "Bravo"
        assert data["author"]["data"]["name"] == "Ann"

    def test_show_missing(self, rf, books):
        response = make_view()(rf.get("/books/999999/"), pk=999999)
        assert response.status_code == 200
        assert content(response) == {"data": None}


class TestPost:
    def test_json_create(self, rf, db):
        request = rf.post("/books/", data=json.dumps({"title": "Kilo", "price": 9}), content_type="application/json")
        response = make_view()(request)

        assert response.status_code == 201
        assert content(response)["data"]["title"] == "Kilo"

    def test_form_create(self, rf, db):
        response = make_view()(rf.post("/books/", {"title": "Lima", "price": "6"}))
        assert response.status_code == 201
        assert content(response)["data"]["price"] == 6

    def test_invalid_json(self, rf, db):
        request = rf.post("/books/", data="{nope", content_type="application/json")
        response = make_view()(request)

        assert response.status_code == 400
        assert content(response) == {"error": "Invalid JSON in request body"}

    def test_validation_error_is_422(self, rf, db):
        from django_restful.tests.testapp.forms import BookForm

        request = rf.post("/books/", data=json.dumps({"title": ""}), content_type="application/json")
        response = make_view(form_class=BookForm)(request)

        assert response.status_code == 422
        errors = content(response)["errors"]
        assert "title" in errors
        assert "price" in errors

    def test_storage_failure_is_501(self, rf, db):
        request = rf.post("/books/", data=json.dumps({"title": "Mike"}), content_type="application/json")
        response = make_view()(request)

        assert response.status_code == 501
        assert content(response) == {"status": "failed", "error": "Could not perform action"}


class TestUpdate:
    def test_patch_form_encoded(self, rf, books):
        request = rf.patch(
            f"/books/{books[0].pk}/",
            data="price=20",
            content_type="application/x-www-form-urlencoded",
        )
        response = make_view()(request, pk=books[0].pk)

        assert response.status_code == 200
        assert content(response)["data"]["price"] == 20

    def test_put_json(self, rf, books):
        request = rf.put(f"/books/{books[0].pk}/", data=json.dumps({"status": "closed"}), content_type="application/json")
        response = make_view()(request, pk=books[0].pk)
        assert content(response)["data"]["status"] == "closed"

    def test_put_missing_is_404(self, rf, books):
        request = rf.put("/books/999999/", data=json.dumps({"price": 1}), content_type="application/json")
        response = make_view()(request, pk=999999)
        assert response.status_code == 404

    def test_put_without_pk(self, rf, db):
        request = rf.put("/books/", data="{}", content_type="application/json")
        response = make_view()(request)
        assert response.status_code == 405


class TestDelete:
    def test_delete(self, rf, books):
        response = make_view()(rf.delete(f"/books/{books[0].pk}/"), pk=books[0].pk)
        assert response.status_code == 200
        assert content(response) == {"status": "successful"}

    def test_delete_missing(self, rf, books):
        response = make_view()(rf.delete("/books/999999/"), pk=999999)
        assert response.status_code == 404
        assert content(response) == {"error": "Cannot delete resource"}


class TestConfiguration:
    def test_unconfigured_view(self, rf):
        from django_restful.views import RestfulView

        response = RestfulView.as_view()(rf.get("/things/"))
        assert response.status_code == 500

    def test_csrf_exempt_setting(self, settings_override):
        settings_override(CSRF_EXEMPT=True)
        assert getattr(make_view(), "csrf_exempt", False) is True

    def test_csrf_enforced_by_default(self):
        assert getattr(make_view(), "csrf_exempt", False) is False
