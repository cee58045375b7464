"""
Django-Restful Views

Class-based view exposing the restful actions of one model.

Features:
- GET list/show, POST create, PUT/PATCH update, DELETE destroy
- JSON or form-encoded request bodies
- Configurable per-view settings
"""

import json

from django.core.exceptions import ValidationError
from django.http import JsonResponse, QueryDict
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from django_restful.actions import RestfulResource
from django_restful.conf import restful_settings
from django_restful.response import RestfulResponse


class RestfulView(View):
    """
    Generic view for a restful resource.

    Subclass this view and configure the model and transformer.

    CSRF Protection:
        By default, CSRF protection is ENABLED (secure by default).
        To disable for token-only APIs, set CSRF_EXEMPT=True in settings.

    Example:
        # views.py
        class BookView(RestfulView):
            model = Book
            transformer = BookTransformer()
            filterable = ["title", "price", "published"]
            form_class = BookForm

        # urls.py
        urlpatterns = [
            path('books/', BookView.as_view()),
            path('books/<int:pk>/', BookView.as_view()),
        ]

        # GET /books/?price[GTE]=10&price[LTE]=50&_order=-price&_page=2&_include=author
    """

    # Required
    model = None
    transformer = None

    # Optional: filter/order allow-list (default: model's fillable fields)
    filterable = None

    # Optional: django Form used to validate create/update payloads
    form_class = None

    # Optional: records per page (default: PAGE_SIZE setting)
    page_size = None

    http_method_names = ["get", "post", "put", "patch", "delete", "options"]

    @classmethod
    def as_view(cls, **initkwargs):
        """Override as_view to conditionally apply csrf_exempt based on settings."""
        view = super().as_view(**initkwargs)
        if restful_settings.CSRF_EXEMPT:
            view = csrf_exempt(view)
        return view

    def get_resource(self):
        """Build the RestfulResource. Override for dynamic configuration."""
        return RestfulResource(
            self.model,
            self.transformer,
            filterable=self.filterable,
            page_size=self.page_size,
        )

    def get_form_class(self):
        return self.form_class

    def get_payload(self, request):
        """
        Parse the request body into an attribute mapping.

        JSON bodies are decoded; anything else is read as form data.
        Returns None for an invalid JSON body.
        """
        content_type = request.content_type or ""

        if content_type == "application/json":
            if not request.body:
                return {}
            try:
                payload = json.loads(request.body)
            except json.JSONDecodeError:
                return None
            return payload if isinstance(payload, dict) else None

        if request.method == "POST":
            return request.POST
        return QueryDict(request.body, encoding=request.encoding)

    def dispatch(self, request, *args, **kwargs):
        if self.model is None or self.transformer is None:
            return RestfulResponse.error("INTERNAL_ERROR", "Resource not configured").to_json_response()

        try:
            return super().dispatch(request, *args, **kwargs)
        except ValidationError as e:
            errors = e.message_dict if hasattr(e, "error_dict") else {"__all__": e.messages}
            return JsonResponse({"error": "The given data was invalid", "errors": errors}, status=422)

    def http_method_not_allowed(self, request, *args, **kwargs):
        return RestfulResponse.error("INVALID_ACTION", f"HTTP method {request.method} not supported").to_json_response()

    def get(self, request, pk=None, *args, **kwargs):
        resource = self.get_resource()
        if pk is None:
            return resource.index(request.GET).to_json_response()
        return resource.show(pk, request.GET).to_json_response()

    def post(self, request, *args, **kwargs):
        payload = self.get_payload(request)
        if payload is None:
            return RestfulResponse.error("INVALID_JSON").to_json_response()
        return self.get_resource().store(payload, request.GET, form_class=self.get_form_class()).to_json_response()

    def put(self, request, pk=None, *args, **kwargs):
        if pk is None:
            return self.http_method_not_allowed(request)
        payload = self.get_payload(request)
        if payload is None:
            return RestfulResponse.error("INVALID_JSON").to_json_response()
        return self.get_resource().update(pk, payload, request.GET, form_class=self.get_form_class()).to_json_response()

    patch = put

    def delete(self, request, pk=None, *args, **kwargs):
        if pk is None:
            return self.http_method_not_allowed(request)
        return self.get_resource().destroy(pk).to_json_response()
