"""
Django-Restful Actions

Plug-and-play index/show/store/update/destroy actions for one model.

Each action is an explicit pipeline:
    request params -> filter parser -> query applier -> storage
    -> transformer (with pagination metadata) -> RestfulResponse
with storage failures mapped to the uniform failure document.
"""

import logging

from django.core.exceptions import ValidationError

from django_restful.conf import restful_settings
from django_restful.errors import ErrorMapper
from django_restful.fields import filter_payload, get_fillable_fields, parse_includes, resolve_fk_values
from django_restful.filters import nest_params, parse_filters, parse_order
from django_restful.pagination import PaginationDirective
from django_restful.query import QueryDirectives, apply_directives
from django_restful.response import RestfulResponse
from django_restful.storage import Storage
from django_restful.transformers import Serializer, transform


logger = logging.getLogger("django_restful")


def get_param(params, name, default=None):
    """Read a single control parameter value from a QueryDict or mapping."""
    if params is None:
        return default
    value = params.get(name, default)
    if isinstance(value, (list, tuple)):
        return value[-1] if value else default
    return value


class RestfulResource:
    """
    The restful actions for one model.

    Example:
        books = RestfulResource(Book, BookTransformer(), filterable=["title", "price"])

        books.index(request.GET).to_json_response()
        books.show(pk, request.GET).to_json_response()
        books.store(payload, request.GET, form_class=BookForm)
        books.update(pk, payload, request.GET, form_class=BookForm)
        books.destroy(pk)
    """

    def __init__(
        self,
        model,
        transformer,
        filterable=None,
        debug=None,
        page_size=None,
        serializer=None,
        storage=None,
    ):
        """
        Args:
            model: Django model class
            transformer: Transformer for the model's records
            filterable: Attribute names allowed as filter/order targets
                (default: the model's fillable fields)
            debug: Include database detail in failure documents
                (default: DEBUG setting, resolved once here)
            page_size: Records per page (default: PAGE_SIZE setting)
            serializer: Serializer collaborator (default: Serializer())
            storage: Storage collaborator (default: Storage(model))
        """
        self.model = model
        self.transformer = transformer
        self.fillable = frozenset(get_fillable_fields(model))
        self.filterable = frozenset(self.fillable if filterable is None else filterable)
        self.page_size = page_size
        self.serializer = serializer or Serializer()
        self.storage = storage or Storage(model)

        if debug is None:
            debug = restful_settings.debug_enabled()
        self.error_mapper = ErrorMapper(debug=debug, message=restful_settings.FAILURE_MESSAGE)

    # Request interpretation

    def get_directives(self, params):
        """Derive filter predicates and order directive from request params."""
        nested = nest_params(params) if hasattr(params, "getlist") else params
        predicates = parse_filters(nested)
        order = parse_order(get_param(params, restful_settings.ORDER_PARAM) or restful_settings.DEFAULT_ORDER)
        return QueryDirectives(predicates, order)

    def get_includes(self, params):
        return parse_includes(get_param(params, restful_settings.INCLUDE_PARAM, ""))

    def get_pagination(self):
        return PaginationDirective(restful_settings.PAGE_PARAM, self.page_size)

    # Helpers

    def _failure(self, result):
        return RestfulResponse.storage_failure(self.error_mapper.map(result.failure))

    def _render(self, data, params, pagination=None):
        """Transform inside storage so lazy relation loads are covered too."""
        return self.storage.run(
            transform,
            data,
            self.transformer,
            self.get_includes(params),
            pagination=pagination,
            serializer=self.serializer,
        )

    def validate(self, data, form_class=None):
        """
        Run the validation collaborator over a payload.

        Raises django ValidationError unchanged when the form is invalid.
        Returns cleaned values for the keys present in the payload.
        """
        if form_class is None:
            return {}

        form = form_class(data)
        if not form.is_valid():
            raise ValidationError(form.errors.as_data())

        return {k: v for k, v in form.cleaned_data.items() if k in data}

    def get_attributes(self, data, cleaned=None):
        attributes = filter_payload(data, self.fillable)
        if cleaned:
            attributes.update({k: v for k, v in cleaned.items() if k in attributes})
        return resolve_fk_values(self.model, attributes)

    # Actions

    def index(self, params):
        """List one page of filtered, ordered records."""
        directives = self.get_directives(params)
        queryset = apply_directives(self.storage.queryset(), directives, self.filterable)

        result = self.storage.paginate(queryset, params, self.get_pagination())
        if not result.ok:
            return self._failure(result)

        page = result.value
        rendered = self._render(page.records, params, pagination=page.meta())
        if not rendered.ok:
            return self._failure(rendered)

        return RestfulResponse.ok(rendered.value)

    def show(self, pk, params=None):
        """Return a single record; a missing record renders as {"data": None}."""
        result = self.storage.find(pk)
        if not result.ok:
            return self._failure(result)

        rendered = self._render(result.value, params)
        if not rendered.ok:
            return self._failure(rendered)

        return RestfulResponse.ok(rendered.value)

    def store(self, data, params=None, form_class=None):
        """Create a record from the payload and return it."""
        cleaned = self.validate(data, form_class)
        attributes = self.get_attributes(data, cleaned)

        result = self.storage.create(attributes)
        if not result.ok:
            return self._failure(result)

        # Re-read so database defaults are reflected
        found = self.storage.find(result.value.pk)
        if not found.ok:
            return self._failure(found)

        rendered = self._render(found.value, params)
        if not rendered.ok:
            return self._failure(rendered)

        return RestfulResponse.created(rendered.value)

    def update(self, pk, data, params=None, form_class=None):
        """Update a record from the payload; a missing record is NOT_FOUND."""
        cleaned = self.validate(data, form_class)

        found = self.storage.find(pk)
        if not found.ok:
            return self._failure(found)
        if found.value is None:
            return RestfulResponse.error("NOT_FOUND", "Cannot update resource")

        result = self.storage.update(found.value, self.get_attributes(data, cleaned))
        if not result.ok:
            return self._failure(result)

        rendered = self._render(result.value, params)
        if not rendered.ok:
            return self._failure(rendered)

        return RestfulResponse.ok(rendered.value)

    def destroy(self, pk):
        """Delete a record; a missing record is NOT_FOUND, never a success."""
        found = self.storage.find(pk)
        if not found.ok:
            return self._failure(found)
        if found.value is None:
            return RestfulResponse.error("NOT_FOUND", "Cannot delete resource")

        result = self.storage.delete(found.value)
        if not result.ok:
            return self._failure(result)
        if not result.value:
            return RestfulResponse.error("NOT_FOUND", "Cannot delete resource")

        logger.debug("Deleted %s %s", self.model.__name__, pk)
        return RestfulResponse.ok({"status": "successful"})
