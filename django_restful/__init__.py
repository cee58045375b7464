"""
Django-Restful: request-to-query translation for Django

Turns query-string parameters into filter predicates, ordering and
page-number pagination over a Django queryset, then renders the results
through transformers with optional related-resource includes.

Example:
    from django_restful import RestfulResource

    books = RestfulResource(Book, BookTransformer(), filterable=["title", "price"])

    # ?price[GTE]=10&price[LTE]=50&_order=-price&_page=1&_include=author
    response = books.index(request.GET)
"""

__version__ = "26.10.0"

# Filter parsing
from django_restful.filters import (
    Direction,
    FilterPredicate,
    Operator,
    OPERATORS,
    OrderDirective,
    encode_filters,
    is_filterable,
    nest_params,
    parse_filters,
    parse_order,
)

# Query application
from django_restful.query import QueryDirectives, apply_directives, apply_filters, apply_order, build_q_object

# Pagination
from django_restful.pagination import PageResult, PaginationDirective, paginate

# Field utilities
from django_restful.fields import get_fillable_fields, parse_includes

# Transformation
from django_restful.transformers import Serializer, Transformer, transform

# Storage and errors
from django_restful.storage import Storage, StorageFailure, StorageResult
from django_restful.errors import ErrorMapper

# Actions and views
from django_restful.actions import RestfulResource
from django_restful.response import RestfulResponse
from django_restful.views import RestfulView

# Configuration
from django_restful.conf import restful_settings

__all__ = [
    # Version
    "__version__",
    # Filters
    "Direction",
    "FilterPredicate",
    "Operator",
    "OPERATORS",
    "OrderDirective",
    "encode_filters",
    "is_filterable",
    "nest_params",
    "parse_filters",
    "parse_order",
    # Query
    "QueryDirectives",
    "apply_directives",
    "apply_filters",
    "apply_order",
    "build_q_object",
    # Pagination
    "PageResult",
    "PaginationDirective",
    "paginate",
    # Fields
    "get_fillable_fields",
    "parse_includes",
    # Transformers
    "Serializer",
    "Transformer",
    "transform",
    # Storage / errors
    "Storage",
    "StorageFailure",
    "StorageResult",
    "ErrorMapper",
    # Actions / views
    "RestfulResource",
    "RestfulResponse",
    "RestfulView",
    # Settings
    "restful_settings",
]
