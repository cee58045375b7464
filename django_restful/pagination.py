"""
Django-Restful Pagination

Page-number pagination driven by the _page control parameter, plus the
metadata needed to build page links that keep every other request
parameter (filters, order, includes).
"""

from typing import NamedTuple, Optional

from django.core.paginator import Paginator
from django.http import QueryDict

from django_restful.conf import restful_settings


class PaginationDirective(NamedTuple):
    page_param: str
    page_size: Optional[int] = None


def default_directive(page_size=None):
    """PaginationDirective built from settings."""
    return PaginationDirective(restful_settings.PAGE_PARAM, page_size)


def _to_query_dict(params):
    if isinstance(params, QueryDict):
        return params.copy()

    query = QueryDict(mutable=True)
    for key, value in (params or {}).items():
        if isinstance(value, (list, tuple)):
            query.setlist(key, [str(v) for v in value])
        elif value is not None:
            query[key] = str(value)
    return query


def link_query_string(params, page_param):
    """
    Re-encode request parameters without the page-number parameter.

    Brackets stay literal so operator keys remain readable in links.

    Examples:
        >>> link_query_string(QueryDict("status[EQ]=open&_page=1"), "_page")
        'status[EQ]=open'
    """
    query = _to_query_dict(params)
    query.pop(page_param, None)
    return query.urlencode(safe="[]")


def _page_number(params, page_param):
    if params is None:
        return 1
    if isinstance(params, QueryDict):
        return params.get(page_param, 1)
    value = params.get(page_param, 1)
    if isinstance(value, (list, tuple)):
        value = value[-1] if value else 1
    return value


class PageResult:
    """
    One page of records plus navigation metadata.

    Example:
        >>> page = paginate(Book.objects.all(), request.GET, default_directive())
        >>> page.meta()
        {'total': 42, 'count': 15, 'per_page': 15, 'current_page': 1,
         'last_page': 3, 'links': {'next': '?status=open&_page=2'}}
    """

    def __init__(self, records, total, per_page, current_page, last_page, link_query_string, page_param):
        self.records = records
        self.total = total
        self.per_page = per_page
        self.current_page = current_page
        self.last_page = last_page
        self.link_query_string = link_query_string
        self.page_param = page_param

    def page_link(self, number):
        """Query string for another page of the same result set."""
        if self.link_query_string:
            return f"?{self.link_query_string}&{self.page_param}={number}"
        return f"?{self.page_param}={number}"

    def meta(self):
        """Pagination block attached to collection output."""
        links = {}
        if self.current_page > 1:
            links["previous"] = self.page_link(self.current_page - 1)
        if self.current_page < self.last_page:
            links["next"] = self.page_link(self.current_page + 1)

        return {
            "total": self.total,
            "count": len(self.records),
            "per_page": self.per_page,
            "current_page": self.current_page,
            "last_page": self.last_page,
            "links": links,
        }


def paginate(queryset, params, directive):
    """
    Evaluate exactly one page of a queryset.

    Invalid page numbers resolve to the first page and numbers past the end
    to the last page.

    Args:
        queryset: Filtered and ordered queryset
        params: Original request parameters (QueryDict or mapping)
        directive: PaginationDirective

    Returns:
        PageResult
    """
    per_page = directive.page_size or restful_settings.PAGE_SIZE
    paginator = Paginator(queryset, per_page)
    page = paginator.get_page(_page_number(params, directive.page_param))

    return PageResult(
        records=list(page.object_list),
        total=paginator.count,
        per_page=per_page,
        current_page=page.number,
        last_page=paginator.num_pages,
        link_query_string=link_query_string(params, directive.page_param),
        page_param=directive.page_param,
    )
