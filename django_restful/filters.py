"""
Django-Restful Filter Utilities

Turns request query parameters into typed filter predicates and order
directives.

Supports:
- Bare values (implicit EQ): ?status=open, ?status[]=open&status[]=closed
- Operator keys: ?price[GTE]=10&price[LTE]=50
- The _filter escape for attribute names that clash with the reserved
  prefix or contain dots: ?_filter[author.name][LIKE]=khan
- Ordering: ?_order=-price
"""

import enum
import re
from collections.abc import Mapping
from typing import NamedTuple, Tuple

from django_restful.conf import restful_settings


class Operator(str, enum.Enum):
    NOT = "NOT"
    GT = "GT"
    GTE = "GTE"
    LT = "LT"
    LTE = "LTE"
    EQ = "EQ"
    LIKE = "LIKE"


# Extraction order used by parse_filters
OPERATORS = (
    Operator.NOT,
    Operator.GT,
    Operator.GTE,
    Operator.LT,
    Operator.LTE,
    Operator.EQ,
    Operator.LIKE,
)


class Direction(str, enum.Enum):
    ASC = "ASC"
    DESC = "DESC"


class FilterPredicate(NamedTuple):
    """A single attribute/operator/operands filter condition."""

    attribute: str
    operator: Operator
    operands: Tuple[str, ...]


class OrderDirective(NamedTuple):
    attribute: str
    direction: Direction = Direction.ASC

    @property
    def descending(self):
        return self.direction is Direction.DESC


# Positional values inside a nested parameter (name[]=x, name[0]=x)
POSITIONAL = ""

_KEY_RE = re.compile(r"^([^\[\]]+)((?:\[[^\[\]]*\])*)$")
_SEGMENT_RE = re.compile(r"\[([^\[\]]*)\]")


def split_param_key(key):
    """
    Split a bracketed parameter key into its path segments.

    Positional segments ("" or digits) collapse into POSITIONAL and end the
    path, since they only say "append to the list here".

    Examples:
        >>> split_param_key("status")
        ['status']
        >>> split_param_key("price[GTE]")
        ['price', 'GTE']
        >>> split_param_key("_filter[author.name][LIKE]")
        ['_filter', 'author.name', 'LIKE']
        >>> split_param_key("tags[]")
        ['tags', '']
    """
    match = _KEY_RE.match(key)
    if not match:
        return [key]

    path = [match.group(1)]
    for segment in _SEGMENT_RE.findall(match.group(2)):
        if segment == "" or segment.isdigit():
            path.append(POSITIONAL)
            break
        path.append(segment)
    return path


def _insert(node, path, values):
    """Insert values into the nested parameter tree at path."""
    head = path[0]
    rest = [p for p in path[1:] if p != POSITIONAL]

    if not rest:
        current = node.get(head)
        if isinstance(current, dict):
            current.setdefault(POSITIONAL, []).extend(values)
        else:
            node.setdefault(head, []).extend(values)
        return

    current = node.get(head)
    if current is None:
        current = node[head] = {}
    elif not isinstance(current, dict):
        # name=x followed by name[OP]=y: keep x as positional values
        current = node[head] = {POSITIONAL: current}
    _insert(current, rest, values)


def nest_params(query):
    """
    Build nested RawParameters from a flat query mapping.

    Accepts a Django QueryDict (multi-valued) or any plain mapping. Keys keep
    every character they arrived with, dots included.

    Args:
        query: QueryDict or mapping of key -> value(s)

    Returns:
        Dict of name -> list of strings, or name -> nested dict

    Examples:
        >>> nest_params(QueryDict("price[GTE]=10&price[LTE]=50&status=open"))
        {'price': {'GTE': ['10'], 'LTE': ['50']}, 'status': ['open']}
        >>> nest_params(QueryDict("tags[]=a&tags[]=b"))
        {'tags': ['a', 'b']}
    """
    nested = {}

    if hasattr(query, "lists"):
        items = query.lists()
    else:
        items = ((key, _as_list(value)) for key, value in query.items())

    for key, values in items:
        _insert(nested, split_param_key(key), [str(v) for v in values])

    return nested


def _as_list(value):
    """Normalise a parameter value into a list of strings."""
    if value is None:
        return []
    if isinstance(value, Mapping):
        # Only positional entries count as values; named keys are discarded
        return _as_list(value.get(POSITIONAL))
    if isinstance(value, (list, tuple)):
        result = []
        for item in value:
            result.extend(_as_list(item))
        return result
    return [str(value)]


def parse_filters(params, filter_param=None, reserved_prefix=None):
    """
    Parse request parameters into an ordered list of FilterPredicates.

    Args:
        params: Nested RawParameters (see nest_params) or a QueryDict
        filter_param: Escape parameter name (default: FILTER_PARAM setting)
        reserved_prefix: Control parameter prefix (default: RESERVED_PREFIX setting)

    Returns:
        List of FilterPredicate in parameter order, then operator order

    Examples:
        >>> parse_filters({"status": "open"})
        [FilterPredicate(attribute='status', operator=<Operator.EQ: 'EQ'>, operands=('open',))]
        >>> parse_filters({"price": {"GTE": "10", "LTE": "50"}})
        [FilterPredicate('price', GTE, ('10',)), FilterPredicate('price', LTE, ('50',))]
    """
    if filter_param is None:
        filter_param = restful_settings.FILTER_PARAM
    if reserved_prefix is None:
        reserved_prefix = restful_settings.RESERVED_PREFIX

    if hasattr(params, "getlist"):
        params = nest_params(params)

    parameters = dict(params)

    # The escape parameter lets clients send names the transport would mangle.
    # Top-level parameters win over escaped ones with the same name.
    escaped = parameters.pop(filter_param, None)
    if isinstance(escaped, Mapping):
        for attribute, value in escaped.items():
            parameters.setdefault(attribute, value)

    predicates = []

    for attribute, value in parameters.items():
        if not attribute or attribute.startswith(reserved_prefix):
            continue

        if isinstance(value, Mapping):
            remaining = dict(value)
            for operator in OPERATORS:
                if operator.value in remaining:
                    operands = _as_list(remaining.pop(operator.value))
                    if operands:
                        predicates.append(FilterPredicate(attribute, operator, tuple(operands)))
            values = _as_list(remaining)
        else:
            values = _as_list(value)

        # Default operator = EQ
        if values:
            predicates.append(FilterPredicate(attribute, Operator.EQ, tuple(values)))

    return predicates


def encode_filters(predicates, filter_param=None, reserved_prefix=None):
    """
    Encode predicates back into (key, value) query parameter pairs.

    Dotted attribute names go through the escape parameter so they survive
    transports that rewrite dots in keys.

    Examples:
        >>> encode_filters([FilterPredicate("price", Operator.GT, ("5",))])
        [('price[GT]', '5')]
        >>> encode_filters([FilterPredicate("author.name", Operator.EQ, ("Ann",))])
        [('_filter[author.name][]', 'Ann')]
    """
    if filter_param is None:
        filter_param = restful_settings.FILTER_PARAM
    if reserved_prefix is None:
        reserved_prefix = restful_settings.RESERVED_PREFIX

    pairs = []
    for predicate in predicates:
        attribute = predicate.attribute
        if "." in attribute or attribute.startswith(reserved_prefix):
            base = f"{filter_param}[{attribute}]"
        else:
            base = attribute

        if predicate.operator is Operator.EQ:
            key = f"{base}[]"
        else:
            key = f"{base}[{predicate.operator.value}]"

        pairs.extend((key, operand) for operand in predicate.operands)

    return pairs


def parse_order(value):
    """
    Parse an order parameter into an OrderDirective.

    A "-" prefix negates the direction.

    Examples:
        >>> parse_order("-name")
        OrderDirective(attribute='name', direction=<Direction.DESC: 'DESC'>)
        >>> parse_order("name")
        OrderDirective(attribute='name', direction=<Direction.ASC: 'ASC'>)
        >>> parse_order("") is None
        True
    """
    if isinstance(value, (list, tuple)):
        value = value[-1] if value else None
    if not value or not isinstance(value, str):
        return None

    value = value.strip()
    direction = Direction.DESC if value.startswith("-") else Direction.ASC
    attribute = value.lstrip("-")

    if not attribute:
        return None

    return OrderDirective(attribute, direction)


def is_filterable(attribute, allowed) -> bool:
    """
    Check whether an attribute may be filtered or ordered on.

    Exact, case-sensitive membership. Dotted paths are only filterable when
    the allow-list literally contains them.
    """
    return attribute in allowed
