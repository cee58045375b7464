"""
Django-Restful Query Applier

Applies parsed filter predicates and order directives to a Django queryset.

Provides:
- lookup_path, build_predicate_q and build_q_object for Q construction
- apply_filters, apply_order and apply_directives for queryset mutation
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import NamedTuple, Optional, Sequence

from django.core.exceptions import ValidationError
from django.db.models import Q
from django.db.models.constants import LOOKUP_SEP

from django_restful.filters import FilterPredicate, Operator, OrderDirective, is_filterable


logger = logging.getLogger("django_restful")


# Operator -> Django lookup for single-bound comparisons
COMPARISONS = {
    Operator.GT: "gt",
    Operator.GTE: "gte",
    Operator.LT: "lt",
    Operator.LTE: "lte",
}


def _sort_key(operands):
    """Numeric ordering when every operand is a number, else lexicographic."""
    try:
        numeric = all(Decimal(operand).is_finite() for operand in operands)
    except (InvalidOperation, ValueError, TypeError):
        return str
    return Decimal if numeric else str


def tightest_bound(operator, operands):
    """
    Pick the authoritative operand for an inequality operator.

    GT/GTE use the largest operand and LT/LTE the smallest; looser bounds
    are implied by it.

    Examples:
        >>> tightest_bound(Operator.GT, ("5", "9"))
        '9'
        >>> tightest_bound(Operator.GT, ("9", "10"))
        '10'
        >>> tightest_bound(Operator.LTE, ("b", "a"))
        'a'
    """
    key = _sort_key(operands)
    if operator in (Operator.GT, Operator.GTE):
        return max(operands, key=key)
    return min(operands, key=key)


def lookup_path(attribute):
    """
    Translate a dotted attribute name into an ORM lookup path.

    Example:
        >>> lookup_path("author.name")
        'author__name'
    """
    return attribute.replace(".", LOOKUP_SEP)


def build_predicate_q(predicate):
    """
    Build a Q object for a single FilterPredicate.

    Examples:
        >>> build_predicate_q(FilterPredicate("status", Operator.EQ, ("open",)))
        <Q: (AND: ('status__in', ['open']))>
        >>> build_predicate_q(FilterPredicate("name", Operator.LIKE, ("ann", "bob")))
        <Q: (OR: ('name__contains', 'ann'), ('name__contains', 'bob'))>
    """
    attribute, operator, operands = predicate
    path = lookup_path(attribute)

    if operator is Operator.EQ:
        return Q(**{f"{path}__in": list(operands)})

    if operator is Operator.NOT:
        return ~Q(**{f"{path}__in": list(operands)})

    if operator in COMPARISONS:
        bound = tightest_bound(operator, operands)
        return Q(**{f"{path}__{COMPARISONS[operator]}": bound})

    if operator is Operator.LIKE:
        # Matches any of the operands
        like_q = Q()
        for operand in operands:
            like_q |= Q(**{f"{path}__contains": operand})
        return like_q

    raise ValueError(f"Unsupported operator: {operator}")


def build_q_object(predicates, allowed, queryset=None):
    """
    Combine filterable predicates into a single AND-ed Q object.

    Predicates on attributes outside the allow-list are dropped. When a
    queryset is given, predicates whose operands the field cannot accept
    (e.g. "abc" for an integer column) are dropped as well.

    Args:
        predicates: Sequence of FilterPredicate
        allowed: Filterable attribute names
        queryset: Optional queryset used to check operand conversion

    Returns:
        Django Q object (empty Q when nothing applies)
    """
    result = Q()

    for predicate in predicates:
        if not is_filterable(predicate.attribute, allowed):
            logger.debug("Dropping filter on non-filterable attribute %r", predicate.attribute)
            continue

        predicate_q = build_predicate_q(predicate)

        if queryset is not None:
            try:
                # Lookups convert their operands when the filter is built
                queryset.filter(predicate_q)
            except (ValueError, TypeError, ValidationError):
                logger.debug(
                    "Dropping filter on %r with unusable operands %r",
                    predicate.attribute,
                    predicate.operands,
                )
                continue

        result &= predicate_q

    return result


def apply_filters(queryset, predicates, allowed):
    """Apply filterable predicates to a queryset with AND semantics."""
    q = build_q_object(predicates, allowed, queryset=queryset)
    if not q:
        return queryset
    return queryset.filter(q)


def apply_order(queryset, order, allowed):
    """
    Apply a single-attribute order directive.

    No directive, or one on a non-filterable attribute, leaves the
    storage default ordering untouched.
    """
    if order is None:
        return queryset

    if not is_filterable(order.attribute, allowed):
        logger.debug("Dropping order on non-filterable attribute %r", order.attribute)
        return queryset

    prefix = "-" if order.descending else ""
    return queryset.order_by(f"{prefix}{lookup_path(order.attribute)}")


class QueryDirectives(NamedTuple):
    """Everything derived from one request that shapes a list query."""

    predicates: Sequence[FilterPredicate] = ()
    order: Optional[OrderDirective] = None


def apply_directives(queryset, directives, allowed):
    """Apply filters then ordering from a QueryDirectives bundle."""
    queryset = apply_filters(queryset, directives.predicates, allowed)
    return apply_order(queryset, directives.order, allowed)
