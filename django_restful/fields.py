"""
Django-Restful Field Utilities

Handles include parsing and model introspection for restful resources.

Features:
- Parse comma-separated include strings
- Derive the fillable (filterable/writable) field set of a model
- Restrict and normalise create/update payloads
"""

from django_restful.conf import restful_settings


def parse_includes(include_str):
    """
    Parse a comma-separated include string into a set of relation paths.

    Paths are passed through as given; whether a relation exists is decided
    by the serializer.

    Args:
        include_str: Comma-separated includes (e.g., "author, author.publisher")

    Returns:
        Frozenset of dot-delimited include paths

    Examples:
        >>> sorted(parse_includes("author,author.publisher"))
        ['author', 'author.publisher']
        >>> parse_includes("")
        frozenset()
        >>> parse_includes(None)
        frozenset()
    """
    if isinstance(include_str, (list, tuple)):
        include_str = ",".join(str(i) for i in include_str)
    if not include_str:
        return frozenset()

    return frozenset(i.strip() for i in include_str.split(",") if i.strip())


def get_fillable_fields(model):
    """
    Get the fillable field names for a model.

    Concrete, editable, non primary key fields. This is the default
    allow-list for filtering, ordering and create/update payloads.

    Example:
        >>> get_fillable_fields(Book)
        ['title', 'price', 'author']
    """
    fillable = []
    for field in model._meta.concrete_fields:
        if field.primary_key or not field.editable:
            continue
        fillable.append(field.name)
    return fillable


def get_fk_fields(model):
    """
    Get set of ForeignKey field names for a model.

    Example:
        >>> get_fk_fields(Book)
        {'author'}
    """
    from django.db.models import ForeignKey

    fk_fields = set()
    for field in model._meta.get_fields():
        if isinstance(field, ForeignKey):
            fk_fields.add(field.name)
    return fk_fields


def resolve_fk_values(model, data):
    """
    Convert FK fields from 'author: 1' to 'author_id: 1' pattern.

    Lets payloads carry related ids without fetching the related objects.
    Numeric strings from form-encoded bodies count as ids too.

    Example:
        >>> resolve_fk_values(Book, {'author': 1, 'title': 'Test'})
        {'author_id': 1, 'title': 'Test'}
    """
    fk_fields = get_fk_fields(model)
    result = {}

    for key, value in data.items():
        if key in fk_fields and (isinstance(value, int) or (isinstance(value, str) and value.isdigit())):
            result[f"{key}_id"] = value
        else:
            result[key] = value

    return result


def filter_payload(data, fillable, reserved_prefix=None):
    """
    Keep only fillable, non-control attributes of a create/update payload.

    Multi-valued form fields collapse to their last value.

    Args:
        data: Mapping or QueryDict of attribute -> value
        fillable: Allowed attribute names
        reserved_prefix: Control prefix (default: RESERVED_PREFIX setting)

    Returns:
        Dict of attribute -> value
    """
    if reserved_prefix is None:
        reserved_prefix = restful_settings.RESERVED_PREFIX

    if hasattr(data, "dict"):
        data = data.dict()

    return {k: v for k, v in data.items() if not k.startswith(reserved_prefix) and k in fillable}
