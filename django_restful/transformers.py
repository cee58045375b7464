"""
Django-Restful Transformers

Maps records to their client representation, with optional related
resources requested through _include.

Features:
- Transformer classes declaring output fields and available includes
- Recursive include resolution (author.publisher)
- Item / collection documents with pagination metadata
"""

from collections.abc import Mapping


MAX_INCLUDE_DEPTH = 10


def get_field_value(obj, field_name):
    """
    Read a field from a model instance or mapping.

    Returns None when the attribute is missing.
    """
    if isinstance(obj, Mapping):
        return obj.get(field_name)
    return getattr(obj, field_name, None)


def serialize_value(value):
    """
    Serialize a value for JSON output.

    Handles common Django types:
    - DateField, DateTimeField -> ISO format string
    - UUID -> string
    - Decimal -> string
    - Related object -> primary key string
    """
    if value is None:
        return None

    if isinstance(value, (bool, int, float, str)):
        return value

    # DateTime/Date
    if hasattr(value, "isoformat"):
        return value.isoformat()

    # UUID
    if hasattr(value, "hex"):
        return str(value)

    # Related object - just use pk
    if hasattr(value, "pk"):
        return str(value.pk)

    # Decimal and anything else with a sensible string form
    return str(value)


class Resource:
    """A record (or records) paired with the transformer that renders it."""

    def __init__(self, data, transformer, collection=False):
        self.data = data
        self.transformer = transformer
        self.collection = collection


class Transformer:
    """
    Base transformer.

    Subclass and declare the output fields. Each name in
    available_includes needs an include_<name> method returning a
    Resource built with self.item() or self.collection().

    Example:
        class AuthorTransformer(Transformer):
            fields = ["id", "name"]
            available_includes = ["publisher"]

            def include_publisher(self, author):
                return self.item(author.publisher, PublisherTransformer())

        class BookTransformer(Transformer):
            fields = ["id", "title", "price"]
            available_includes = ["author"]

            def include_author(self, book):
                return self.item(book.author, AuthorTransformer())
    """

    fields = ["id"]
    available_includes = []

    def transform(self, obj):
        """Build the base dict for a record. Override for computed output."""
        return {name: serialize_value(get_field_value(obj, name)) for name in self.fields}

    def item(self, data, transformer):
        return Resource(data, transformer)

    def collection(self, data, transformer):
        return Resource(data, transformer, collection=True)

    def get_include(self, name, obj):
        """Resolve one include on a record, or None when it is not available."""
        if name not in self.available_includes:
            return None
        method = getattr(self, f"include_{name}", None)
        if method is None:
            return None
        return method(obj)


def _split_includes(includes):
    """
    Group include paths by their first segment.

    Examples:
        >>> _split_includes({"author", "author.publisher", "tags"})
        {'author': {'publisher'}, 'tags': set()}
    """
    scopes = {}
    for path in sorted(includes):
        head, _, rest = path.partition(".")
        if not head:
            continue
        children = scopes.setdefault(head, set())
        if rest:
            children.add(rest)
    return scopes


class Serializer:
    """
    Turns records into output documents.

    Output shapes:
        item:       {"data": {...}}
        missing:    {"data": None}
        collection: {"data": [...], "meta": {"pagination": {...}}}

    Included relations are nested under their include name inside each
    record, themselves wrapped as {"data": ...}.
    """

    def __init__(self, max_depth=MAX_INCLUDE_DEPTH):
        self.max_depth = max_depth

    def serialize(self, data, transformer, includes=frozenset(), pagination=None, collection=False):
        if collection:
            document = {"data": [self._render(obj, transformer, includes, 1) for obj in data]}
            if pagination is not None:
                document["meta"] = {"pagination": pagination}
            return document

        if data is None:
            return {"data": None}
        return {"data": self._render(data, transformer, includes, 1)}

    def _render(self, obj, transformer, includes, depth):
        result = transformer.transform(obj)

        if depth > self.max_depth:
            return result

        for name, children in _split_includes(includes).items():
            resource = transformer.get_include(name, obj)
            if resource is None:
                continue
            result[name] = self._render_resource(resource, children, depth + 1)

        return result

    def _render_resource(self, resource, includes, depth):
        if resource.collection:
            return {"data": [self._render(obj, resource.transformer, includes, depth) for obj in resource.data]}
        if resource.data is None:
            return {"data": None}
        return {"data": self._render(resource.data, resource.transformer, includes, depth)}


def is_collection(data):
    """Whether data should be rendered in collection mode."""
    if data is None or isinstance(data, (str, bytes, Mapping)):
        return False
    if hasattr(data, "_meta") and hasattr(data, "pk"):
        return False
    return hasattr(data, "__iter__")


def transform(data, transformer, includes=frozenset(), pagination=None, serializer=None):
    """
    Transform query results into an output document.

    Single records (or None) render as an item; sequences and querysets as
    a collection with the pagination block attached when given. The include
    set is passed to the serializer untouched.

    Args:
        data: Model instance, None, or sequence of instances
        transformer: Transformer for the root resource
        includes: Set of include paths from _include
        pagination: Optional pagination metadata dict
        serializer: Optional Serializer (default: Serializer())

    Returns:
        Output document dict from the serializer
    """
    serializer = serializer or Serializer()
    return serializer.serialize(
        data,
        transformer,
        includes,
        pagination=pagination,
        collection=is_collection(data),
    )
