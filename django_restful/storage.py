"""
Django-Restful Storage

Wraps the Django ORM calls made by restful actions. Database errors are
returned as a failed StorageResult instead of being raised, carrying the
statement that failed and its bindings.
"""

import logging
from typing import NamedTuple, Optional

from django.core.exceptions import ValidationError
from django.db import DEFAULT_DB_ALIAS, DatabaseError, connections, transaction

from django_restful.pagination import paginate


logger = logging.getLogger("django_restful")


class StorageFailure(NamedTuple):
    message: str
    query: Optional[str] = None
    bindings: tuple = ()


class StorageResult:
    """
    Outcome of a storage call: either a value or a StorageFailure.

    Example:
        >>> result = storage.find(1)
        >>> if not result.ok:
        ...     return mapper.map(result.failure)
        >>> book = result.value
    """

    def __init__(self, value=None, failure=None):
        self.value = value
        self.failure = failure

    @property
    def ok(self):
        return self.failure is None

    @classmethod
    def success(cls, value=None):
        return cls(value=value)

    @classmethod
    def failed(cls, failure):
        return cls(failure=failure)

    def __repr__(self):
        if self.ok:
            return f"<StorageResult ok value={self.value!r}>"
        return f"<StorageResult failed {self.failure.message!r}>"


def _bindings(params):
    if params is None:
        return ()
    if isinstance(params, dict):
        return tuple(params.items())
    return tuple(params)


class QueryRecorder:
    """execute_wrapper that remembers the last statement sent to the database."""

    def __init__(self):
        self.sql = None
        self.params = None

    def __call__(self, execute, sql, params, many, context):
        self.sql = sql
        self.params = params
        return execute(sql, params, many, context)


class Storage:
    """
    ORM access for one model.

    Every method returns a StorageResult; DatabaseError never escapes.
    """

    def __init__(self, model, using=None):
        self.model = model
        self.using = using or DEFAULT_DB_ALIAS

    @property
    def manager(self):
        return self.model._default_manager.db_manager(self.using)

    def queryset(self):
        return self.manager.all()

    def run(self, operation, *args, **kwargs):
        """
        Call operation, turning DatabaseError into a failed StorageResult.

        The operation runs in its own savepoint so a failure leaves an
        enclosing transaction usable.
        """
        recorder = QueryRecorder()
        try:
            # Savepoint rollback happens outside the wrapper so the failing
            # statement stays recorded
            with transaction.atomic(using=self.using):
                with connections[self.using].execute_wrapper(recorder):
                    value = operation(*args, **kwargs)
        except DatabaseError as e:
            logger.warning("Storage failure on %s: %s", self.model.__name__, e)
            return StorageResult.failed(StorageFailure(str(e), recorder.sql, _bindings(recorder.params)))
        return StorageResult.success(value)

    def get(self, queryset):
        """Evaluate a queryset into a list."""
        return self.run(list, queryset)

    def paginate(self, queryset, params, directive):
        """Evaluate one page of a queryset into a PageResult."""
        return self.run(paginate, queryset, params, directive)

    def find(self, pk):
        """Fetch a record by primary key; value is None when absent."""

        def _find():
            try:
                return self.manager.filter(pk=pk).first()
            except (ValueError, TypeError, ValidationError):
                # Malformed ids cannot match any row
                return None

        return self.run(_find)

    def create(self, attributes):
        return self.run(lambda: self.manager.create(**attributes))

    def update(self, obj, attributes):
        def _update():
            for name, value in attributes.items():
                setattr(obj, name, value)
            obj.save(using=self.using)
            # Reload so values come back in their database types
            obj.refresh_from_db(using=self.using)
            return obj

        return self.run(_update)

    def delete(self, obj):
        """Delete a record; value is True when a row was removed."""

        def _delete():
            deleted, _ = obj.delete(using=self.using)
            return deleted > 0

        return self.run(_delete)
