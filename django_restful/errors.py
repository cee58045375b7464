"""
Django-Restful Error Mapping

Converts storage failures into the uniform failure document:

    {"status": "failed", "error": "Could not perform action"}

With debug enabled the raw database message, the SQL text and its
bindings are added as sql_message, query and bindings.
"""

DEFAULT_MESSAGE = "Could not perform action"


class ErrorMapper:
    """
    Maps StorageFailure values to failure documents.

    The debug flag is fixed at construction; the mapper never reads
    settings itself.

    Example:
        >>> ErrorMapper(debug=False).map(failure)
        {'status': 'failed', 'error': 'Could not perform action'}
    """

    def __init__(self, debug: bool = False, message: str = None):
        self.debug = bool(debug)
        self.message = message or DEFAULT_MESSAGE

    def map(self, failure) -> dict:
        document = {
            "status": "failed",
            "error": self.message,
        }

        if self.debug:
            document["sql_message"] = failure.message
            document["query"] = failure.query
            document["bindings"] = list(failure.bindings)

        return document
