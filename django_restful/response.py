"""
Django-Restful Response Utilities

Wraps action output with a response code that maps onto an HTTP status.
"""


class RestfulResponse:
    """
    Response builder for restful actions.

    Example:
        >>> response = RestfulResponse.ok({"data": {"id": 1}})
        >>> response.to_dict()
        {"data": {"id": 1}}

        >>> response = RestfulResponse.error("NOT_FOUND", "Cannot delete resource")
        >>> response.to_dict()
        {"error": "Cannot delete resource"}
    """

    # Map response codes to HTTP status codes
    STATUS_MAP = {
        "OK": 200,
        "CREATED": 201,
        "BAD_REQUEST": 400,
        "INVALID_JSON": 400,
        "NOT_FOUND": 404,
        "INVALID_ACTION": 405,
        "VALIDATION_FAILED": 422,
        "INTERNAL_ERROR": 500,
        "STORAGE_FAILED": 501,
    }

    # Messages for error codes without an explicit message
    MSG_MAP = {
        "BAD_REQUEST": "Bad request",
        "INVALID_JSON": "Invalid JSON in request body",
        "NOT_FOUND": "Not found",
        "INVALID_ACTION": "Action not allowed",
        "VALIDATION_FAILED": "The given data was invalid",
        "INTERNAL_ERROR": "Internal server error",
    }

    def __init__(self, code="OK", data=None, error_message=None):
        """
        Initialize a RestfulResponse.

        Args:
            code: Response code key (e.g., "OK", "NOT_FOUND")
            data: Output document (dict)
            error_message: Optional error message for error responses
        """
        self.code = code
        self.data = data if data is not None else {}
        self.error_message = error_message

    @property
    def success(self):
        """Whether the response indicates success."""
        return self.code in ("OK", "CREATED")

    @property
    def http_status(self):
        """Get HTTP status code for this response."""
        return self.STATUS_MAP.get(self.code, 500)

    @classmethod
    def ok(cls, data):
        return cls(code="OK", data=data)

    @classmethod
    def created(cls, data):
        return cls(code="CREATED", data=data)

    @classmethod
    def error(cls, code, message=None, **data):
        """Create an error response."""
        return cls(code=code, data=data, error_message=message or cls.MSG_MAP.get(code, "An error occurred"))

    @classmethod
    def storage_failure(cls, document):
        """Create a response around an ErrorMapper failure document."""
        return cls(code="STORAGE_FAILED", data=document)

    def to_dict(self):
        """Convert response to dictionary for JSON serialization."""
        result = {}
        if self.error_message:
            result["error"] = self.error_message
        result.update(self.data)
        return result

    def to_json_response(self):
        """Convert to Django JsonResponse using the mapped HTTP status."""
        from django.http import JsonResponse

        return JsonResponse(self.to_dict(), status=self.http_status)
