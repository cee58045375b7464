"""
Django-Restful Settings

Configuration is read from Django settings under the DJANGO_RESTFUL key.
All settings have sensible defaults.

Example:
    # settings.py
    DJANGO_RESTFUL = {
        'PAGE_SIZE': 25,
        'DEFAULT_ORDER': '-created_at',
        'DEBUG': False,
    }
"""

from django.conf import settings

DEFAULTS = {
    # Control parameter vocabulary
    "RESERVED_PREFIX": "_",
    "FILTER_PARAM": "_filter",
    "ORDER_PARAM": "_order",
    "PAGE_PARAM": "_page",
    "INCLUDE_PARAM": "_include",
    # Pagination
    "PAGE_SIZE": 15,
    # Ordering applied when the request has no _order (empty = storage default)
    "DEFAULT_ORDER": "",
    # Storage failures
    "DEBUG": None,  # None falls back to settings.DEBUG
    "FAILURE_MESSAGE": "Could not perform action",
    # CSRF protection (secure by default)
    "CSRF_EXEMPT": False,
}


class RestfulSettings:
    """
    A settings object that allows django-restful settings to be accessed as
    properties. For example:

        from django_restful.conf import restful_settings
        print(restful_settings.PAGE_SIZE)

    Settings can be overridden in Django settings.py under DJANGO_RESTFUL key.
    """

    def __init__(self, defaults=None):
        self.defaults = defaults or DEFAULTS
        self._cached_attrs = set()

    @property
    def user_settings(self):
        if not hasattr(self, "_user_settings"):
            self._user_settings = getattr(settings, "DJANGO_RESTFUL", {})
        return self._user_settings

    def __getattr__(self, attr):
        if attr not in self.defaults:
            raise AttributeError(f"Invalid django-restful setting: '{attr}'")

        try:
            val = self.user_settings[attr]
        except KeyError:
            val = self.defaults[attr]

        # Cache the result
        self._cached_attrs.add(attr)
        setattr(self, attr, val)
        return val

    def debug_enabled(self):
        """Resolve the DEBUG setting to a bool, deferring to settings.DEBUG when unset."""
        if self.DEBUG is None:
            return bool(getattr(settings, "DEBUG", False))
        return bool(self.DEBUG)

    def reload(self):
        """Reload settings (useful for testing)."""
        for attr in self._cached_attrs:
            try:
                delattr(self, attr)
            except AttributeError:
                pass
        self._cached_attrs.clear()
        if hasattr(self, "_user_settings"):
            delattr(self, "_user_settings")


restful_settings = RestfulSettings(DEFAULTS)
