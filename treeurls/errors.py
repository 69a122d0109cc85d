from __future__ import annotations


class TreeURLsError(Exception):
    """Base for errors raised by the service layer."""


class ValidationError(TreeURLsError):
    pass


class NotFoundError(TreeURLsError):
    pass


class StorageError(TreeURLsError):
    pass


class ConfigError(TreeURLsError):
    pass
