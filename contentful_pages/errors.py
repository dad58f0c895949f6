# contentful_pages/errors.py
"""Exceptions raised while compiling a Contentful-backed project.

Every error aborts the build; nothing here is meant to be caught and skipped.
"""


class ContentfulError(Exception):
    """Base class for every build failure raised by this package."""


class ConfigError(ContentfulError):
    pass


class MissingCredentialError(ConfigError):
    pass


class MissingContentTypeError(ConfigError):
    pass


class ReservedFieldNameError(ContentfulError):
    pass


class TransformError(ContentfulError):
    pass


class PathFunctionError(ContentfulError):
    pass


class FetchError(ContentfulError):
    """Network or API failure while talking to Contentful. Never retried."""
