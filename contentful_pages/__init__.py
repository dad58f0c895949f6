"""Contentful entries as template locals, single entry pages and JSON for a Jinja static build."""
from .client import ContentfulClient
from .errors import (
    ConfigError,
    ContentfulError,
    FetchError,
    MissingContentTypeError,
    MissingCredentialError,
    PathFunctionError,
    ReservedFieldNameError,
    TransformError,
)
from .plugin import ContentfulPlugin
from .site import Site

__version__ = "1.0.0"
