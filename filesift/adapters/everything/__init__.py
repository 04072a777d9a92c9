"""Everything filename index adapter."""

from .client import EverythingClient
from .query import build_search_string, expand_wildcards

__all__ = ["EverythingClient", "build_search_string", "expand_wildcards"]
