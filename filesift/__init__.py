"""
FileSift - Filename and notes search over an Everything index.

Example:
    >>> from filesift.config import get_settings
    >>> from filesift.domains.search import SearchOptions
    >>> from filesift.interfaces import wiring
    >>> settings = get_settings()
    >>> orchestrator = wiring.build_orchestrator(settings, wiring.build_index_client(settings))
    >>> result = await orchestrator.perform_search("report", SearchOptions())
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
