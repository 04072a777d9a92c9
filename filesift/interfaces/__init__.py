"""
Interfaces - User-facing applications.

- api: FastAPI REST API
- cli: Command-line interface
- wiring: Service composition shared by both
"""

__all__ = ["api", "cli", "wiring"]
