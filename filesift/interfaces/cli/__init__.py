"""
CLI Interface - Command-line tools for FileSift.

Provides commands for:
- Filename and notes search
- Paging through large result sets
- File notes
- Search history and the API server
"""

from .main import app, main

__all__ = ["app", "main"]
