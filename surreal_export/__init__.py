"""
SurrealDB Export

A command-line client that retrieves a full database dump from a remote
server over HTTP(S) and streams it into a local file.
"""

__version__ = "1.0.0"
__author__ = "Abcum Ltd"

__all__ = ['__version__']
