"""
Web interface module for the barcode scanner.

Provides a FastAPI application exposing the scan pipeline over HTTP.
"""

from .app import create_app, main

__all__ = ["create_app", "main"]
