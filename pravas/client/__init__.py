"""
Client module - HTTP access to the Pravas API.
"""

from .api_client import APIError, PravasClient

__all__ = ["APIError", "PravasClient"]
