"""
HTTP surface for DocVault.
"""

from .app import create_app

__all__ = ["create_app"]
