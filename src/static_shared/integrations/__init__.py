"""
Framework integrations for static_shared.
"""
from .fastapi import add_static_shared

__all__ = ["add_static_shared"]
