"""
Models Package

Exports all database models and the db instance for use throughout the application.
"""

from .base import db

from .key_value import KeyValueEntry
from .profile import ProfileItem

__all__ = [
    'db',
    'KeyValueEntry',
    'ProfileItem',
]
