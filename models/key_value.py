"""
Key/Value Entry Model

Contains the KeyValueEntry model, the fast key/value store behind
recipe rows, the ingredient cache and application settings.
"""

from .base import db


class KeyValueEntry(db.Model):
    """Key-value storage; values are JSON text."""
    __tablename__ = 'key_value_entry'

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(255), unique=True, nullable=False, index=True)
    value = db.Column(db.Text, nullable=False, default='')
