"""
Database Base Module

Creates the SQLAlchemy instance shared by the key/value and profile
models. Kept apart from app.py to avoid circular imports.
"""

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData

# Stable constraint names so migrations can alter tables on SQLite
NAMING_CONVENTION = {
    'ix': 'ix_%(column_0_label)s',
    'uq': 'uq_%(table_name)s_%(column_0_name)s',
    'pk': 'pk_%(table_name)s',
}

# Initialized with the Flask app in create_app()
db = SQLAlchemy(metadata=MetaData(naming_convention=NAMING_CONVENTION))
