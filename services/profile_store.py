"""
Profile Store Service

Structured persistence of the reduced recipe projection
{recipeName, ingredientName, recipeAmount}, one record per
(recipe, ingredient) pairing.

Write rules:
- put_items replaces every record of a recipe in one transaction;
  readers see either the old set or the new one.
- All planning happens before the transaction starts. The only
  statements issued between the first write and the commit are the
  delete and the inserts themselves.
- A failed write rolls back and raises ProfileStoreError. Nothing is
  retried.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from models import db, ProfileItem
from models.profile import profile_key
from .numeric import to_number

logger = logging.getLogger(__name__)


class ProfileStoreError(Exception):
    """Raised when a profile write unit fails and was rolled back."""
    pass


def plan_records(recipe_name, rows):
    """
    Build the records put_items will insert, without touching the database.

    Rows with a blank name are skipped; a repeated ingredient name keeps
    the last row's amount.
    """
    planned = {}
    for row in rows:
        ingredient = str(row.get('name') or '').strip()
        if not ingredient:
            continue
        planned[ingredient] = {
            'key': profile_key(recipe_name, ingredient),
            'recipe_name': recipe_name,
            'ingredient_name': ingredient,
            'recipe_amount': to_number(row.get('recipeAmount')),
        }
    return list(planned.values())


class ProfileStore:
    """Profile records in the 'profiles' SQLAlchemy bind."""

    available = True

    @property
    def session(self):
        return db.session

    def list_recipe_names(self):
        try:
            names = self.session.execute(
                db.select(ProfileItem.recipe_name).distinct()
            ).scalars().all()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.warning("Could not list profile recipes: %s", e)
            return set()
        return set(names)

    def get_items(self, recipe_name):
        try:
            items = self.session.execute(
                db.select(ProfileItem)
                .filter_by(recipe_name=recipe_name)
                .order_by(ProfileItem.id)
            ).scalars().all()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.warning("Could not read profile for %r: %s", recipe_name, e)
            return []
        return [item.to_dict() for item in items]

    def put_items(self, recipe_name, rows):
        """Replace all records of recipe_name with one per named row."""
        records = plan_records(recipe_name, rows)
        try:
            self.session.execute(
                db.delete(ProfileItem).where(ProfileItem.recipe_name == recipe_name)
            )
            self.session.add_all([ProfileItem(**record) for record in records])
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("Profile replace for %r rolled back: %s", recipe_name, e)
            raise ProfileStoreError(f'Could not save profile for "{recipe_name}"') from e
        logger.debug("Stored %d profile records for %r", len(records), recipe_name)
        return len(records)

    def delete_recipe(self, recipe_name):
        try:
            self.session.execute(
                db.delete(ProfileItem).where(ProfileItem.recipe_name == recipe_name)
            )
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("Profile delete for %r rolled back: %s", recipe_name, e)
            raise ProfileStoreError(f'Could not delete profile for "{recipe_name}"') from e


class NullProfileStore:
    """Stand-in used when the profile engine is disabled or cannot open."""

    available = False

    def list_recipe_names(self):
        return set()

    def get_items(self, recipe_name):
        return []

    def put_items(self, recipe_name, rows):
        return 0

    def delete_recipe(self, recipe_name):
        pass


def open_profile_store(enabled=True):
    """
    Create the profile tables and return a working store.

    Falls back to NullProfileStore when disabled or when the engine
    cannot be reached. Must run inside an app context.
    """
    if not enabled:
        logger.info("Profile store disabled by configuration")
        return NullProfileStore()
    try:
        db.create_all(bind_key='profiles')
        db.session.execute(db.select(ProfileItem.id).limit(1)).all()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.warning("Profile store unavailable, continuing without it: %s", e)
        return NullProfileStore()
    return ProfileStore()
