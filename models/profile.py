"""
Profile Models

Contains the ProfileItem model, the reduced per-ingredient projection
of a recipe (ingredient name + amount used per batch).
"""

from .base import db

# Separator between recipe and ingredient names in ProfileItem.key
KEY_SEPARATOR = '::'


def profile_key(recipe_name, ingredient_name):
    return f"{recipe_name}{KEY_SEPARATOR}{ingredient_name}"


class ProfileItem(db.Model):
    """One (recipe, ingredient) pairing."""
    __tablename__ = 'profile_item'
    __bind_key__ = 'profiles'
    __table_args__ = (
        db.UniqueConstraint('recipe_name', 'ingredient_name'),
    )

    id = db.Column(db.Integer, primary_key=True)
    # display key only; names may themselves contain the separator
    key = db.Column(db.String(512), nullable=False)
    recipe_name = db.Column(db.String(255), nullable=False, index=True)
    ingredient_name = db.Column(db.String(255), nullable=False)
    recipe_amount = db.Column(db.Float, nullable=False, default=0.0)

    def to_dict(self):
        return {
            'recipeName': self.recipe_name,
            'ingredientName': self.ingredient_name,
            'recipeAmount': self.recipe_amount,
        }
