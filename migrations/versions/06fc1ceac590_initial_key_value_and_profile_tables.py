"""Initial migration with key/value and profile tables

Revision ID: 06fc1ceac590
Revises:
Create Date: 2026-10-19 09:12:44.118203

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '06fc1ceac590'
down_revision = None
branch_labels = None
depends_on = None


def upgrade(engine_name=''):
    globals()[f'upgrade_{engine_name}']()


def downgrade(engine_name=''):
    globals()[f'downgrade_{engine_name}']()


def upgrade_():
    op.create_table(
        'key_value_entry',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('key', sa.String(length=255), nullable=False),
        sa.Column('value', sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_key_value_entry')),
    )
    with op.batch_alter_table('key_value_entry', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_key_value_entry_key'), ['key'], unique=True)


def downgrade_():
    with op.batch_alter_table('key_value_entry', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_key_value_entry_key'))
    op.drop_table('key_value_entry')


def upgrade_profiles():
    op.create_table(
        'profile_item',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('key', sa.String(length=512), nullable=False),
        sa.Column('recipe_name', sa.String(length=255), nullable=False),
        sa.Column('ingredient_name', sa.String(length=255), nullable=False),
        sa.Column('recipe_amount', sa.Float(), nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_profile_item')),
        sa.UniqueConstraint('recipe_name', 'ingredient_name', name=op.f('uq_profile_item_recipe_name')),
    )
    with op.batch_alter_table('profile_item', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_profile_item_recipe_name'), ['recipe_name'], unique=False)


def downgrade_profiles():
    with op.batch_alter_table('profile_item', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_profile_item_recipe_name'))
    op.drop_table('profile_item')
