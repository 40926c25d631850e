"""create_household_tables

Revision ID: 3c1e9a7d5b20
Revises:
Create Date: 2026-10-12 14:21:07.518304

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
import sqlmodel


# revision identifiers, used by Alembic.
revision: str = '3c1e9a7d5b20'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'houses',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('house_code', sqlmodel.sql.sqltypes.AutoString(length=15), nullable=False),
        sa.Column('head_of_household_id', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('house_name', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column('address', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_houses_house_code'), 'houses', ['house_code'], unique=True)
    op.create_index(op.f('ix_houses_head_of_household_id'), 'houses', ['head_of_household_id'], unique=False)

    op.create_table(
        'house_members',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('house_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('is_head', sa.Boolean(), nullable=False),
        sa.Column('joined_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['house_id'], ['houses.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_house_members_house_id'), 'house_members', ['house_id'], unique=False)
    # One household per account
    op.create_index(op.f('ix_house_members_user_id'), 'house_members', ['user_id'], unique=True)

    verificationstatus_enum = sa.Enum(
        'pending', 'verified', 'skipped', 'failed', name='verificationstatus'
    )
    op.create_table(
        'user_profiles',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('full_name', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('gender', sqlmodel.sql.sqltypes.AutoString(length=30), nullable=True),
        sa.Column('is_head_of_household', sa.Boolean(), nullable=False),
        sa.Column('house_id', sa.Uuid(), nullable=True),
        sa.Column('verification_status', verificationstatus_enum, nullable=False, server_default='pending'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.ForeignKeyConstraint(['house_id'], ['houses.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_user_profiles_user_id'), 'user_profiles', ['user_id'], unique=True)
    op.create_index(op.f('ix_user_profiles_email'), 'user_profiles', ['email'], unique=False)
    op.create_index(op.f('ix_user_profiles_house_id'), 'user_profiles', ['house_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_user_profiles_house_id'), table_name='user_profiles')
    op.drop_index(op.f('ix_user_profiles_email'), table_name='user_profiles')
    op.drop_index(op.f('ix_user_profiles_user_id'), table_name='user_profiles')
    op.drop_table('user_profiles')

    op.drop_index(op.f('ix_house_members_user_id'), table_name='house_members')
    op.drop_index(op.f('ix_house_members_house_id'), table_name='house_members')
    op.drop_table('house_members')

    op.drop_index(op.f('ix_houses_head_of_household_id'), table_name='houses')
    op.drop_index(op.f('ix_houses_house_code'), table_name='houses')
    op.drop_table('houses')

    # Drop the enum type (PostgreSQL)
    sa.Enum(name='verificationstatus').drop(op.get_bind(), checkfirst=True)
