"""initial authz tables

Revision ID: 0001_initial_authz
Revises:
Create Date: 2026-10-19
"""
from __future__ import annotations
from alembic import op
import sqlalchemy as sa

revision = '0001_initial_authz'
down_revision = None
branch_labels = None
depends_on = None


def _updated_at():
    return sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'))


def upgrade():
    op.create_table('permissions',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('code', sa.String(length=64), nullable=False, unique=True),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('kind', sa.String(length=16), nullable=False, server_default='MENU'),
        sa.Column('parent_id', sa.String(length=36), sa.ForeignKey('permissions.id', ondelete='SET NULL'), nullable=True),
        _updated_at(),
    )
    op.create_index('ix_permissions_code', 'permissions', ['code'])

    op.create_table('roles',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('code', sa.String(length=64), nullable=False, unique=True),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='ACTIVE'),
        _updated_at(),
    )
    op.create_index('ix_roles_code', 'roles', ['code'])

    op.create_table('departments',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('name', sa.String(length=128), nullable=False, unique=True),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='ACTIVE'),
        _updated_at(),
    )

    op.create_table('canteens',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('address', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='OPEN'),
        sa.Column('contact_phone', sa.String(length=32)),
        sa.Column('is_delivery_active', sa.Boolean(), nullable=False, server_default=sa.text('0')),
        sa.Column('delivery_radius', sa.Float(), server_default='0'),
        sa.Column('min_delivery_amount', sa.Float(), server_default='0'),
        sa.Column('delivery_fee', sa.Float(), server_default='0'),
        sa.Column('free_delivery_threshold', sa.Float(), server_default='0'),
        sa.Column('default_packaging_fee', sa.Float(), server_default='0'),
        _updated_at(),
    )
    op.create_index('ix_canteens_name', 'canteens', ['name'])

    op.create_table('role_permissions',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('role_id', sa.String(length=36), sa.ForeignKey('roles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('permission_id', sa.String(length=36), sa.ForeignKey('permissions.id', ondelete='CASCADE'), nullable=False)
    )
    op.create_index('ix_role_permissions_role_id', 'role_permissions', ['role_id'])
    # unique constraint handled via batch for sqlite
    with op.batch_alter_table('role_permissions') as batch_op:
        batch_op.create_unique_constraint('uq_role_permission', ['role_id', 'permission_id'])

    op.create_table('department_canteens',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('department_id', sa.String(length=36), sa.ForeignKey('departments.id', ondelete='CASCADE'), nullable=False),
        sa.Column('canteen_id', sa.String(length=36), sa.ForeignKey('canteens.id', ondelete='CASCADE'), nullable=False)
    )
    op.create_index('ix_department_canteens_department_id', 'department_canteens', ['department_id'])
    with op.batch_alter_table('department_canteens') as batch_op:
        batch_op.create_unique_constraint('uq_department_canteen', ['department_id', 'canteen_id'])

    op.create_table('staffs',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('username', sa.String(length=64), nullable=False),
        sa.Column('display_name', sa.String(length=128), nullable=False),
        sa.Column('email', sa.String(length=128), unique=True),
        sa.Column('role_code', sa.String(length=64), nullable=False, server_default='VIEWER'),
        sa.Column('role_id', sa.String(length=36), sa.ForeignKey('roles.id', ondelete='SET NULL'), nullable=True),
        sa.Column('department_id', sa.String(length=36), sa.ForeignKey('departments.id', ondelete='SET NULL'), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='ACTIVE'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'))
    )
    op.create_index('ix_staffs_email', 'staffs', ['email'])

    op.create_table('products',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('canteen_id', sa.String(length=36), sa.ForeignKey('canteens.id', ondelete='CASCADE'), nullable=False),
        sa.Column('price_cents', sa.Integer(), nullable=False, server_default='0'),
        _updated_at(),
    )
    op.create_index('ix_products_canteen_id', 'products', ['canteen_id'])
    op.create_index('ix_products_name', 'products', ['name'])


def downgrade():
    for tbl in ['products', 'staffs', 'department_canteens', 'role_permissions', 'canteens', 'departments', 'roles', 'permissions']:
        op.drop_table(tbl)
