"""initial schema: identities, admin users, activity log

Revision ID: 001
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    bind = op.get_bind()
    is_sqlite = bind.dialect.name == 'sqlite'

    json_type = sa.JSON() if is_sqlite else postgresql.JSONB(astext_type=sa.Text())
    timestamp_default = sa.text("(datetime('now'))") if is_sqlite else sa.text('now()')

    # ------------------------------------------------------------------
    # identity_users (built-in identity provider)
    # ------------------------------------------------------------------
    op.create_table(
        'identity_users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('email_confirmed_at', sa.DateTime(), nullable=True),
        sa.Column('last_sign_in_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=timestamp_default),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_identity_users_email', 'identity_users', ['email'], unique=True)

    # ------------------------------------------------------------------
    # admin_users
    # ------------------------------------------------------------------
    op.create_table(
        'admin_users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=timestamp_default),
        sa.Column('created_by', sa.String(length=36), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint(
            "role IN ('super_admin', 'content_manager', 'staff')",
            name='ck_admin_users_role',
        ),
    )
    # One admin profile per provider identity
    op.create_index('ix_admin_users_user_id', 'admin_users', ['user_id'], unique=True)
    op.create_index('ix_admin_users_email', 'admin_users', ['email'])
    op.create_index('ix_admin_users_is_active', 'admin_users', ['is_active'])

    # ------------------------------------------------------------------
    # admin_activity_log
    # ------------------------------------------------------------------
    op.create_table(
        'admin_activity_log',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('admin_user_id', sa.String(length=36), nullable=False),
        sa.Column('action', sa.String(length=100), nullable=False),
        sa.Column('table_name', sa.String(length=100), nullable=True),
        sa.Column('record_id', sa.String(length=36), nullable=True),
        sa.Column('new_values', json_type, nullable=True),
        sa.Column('ip_address', sa.String(length=45), nullable=True),
        sa.Column('user_agent', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=timestamp_default),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_admin_activity_log_admin_user_id', 'admin_activity_log', ['admin_user_id'])
    op.create_index('ix_admin_activity_log_action', 'admin_activity_log', ['action'])
    op.create_index('ix_admin_activity_log_created_at', 'admin_activity_log', ['created_at'])


def downgrade() -> None:
    op.drop_index('ix_admin_activity_log_created_at', table_name='admin_activity_log')
    op.drop_index('ix_admin_activity_log_action', table_name='admin_activity_log')
    op.drop_index('ix_admin_activity_log_admin_user_id', table_name='admin_activity_log')
    op.drop_table('admin_activity_log')

    op.drop_index('ix_admin_users_is_active', table_name='admin_users')
    op.drop_index('ix_admin_users_email', table_name='admin_users')
    op.drop_index('ix_admin_users_user_id', table_name='admin_users')
    op.drop_table('admin_users')

    op.drop_index('ix_identity_users_email', table_name='identity_users')
    op.drop_table('identity_users')
