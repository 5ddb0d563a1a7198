"""
Alembic migration to create the access_codes and device_sessions tables
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '20241101'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'access_codes',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('code', sa.String(64), nullable=False, unique=True),
        sa.Column('encrypted_code', sa.String(256), nullable=False, unique=True),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index('idx_access_codes_encrypted_code', 'access_codes', ['encrypted_code'])

    op.create_table(
        'device_sessions',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('code', sa.String(64), nullable=False, unique=True),
        sa.Column('device_id', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=False),
    )
    op.create_index('idx_device_sessions_code', 'device_sessions', ['code'])
    # Expiry sweeps filter on created_at
    op.create_index('idx_device_sessions_created_at', 'device_sessions', ['created_at'])


def downgrade():
    op.drop_index('idx_device_sessions_created_at', table_name='device_sessions')
    op.drop_index('idx_device_sessions_code', table_name='device_sessions')
    op.drop_table('device_sessions')
    op.drop_index('idx_access_codes_encrypted_code', table_name='access_codes')
    op.drop_table('access_codes')
