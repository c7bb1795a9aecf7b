"""add strava_tokens table

Revision ID: 8d3f6b7e2c10
Revises: 5e1c2a9d0b41
Create Date: 2026-01-11 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8d3f6b7e2c10'
down_revision: Union[str, Sequence[str], None] = '5e1c2a9d0b41'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    tables = inspector.get_table_names()
    if 'strava_tokens' not in tables:
        op.create_table(
            'strava_tokens',
            sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
            sa.Column('user_id', sa.String(), nullable=False),
            sa.Column('access_token', sa.String(), nullable=False),
            sa.Column('refresh_token', sa.String(), nullable=False),
            sa.Column('expires_at', sa.Integer(), nullable=False),
            sa.Column('athlete_id', sa.String(), nullable=True),
            sa.Column('last_synced_at', sa.DateTime(timezone=True), nullable=True),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        )
        op.create_index('ix_strava_tokens_id', 'strava_tokens', ['id'])
        op.create_index('ix_strava_tokens_user_id', 'strava_tokens', ['user_id'], unique=True)


def downgrade() -> None:
    # Safe drop if exists
    op.execute('DROP TABLE IF EXISTS strava_tokens')
