"""add_game_demographic_columns

Revision ID: b7c8d9e0f1a2
Revises: a1b2c3d4e5f6
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'b7c8d9e0f1a2'
down_revision: Union[str, Sequence[str], None] = 'a1b2c3d4e5f6'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """게임 앱별 통계와 플레이어 분포용 컬럼 추가"""
    op.add_column('game_sessions', sa.Column('difficulty', sa.String(length=20), nullable=True))
    op.create_index(op.f('ix_game_sessions_application'), 'game_sessions', ['application'], unique=False)
    op.add_column('profiles', sa.Column('grade', sa.String(length=50), nullable=True))
    op.add_column('profiles', sa.Column('gender', sa.String(length=20), nullable=True))
    op.add_column('countries', sa.Column('iso3', sa.String(length=3), nullable=True))
    op.add_column('countries', sa.Column('numeric_code', sa.String(length=3), nullable=True))


def downgrade() -> None:
    """추가한 컬럼 제거"""
    op.drop_column('countries', 'numeric_code')
    op.drop_column('countries', 'iso3')
    op.drop_column('profiles', 'gender')
    op.drop_column('profiles', 'grade')
    op.drop_index(op.f('ix_game_sessions_application'), table_name='game_sessions')
    op.drop_column('game_sessions', 'difficulty')
