"""imported contract decorators

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'imported_contract_decorators',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('project_id', sa.Uuid(), nullable=False),
        sa.Column('contract_id', sa.String(length=255), nullable=False),
        sa.Column('manifest_json', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('artifact_json', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('info_markdown', sa.Text(), nullable=False),
        sa.Column('contract_tags', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('contract_implements', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('imported_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('contract_id', 'project_id', name='uq_imported_contract_decorators_contract_project'),
    )
    op.create_index(
        'ix_imported_contract_decorators_project_id',
        'imported_contract_decorators',
        ['project_id'],
    )


def downgrade() -> None:
    op.drop_index('ix_imported_contract_decorators_project_id', table_name='imported_contract_decorators')
    op.drop_table('imported_contract_decorators')
