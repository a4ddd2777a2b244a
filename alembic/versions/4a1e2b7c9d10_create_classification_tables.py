"""create_classification_tables

Revision ID: 4a1e2b7c9d10
Revises:
Create Date: 2026-10-18 09:12:41.204117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4a1e2b7c9d10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _base_columns() -> list[sa.Column]:
    return [
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'accounts',
        *_base_columns(),
        sa.Column('code', sa.String(length=8), nullable=False),
        sa.Column('display_name', sa.String(length=255), nullable=False),
        sa.Column('category', sa.String(length=40), nullable=False),
        sa.Column('is_standard', sa.Boolean(), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=True),
        sa.Column('chart_version', sa.String(length=20), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_accounts_code', 'accounts', ['code'], unique=True)
    op.create_index('ix_accounts_category', 'accounts', ['category'])

    op.create_table(
        'classification_rules',
        *_base_columns(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('match_strategy', sa.String(length=20), nullable=False),
        sa.Column('pattern', sa.String(length=500), nullable=False),
        sa.Column('target_account_code', sa.String(length=8), nullable=False),
        sa.Column('priority', sa.Integer(), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False),
        sa.Column('origin', sa.String(length=20), nullable=False),
        sa.Column('expected_category', sa.String(length=40), nullable=True),
        sa.Column('sequence', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_classification_rules_name', 'classification_rules', ['name'], unique=True)
    op.create_index(
        'ix_classification_rules_target_account_code', 'classification_rules', ['target_account_code']
    )
    op.create_index('ix_classification_rules_sequence', 'classification_rules', ['sequence'])

    op.create_table(
        'bank_transactions',
        *_base_columns(),
        sa.Column('external_id', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('account_code', sa.String(length=8), nullable=True),
        sa.Column('matched_rule_name', sa.String(length=255), nullable=True),
        sa.Column('is_fallback', sa.Boolean(), nullable=False),
        sa.Column('detail', sa.Text(), nullable=True),
        sa.Column('classified_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('bulk_batch_id', sa.String(length=32), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_bank_transactions_external_id', 'bank_transactions', ['external_id'], unique=True)
    op.create_index('ix_bank_transactions_account_code', 'bank_transactions', ['account_code'])
    op.create_index('ix_bank_transactions_bulk_batch_id', 'bank_transactions', ['bulk_batch_id'])

    op.create_table(
        'bulk_reclassification_batches',
        *_base_columns(),
        sa.Column('batch_id', sa.String(length=32), nullable=False),
        sa.Column('account_code', sa.String(length=8), nullable=False),
        sa.Column('corrected_description', sa.Text(), nullable=False),
        sa.Column('key_pattern', sa.JSON(), nullable=False),
        sa.Column('candidate_ids', sa.JSON(), nullable=False),
        sa.Column('state', sa.String(length=20), nullable=False),
        sa.Column('applied_count', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_bulk_reclassification_batches_batch_id',
        'bulk_reclassification_batches',
        ['batch_id'],
        unique=True,
    )


def downgrade() -> None:
    op.drop_index('ix_bulk_reclassification_batches_batch_id', table_name='bulk_reclassification_batches')
    op.drop_table('bulk_reclassification_batches')
    op.drop_index('ix_bank_transactions_bulk_batch_id', table_name='bank_transactions')
    op.drop_index('ix_bank_transactions_account_code', table_name='bank_transactions')
    op.drop_index('ix_bank_transactions_external_id', table_name='bank_transactions')
    op.drop_table('bank_transactions')
    op.drop_index('ix_classification_rules_sequence', table_name='classification_rules')
    op.drop_index('ix_classification_rules_target_account_code', table_name='classification_rules')
    op.drop_index('ix_classification_rules_name', table_name='classification_rules')
    op.drop_table('classification_rules')
    op.drop_index('ix_accounts_category', table_name='accounts')
    op.drop_index('ix_accounts_code', table_name='accounts')
    op.drop_table('accounts')
