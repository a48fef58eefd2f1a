"""Report job table baseline

Revision ID: 20261019_01
Revises: None
Create Date: 2026-10-19
"""
# pylint: disable=no-member,invalid-name,wrong-import-order

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20261019_01"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "report_job",
        sa.Column("report_job_id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.Text(), nullable=False),
        sa.Column("status", sa.Text(), nullable=False),
        sa.Column("filters_json", sa.Text(), nullable=False),
        sa.Column("result_json", sa.Text(), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("created_at_utc", sa.Text(), nullable=False),
        sa.Column("started_at_utc", sa.Text(), nullable=True),
        sa.Column("completed_at_utc", sa.Text(), nullable=True),
    )
    op.create_index("ix_report_job_user_created", "report_job", ["user_id", "created_at_utc"])
    op.create_index("ix_report_job_status_completed", "report_job", ["status", "completed_at_utc"])


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_index("ix_report_job_status_completed", table_name="report_job")
    op.drop_index("ix_report_job_user_created", table_name="report_job")
    op.drop_table("report_job")
