"""initial sparc schema

Revision ID: 3c1f0a9d2b7e
Revises:
Create Date: 2026-10-19 09:12:44.318207

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3c1f0a9d2b7e'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    institutions = op.create_table(
        "institutions",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False, unique=True),
    )
    op.create_index("ix_institutions_id", "institutions", ["id"], unique=False)
    op.bulk_insert(institutions, [{"name": "Other"}])

    op.create_table(
        "profiles",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("title", sa.String(), nullable=True),
        sa.Column("experience_level", sa.String(), nullable=True),
        sa.Column("institution", sa.String(), nullable=True),
        sa.Column("institution_id", sa.Integer(), sa.ForeignKey("institutions.id"), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("role", sa.String(), nullable=False, server_default="user"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_profiles_id", "profiles", ["id"], unique=False)
    op.create_index("ix_profiles_email", "profiles", ["email"], unique=False)

    op.create_table(
        "time_entries",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("task", sa.String(), nullable=False),
        sa.Column("other_task", sa.String(), nullable=True),
        sa.Column("minutes", sa.Integer(), nullable=False),
        sa.Column("patient_count", sa.Integer(), nullable=True),
        sa.Column("is_typical_day", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("occurred_on", sa.String(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.CheckConstraint("minutes >= 1 AND minutes <= 480", name="ck_time_entries_minutes_range"),
        sa.CheckConstraint(
            "patient_count IS NULL OR patient_count >= 0",
            name="ck_time_entries_patient_count_nonnegative",
        ),
    )
    op.create_index("ix_time_entries_id", "time_entries", ["id"], unique=False)
    op.create_index("ix_time_entries_user_id", "time_entries", ["user_id"], unique=False)
    op.create_index("ix_time_entries_task", "time_entries", ["task"], unique=False)
    op.create_index("ix_time_entries_deleted_at", "time_entries", ["deleted_at"], unique=False)
    op.create_index(
        "ix_time_entries_user_id_occurred_on",
        "time_entries",
        ["user_id", "occurred_on"],
        unique=False,
    )

    op.create_table(
        "burnout_survey_responses",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("question_number", sa.Integer(), nullable=False),
        sa.Column("response_value", sa.Integer(), nullable=False),
        sa.Column("completed_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("user_id", "question_number", name="uq_burnout_user_question"),
        sa.CheckConstraint("question_number >= 1 AND question_number <= 12", name="ck_burnout_question_number"),
        sa.CheckConstraint("response_value >= 1 AND response_value <= 4", name="ck_burnout_response_value"),
    )
    op.create_index("ix_burnout_survey_responses_id", "burnout_survey_responses", ["id"], unique=False)
    op.create_index("ix_burnout_survey_responses_user_id", "burnout_survey_responses", ["user_id"], unique=False)

    op.create_table(
        "additional_survey_responses",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("licensed_beds", sa.Integer(), nullable=True),
        sa.Column("occupied_beds_count", sa.Integer(), nullable=True),
        sa.Column("occupied_beds_percent", sa.Float(), nullable=True),
        sa.Column("icu_beds", sa.Integer(), nullable=True),
        sa.Column("asp_fte", sa.Float(), nullable=True),
        sa.Column("pharmacist_fte", sa.Float(), nullable=True),
        sa.Column("physician_fte", sa.Float(), nullable=True),
        sa.Column("other1_specify", sa.String(), nullable=True),
        sa.Column("other1_fte", sa.Float(), nullable=True),
        sa.Column("other2_specify", sa.String(), nullable=True),
        sa.Column("other2_fte", sa.Float(), nullable=True),
        sa.Column("other3_specify", sa.String(), nullable=True),
        sa.Column("other3_fte", sa.Float(), nullable=True),
        sa.Column("saar_value", sa.Float(), nullable=True),
        sa.Column("saar_category", sa.String(), nullable=True),
        sa.Column("effectiveness_options", sa.JSON(), nullable=False),
        sa.Column("effectiveness_other", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_additional_survey_responses_id", "additional_survey_responses", ["id"], unique=False)
    op.create_index(
        "ix_additional_survey_responses_user_id",
        "additional_survey_responses",
        ["user_id"],
        unique=True,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_additional_survey_responses_user_id", table_name="additional_survey_responses")
    op.drop_index("ix_additional_survey_responses_id", table_name="additional_survey_responses")
    op.drop_table("additional_survey_responses")

    op.drop_index("ix_burnout_survey_responses_user_id", table_name="burnout_survey_responses")
    op.drop_index("ix_burnout_survey_responses_id", table_name="burnout_survey_responses")
    op.drop_table("burnout_survey_responses")

    op.drop_index("ix_time_entries_user_id_occurred_on", table_name="time_entries")
    op.drop_index("ix_time_entries_deleted_at", table_name="time_entries")
    op.drop_index("ix_time_entries_task", table_name="time_entries")
    op.drop_index("ix_time_entries_user_id", table_name="time_entries")
    op.drop_index("ix_time_entries_id", table_name="time_entries")
    op.drop_table("time_entries")

    op.drop_index("ix_profiles_email", table_name="profiles")
    op.drop_index("ix_profiles_id", table_name="profiles")
    op.drop_table("profiles")

    op.drop_index("ix_institutions_id", table_name="institutions")
    op.drop_table("institutions")
