"""create hazard, repair tracker and worker tables

Revision ID: 4f2c1a9d7e30
Revises:
Create Date: 2026-10-19 09:12:41.318204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4f2c1a9d7e30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "workers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
    )
    op.create_index("ix_workers_name", "workers", ["name"])

    op.create_table(
        "road_hazards",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("reported_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("hazard_type", sa.String(), nullable=False),
        sa.Column("state", sa.String(), nullable=True),
        sa.Column("image_url", sa.String(), nullable=True),
        sa.Column("risk_level", sa.String(), nullable=True),
        sa.Column("risk_reason", sa.Text(), nullable=True),
        sa.Column("repair_material", sa.String(), nullable=True),
        sa.Column("repair_material_reason", sa.Text(), nullable=True),
        sa.Column("volume_material_required", sa.String(), nullable=True),
        sa.Column("volume_calculation", sa.Text(), nullable=True),
        sa.Column("manpower_required", sa.Integer(), nullable=True),
        sa.Column("job_distribution", sa.Text(), nullable=True),
        sa.Column("repair_guide", sa.Text(), nullable=True),
    )
    op.create_index("ix_road_hazards_reported_at", "road_hazards", ["reported_at"])
    op.create_index("ix_road_hazards_risk_level", "road_hazards", ["risk_level"])

    # one tracker row per hazard, keyed by the hazard id
    op.create_table(
        "repair_trackers",
        sa.Column("id", sa.Integer(), sa.ForeignKey("road_hazards.id"), primary_key=True),
        sa.Column("reported_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("team_assigned_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("on_the_way_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("in_progress_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("worker_id", sa.Integer(), sa.ForeignKey("workers.id"), nullable=True),
        sa.Column("photo_url", sa.String(), nullable=True),
    )


def downgrade() -> None:
    op.drop_table("repair_trackers")
    op.drop_index("ix_road_hazards_risk_level", table_name="road_hazards")
    op.drop_index("ix_road_hazards_reported_at", table_name="road_hazards")
    op.drop_table("road_hazards")
    op.drop_index("ix_workers_name", table_name="workers")
    op.drop_table("workers")
