"""Initial videos table

Revision ID: 001_initial_videos
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001_initial_videos"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    video_status = postgresql.ENUM(
        "Undefined", "Processing", "Processed", "Failed",
        name="videostatus",
        create_type=False,
    )
    video_status.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "videos",
        sa.Column("id", sa.String(255), primary_key=True),
        sa.Column("owner_id", sa.String(255), nullable=False),
        sa.Column("filename", sa.String(512), nullable=False, server_default=""),
        sa.Column("status", video_status, nullable=False, server_default="Undefined"),
        sa.Column("title", sa.String(255), nullable=False, server_default=""),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=True,
            server_default=sa.text("now()"),
        ),
    )

    op.create_index("ix_videos_owner_id", "videos", ["owner_id"])
    op.create_index("ix_videos_status", "videos", ["status"])
    op.create_index("ix_videos_status_updated", "videos", ["status", "updated_at"])


def downgrade() -> None:
    op.drop_index("ix_videos_status_updated", table_name="videos")
    op.drop_index("ix_videos_status", table_name="videos")
    op.drop_index("ix_videos_owner_id", table_name="videos")
    op.drop_table("videos")
    sa.Enum(name="videostatus").drop(op.get_bind(), checkfirst=True)
