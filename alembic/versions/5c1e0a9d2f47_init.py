"""init

Revision ID: 5c1e0a9d2f47
Revises:
Create Date: 2025-06-14 10:42:08.514093

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "5c1e0a9d2f47"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "spotify_token",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("access_token", sa.Text, nullable=False),
        sa.Column("refresh_token", sa.Text, nullable=False),
        sa.Column("scope", sa.Text, nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    # The authoritative row is the most recently updated one.
    op.create_index("idx_spotify_token_updated_at", "spotify_token", ["updated_at"])


def downgrade() -> None:
    op.drop_index("idx_spotify_token_updated_at", table_name="spotify_token")
    op.drop_table("spotify_token")
