"""create individuals, dietary_options and invitation_codes

Revision ID: 3f1c2a7d9b10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa
import sqlalchemy_utils
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1c2a7d9b10"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

RSVP_STATUSES = ("Accepted", "Declined", "Pending", "No Response")

DIETARY_RESTRICTIONS = (
    "Dairy-free",
    "Diabetic",
    "Egg-free",
    "Gluten-free",
    "Halal",
    "Keto",
    "Kosher",
    "Lactose intolerant",
    "No spicy food",
    "Nut-free",
    "Shellfish-free",
    "Soy-free",
    "Vegan",
    "Vegetarian",
)


def timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.current_timestamp(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.current_timestamp(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "individuals",
        sa.Column("uuid", sqlalchemy_utils.UUIDType(), primary_key=True),
        *timestamps(),
        sa.Column("invitation_code", sa.String(5), nullable=False),
        sa.Column("first_name", sa.String(255), nullable=False),
        sa.Column("last_name", sa.String(255), nullable=False),
        sa.Column("group_name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column(
            "rsvp_status",
            sa.Enum(*RSVP_STATUSES, name="rsvp_status_enum"),
            nullable=False,
        ),
        sa.Column("comments", sa.Text(), nullable=True),
    )
    op.create_index("ix_individuals_invitation_code", "individuals", ["invitation_code"])
    op.create_index("ix_individuals_first_name", "individuals", ["first_name"])
    op.create_index("ix_individuals_last_name", "individuals", ["last_name"])

    op.create_table(
        "dietary_options",
        sa.Column("uuid", sqlalchemy_utils.UUIDType(), primary_key=True),
        *timestamps(),
        sa.Column(
            "individual_id",
            sqlalchemy_utils.UUIDType(),
            sa.ForeignKey("individuals.uuid", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "requirement_type",
            sa.Enum(*DIETARY_RESTRICTIONS, name="dietary_restriction_enum"),
            nullable=False,
        ),
    )
    op.create_index("ix_dietary_options_individual_id", "dietary_options", ["individual_id"])

    op.create_table(
        "invitation_codes",
        sa.Column("uuid", sqlalchemy_utils.UUIDType(), primary_key=True),
        *timestamps(),
        sa.Column("code", sa.String(5), nullable=False),
        sa.Column("group_name", sa.String(255), nullable=False),
    )
    op.create_index("ix_invitation_codes_code", "invitation_codes", ["code"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_invitation_codes_code", table_name="invitation_codes")
    op.drop_table("invitation_codes")

    op.drop_index("ix_dietary_options_individual_id", table_name="dietary_options")
    op.drop_table("dietary_options")

    op.drop_index("ix_individuals_last_name", table_name="individuals")
    op.drop_index("ix_individuals_first_name", table_name="individuals")
    op.drop_index("ix_individuals_invitation_code", table_name="individuals")
    op.drop_table("individuals")

    sa.Enum(name="dietary_restriction_enum").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="rsvp_status_enum").drop(op.get_bind(), checkfirst=True)
