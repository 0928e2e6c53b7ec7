from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001_marketplace_tables"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "listings",
        sa.Column("id", sa.String(), primary_key=True),

        sa.Column("city", sa.Text(), nullable=False),
        sa.Column("commune", sa.Text(), nullable=False),
        sa.Column("neighborhood", sa.Text(), nullable=False),

        sa.Column("rooms", sa.Integer(), nullable=False),
        sa.Column("property_type", sa.Text(), nullable=False),
        sa.Column("transaction_type", sa.Text(), nullable=False),
        sa.Column("price", sa.Integer(), nullable=False),
        sa.Column("deposit", sa.Integer(), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("phone", sa.Text(), nullable=False),

        sa.Column("images", postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'[]'::jsonb")),

        sa.Column("status", sa.String(length=30), nullable=False, server_default="pending"),
        sa.Column("payment_status", sa.String(length=30), nullable=False, server_default="pending"),
        sa.Column("featured", sa.Boolean(), nullable=False, server_default=sa.false()),

        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_listings_created_at", "listings", ["created_at"])
    op.create_index("ix_listings_status_payment_status", "listings", ["status", "payment_status"])

    op.create_table(
        "payments",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("listing_id", sa.String(), sa.ForeignKey("listings.id"), nullable=True),
        sa.Column("type", sa.String(length=30), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=30), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_payments_listing_id", "payments", ["listing_id"])
    op.create_index("ix_payments_created_at", "payments", ["created_at"])

    op.create_table(
        "phone_unlocks",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("listing_id", sa.String(), sa.ForeignKey("listings.id"), nullable=False),
        sa.Column("payment_status", sa.String(length=30), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_phone_unlocks_listing_id", "phone_unlocks", ["listing_id"])
    op.create_index("ix_phone_unlocks_created_at", "phone_unlocks", ["created_at"])


def downgrade():
    op.drop_index("ix_phone_unlocks_created_at", table_name="phone_unlocks")
    op.drop_index("ix_phone_unlocks_listing_id", table_name="phone_unlocks")
    op.drop_table("phone_unlocks")

    op.drop_index("ix_payments_created_at", table_name="payments")
    op.drop_index("ix_payments_listing_id", table_name="payments")
    op.drop_table("payments")

    op.drop_index("ix_listings_status_payment_status", table_name="listings")
    op.drop_index("ix_listings_created_at", table_name="listings")
    op.drop_table("listings")
