"""Initial dealership schema: people, intermediaries, vehicles, expenses, store expenses

Revision ID: 20261017_initial
Revises:
Create Date: 2026-10-17
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261017_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "people",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(32), nullable=False),
        sa.Column("document", sa.String(32), nullable=True),
        sa.Column("type", sa.String(16), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )
    with op.batch_alter_table("people", schema=None) as batch_op:
        batch_op.create_index("ix_people_type", ["type"], unique=False)
        batch_op.create_index("ix_people_document", ["document"], unique=False)

    op.create_table(
        "intermediaries",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("document", sa.String(32), nullable=False),
        sa.Column("birth_date", sa.Date(), nullable=True),
        sa.Column("photo_ref", sa.String(512), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )

    op.create_table(
        "vehicles",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("plate", sa.String(16), nullable=False),
        sa.Column("brand", sa.String(64), nullable=False),
        sa.Column("model", sa.String(128), nullable=False),
        sa.Column("color", sa.String(64), nullable=False),
        sa.Column("year_fab", sa.Integer(), nullable=True),
        sa.Column("year_model", sa.Integer(), nullable=True),
        sa.Column("condition", sa.String(64), nullable=True),
        sa.Column("mileage", sa.Integer(), nullable=True),
        sa.Column("acquisition_price_cents", sa.Integer(), nullable=True),
        sa.Column("price_cents", sa.Integer(), nullable=True),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("owner_id", sa.Integer(), nullable=True),
        sa.Column("buyer_id", sa.Integer(), nullable=True),
        sa.Column("sale_price_cents", sa.Integer(), nullable=True),
        sa.Column("sale_date", sa.DateTime(), nullable=True),
        sa.Column("sale_mileage", sa.Integer(), nullable=True),
        sa.Column("price_reference_code", sa.String(32), nullable=True),
        sa.Column("price_reference_price", sa.String(64), nullable=True),
        sa.Column("trade_in_vehicle_id", sa.Integer(), nullable=True),
        sa.Column("trade_in_value_cents", sa.Integer(), nullable=True),
        sa.Column("intermediary_id", sa.Integer(), nullable=True),
        sa.Column("intermediary_commission_cents", sa.Integer(), nullable=True),
        sa.Column("entry_date", sa.DateTime(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["owner_id"], ["people.id"]),
        sa.ForeignKeyConstraint(["buyer_id"], ["people.id"]),
        sa.ForeignKeyConstraint(["intermediary_id"], ["intermediaries.id"]),
        sa.ForeignKeyConstraint(["trade_in_vehicle_id"], ["vehicles.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("plate", name="uq_vehicles_plate"),
        sqlite_autoincrement=True,
    )
    with op.batch_alter_table("vehicles", schema=None) as batch_op:
        batch_op.create_index("ix_vehicles_status_sale_date", ["status", "sale_date"], unique=False)
        batch_op.create_index("ix_vehicles_entry_date", ["entry_date"], unique=False)
        batch_op.create_index("ix_vehicles_owner_id", ["owner_id"], unique=False)
        batch_op.create_index("ix_vehicles_buyer_id", ["buyer_id"], unique=False)
        batch_op.create_index("ix_vehicles_intermediary_id", ["intermediary_id"], unique=False)

    op.create_table(
        "expenses",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("vehicle_id", sa.Integer(), nullable=False),
        sa.Column("description", sa.String(255), nullable=False),
        sa.Column("amount_cents", sa.Integer(), nullable=False),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["vehicle_id"], ["vehicles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )
    with op.batch_alter_table("expenses", schema=None) as batch_op:
        batch_op.create_index("ix_expenses_vehicle_id", ["vehicle_id"], unique=False)
        batch_op.create_index("ix_expenses_date", ["date"], unique=False)
        batch_op.create_index("ix_expenses_vehicle_date", ["vehicle_id", "date"], unique=False)

    op.create_table(
        "store_expenses",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("description", sa.String(255), nullable=False),
        sa.Column("category", sa.String(32), nullable=False),
        sa.Column("amount_cents", sa.Integer(), nullable=False),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )
    with op.batch_alter_table("store_expenses", schema=None) as batch_op:
        batch_op.create_index("ix_store_expenses_date", ["date"], unique=False)
        batch_op.create_index("ix_store_expenses_category_date", ["category", "date"], unique=False)


def downgrade():
    op.drop_table("store_expenses")
    op.drop_table("expenses")
    op.drop_table("vehicles")
    op.drop_table("intermediaries")
    op.drop_table("people")
