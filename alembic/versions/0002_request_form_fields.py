"""id_requests: delivery method, mailing address, quoted fee

Revision ID: 0002_request_form_fields
Revises: 0001_initial
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa

revision = "0002_request_form_fields"
down_revision = "0001_initial"
branch_labels = None
depends_on = None

_delivery = sa.Enum("PICKUP", "MAIL", name="delivery_method", native_enum=False, length=20)


def upgrade() -> None:
    op.add_column(
        "id_requests",
        sa.Column("delivery_method", _delivery, nullable=False, server_default="PICKUP"),
    )
    op.add_column("id_requests", sa.Column("address", sa.Text(), nullable=True))
    op.add_column("id_requests", sa.Column("fee", sa.Numeric(6, 2), nullable=True))


def downgrade() -> None:
    op.drop_column("id_requests", "fee")
    op.drop_column("id_requests", "address")
    op.drop_column("id_requests", "delivery_method")
