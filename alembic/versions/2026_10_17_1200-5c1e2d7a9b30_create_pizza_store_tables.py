"""create_pizza_store_tables

Revision ID: 5c1e2d7a9b30
Revises:
Create Date: 2026-10-17 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5c1e2d7a9b30'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('login', sa.String(length=50), nullable=False),
        sa.Column('password', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('favoriteitems', sa.String(length=400), nullable=False,
                  server_default=''),
        sa.Column('phonenum', sa.String(length=20), nullable=True),
        sa.PrimaryKeyConstraint('login'),
    )

    op.create_table(
        'items',
        sa.Column('itemname', sa.String(length=50), nullable=False),
        sa.Column('ingredients', sa.String(length=300), nullable=False,
                  server_default=''),
        sa.Column('typeofitem', sa.String(length=40), nullable=False,
                  server_default=''),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('description', sa.String(length=400), nullable=True),
        sa.CheckConstraint('price >= 0', name='ck_items_price_non_negative'),
        sa.PrimaryKeyConstraint('itemname'),
    )

    op.create_table(
        'store',
        sa.Column('storeid', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('address', sa.String(length=100), nullable=False),
        sa.Column('city', sa.String(length=50), nullable=False),
        sa.Column('state', sa.String(length=50), nullable=False),
        sa.Column('isopen', sa.Boolean(), nullable=False),
        sa.Column('reviewscore', sa.Numeric(precision=4, scale=2), nullable=True),
        sa.PrimaryKeyConstraint('storeid'),
    )

    # Order ids are handed out by the database
    op.execute(sa.schema.CreateSequence(sa.Sequence('foodorder_orderid_seq')))

    op.create_table(
        'foodorder',
        sa.Column('orderid', sa.Integer(),
                  server_default=sa.text("nextval('foodorder_orderid_seq')"),
                  nullable=False),
        sa.Column('login', sa.String(length=50), nullable=False),
        sa.Column('storeid', sa.Integer(), nullable=False),
        sa.Column('totalprice', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('ordertimestamp', sa.DateTime(), nullable=False),
        sa.Column('orderstatus', sa.Enum('Pending', 'Delivered',
                                         name='orderstatus', native_enum=False,
                                         length=20),
                  nullable=False),
        sa.CheckConstraint('totalprice >= 0', name='ck_foodorder_total_non_negative'),
        sa.ForeignKeyConstraint(['login'], ['users.login']),
        sa.ForeignKeyConstraint(['storeid'], ['store.storeid']),
        sa.PrimaryKeyConstraint('orderid'),
    )
    op.create_index('ix_foodorder_login', 'foodorder', ['login'], unique=False)

    op.create_table(
        'itemsinorder',
        sa.Column('orderid', sa.Integer(), nullable=False),
        sa.Column('itemname', sa.String(length=50), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.CheckConstraint('quantity >= 1', name='ck_itemsinorder_quantity_positive'),
        sa.ForeignKeyConstraint(['orderid'], ['foodorder.orderid']),
        sa.ForeignKeyConstraint(['itemname'], ['items.itemname']),
        sa.PrimaryKeyConstraint('orderid', 'itemname'),
    )


def downgrade() -> None:
    op.drop_table('itemsinorder')
    op.drop_index('ix_foodorder_login', table_name='foodorder')
    op.drop_table('foodorder')
    op.execute(sa.schema.DropSequence(sa.Sequence('foodorder_orderid_seq')))
    op.drop_table('store')
    op.drop_table('items')
    op.drop_table('users')
