"""Create project and label tables, link todos to them

Revision ID: 005
Revises: 004
Create Date: 2026-10-17

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "005"
down_revision: str | None = "004"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "project",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False, server_default="user"),
        sa.Column("color", sa.String(length=32), nullable=True),
        sa.Column("icon", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.BigInteger(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["user.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_project_user_id"), "project", ["user_id"], unique=False)

    op.create_table(
        "label",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False, server_default="user"),
        sa.Column("created_at", sa.BigInteger(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["user.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_label_user_id"), "label", ["user_id"], unique=False)

    with op.batch_alter_table("todo") as batch_op:
        batch_op.add_column(sa.Column("project_id", sa.Integer(), nullable=True))
        batch_op.add_column(sa.Column("label_id", sa.Integer(), nullable=True))
        batch_op.create_foreign_key("fk_todo_project_id", "project", ["project_id"], ["id"], ondelete="SET NULL")
        batch_op.create_foreign_key("fk_todo_label_id", "label", ["label_id"], ["id"], ondelete="SET NULL")
        batch_op.create_index(batch_op.f("ix_todo_project_id"), ["project_id"], unique=False)
        batch_op.create_index(batch_op.f("ix_todo_label_id"), ["label_id"], unique=False)


def downgrade() -> None:
    with op.batch_alter_table("todo") as batch_op:
        batch_op.drop_index(batch_op.f("ix_todo_label_id"))
        batch_op.drop_index(batch_op.f("ix_todo_project_id"))
        batch_op.drop_constraint("fk_todo_label_id", type_="foreignkey")
        batch_op.drop_constraint("fk_todo_project_id", type_="foreignkey")
        batch_op.drop_column("label_id")
        batch_op.drop_column("project_id")

    op.drop_index(op.f("ix_label_user_id"), table_name="label")
    op.drop_table("label")
    op.drop_index(op.f("ix_project_user_id"), table_name="project")
    op.drop_table("project")
