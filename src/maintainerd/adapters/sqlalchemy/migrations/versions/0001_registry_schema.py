"""Maintainer registry schema.

Revision ID: 0001_registry_schema
Revises:
Create Date: 2026-10-19 09:00:00

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001_registry_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_MATURITY = sa.Enum(
    "Sandbox",
    "Incubating",
    "Graduated",
    "Archived",
    name="maturity",
    native_enum=False,
)
_MAINTAINER_STATUS = sa.Enum(
    "Active",
    "Emeritus",
    "Retired",
    name="maintainerstatus",
    native_enum=False,
)


def upgrade() -> None:
    op.create_table(
        "company",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_company"),
        sa.UniqueConstraint("name", name="uq_company_name"),
    )
    op.create_table(
        "project",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("parent_project_id", sa.Uuid(), nullable=True),
        sa.Column("maturity", _MATURITY, nullable=True),
        sa.Column("maintainer_ref", sa.String(), nullable=True),
        sa.Column("mailing_list", sa.String(length=254), nullable=True),
        sa.ForeignKeyConstraint(
            ["parent_project_id"],
            ["project.id"],
            name="fk_project_parent_project_id_project",
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_project"),
        sa.UniqueConstraint("name", name="uq_project_name"),
    )
    op.create_index(
        "ix_project_parent_project_id", "project", ["parent_project_id"], unique=False
    )
    op.create_table(
        "maintainer",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(length=254), nullable=True),
        sa.Column("github_account", sa.String(length=100), nullable=True),
        sa.Column("status", _MAINTAINER_STATUS, nullable=False),
        sa.Column("company_id", sa.Uuid(), nullable=True),
        sa.Column("import_warnings", sa.String(), nullable=True),
        sa.Column("registered_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["company_id"],
            ["company.id"],
            name="fk_maintainer_company_id_company",
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_maintainer"),
    )
    op.create_index("ix_maintainer_email", "maintainer", ["email"], unique=False)
    op.create_index(
        "ix_maintainer_github_account", "maintainer", ["github_account"], unique=False
    )
    op.create_table(
        "maintainer_project",
        sa.Column("maintainer_id", sa.Uuid(), nullable=False),
        sa.Column("project_id", sa.Uuid(), nullable=False),
        sa.Column(
            "joined_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(
            ["maintainer_id"],
            ["maintainer.id"],
            name="fk_maintainer_project_maintainer_id_maintainer",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["project_id"],
            ["project.id"],
            name="fk_maintainer_project_project_id_project",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("maintainer_id", "project_id", name="pk_maintainer_project"),
    )
    op.create_table(
        "service",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_service"),
        sa.UniqueConstraint("name", name="uq_service_name"),
    )
    op.create_table(
        "service_team",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("project_id", sa.Uuid(), nullable=False),
        sa.Column("service_id", sa.Uuid(), nullable=False),
        sa.Column("remote_id", sa.Integer(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=True,
        ),
        sa.ForeignKeyConstraint(
            ["project_id"],
            ["project.id"],
            name="fk_service_team_project_id_project",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["service_id"],
            ["service.id"],
            name="fk_service_team_service_id_service",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_service_team"),
        sa.UniqueConstraint("project_id", "service_id", name="uq_service_team_project_service"),
    )


def downgrade() -> None:
    op.drop_table("service_team")
    op.drop_table("service")
    op.drop_table("maintainer_project")
    op.drop_index("ix_maintainer_github_account", table_name="maintainer")
    op.drop_index("ix_maintainer_email", table_name="maintainer")
    op.drop_table("maintainer")
    op.drop_index("ix_project_parent_project_id", table_name="project")
    op.drop_table("project")
    op.drop_table("company")
