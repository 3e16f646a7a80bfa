"""Initial inventory schema.

- tenants
- source_types, sources, endpoints, authentications
- service_offerings, service_plans, service_instances
- flavors, vms
- container_images, tags, container_image_tags
- tasks
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3c1d7e5a2b90"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    # SQLite only autoincrements INTEGER PRIMARY KEY columns
    return sa.Column(
        "id", sa.BigInteger().with_variant(sa.Integer(), "sqlite"), primary_key=True, autoincrement=True
    )


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
    ]


def _tenant() -> sa.Column:
    return sa.Column(
        "tenant_id",
        sa.BigInteger(),
        sa.ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


def _fk(name: str, table: str, ondelete: str, nullable: bool = True) -> sa.Column:
    return sa.Column(name, sa.BigInteger(), sa.ForeignKey(f"{table}.id", ondelete=ondelete), nullable=nullable, index=True)


def _collected(*columns: sa.Column) -> list[sa.Column]:
    """Columns of records collected from a source."""
    return [
        _id(),
        _tenant(),
        _fk("source_id", "sources", "CASCADE", nullable=False),
        sa.Column("source_ref", sa.Text(), nullable=True),
        *columns,
        *_timestamps(),
    ]


def upgrade() -> None:
    op.create_table(
        "tenants",
        _id(),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("external_tenant", sa.Text(), nullable=False, unique=True),
        *_timestamps(),
    )

    op.create_table(
        "source_types",
        _id(),
        sa.Column("name", sa.Text(), nullable=False, unique=True),
        sa.Column("product_name", sa.Text(), nullable=True),
        sa.Column("vendor", sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "sources",
        _id(),
        _tenant(),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("uid", sa.Text(), nullable=True),
        _fk("source_type_id", "source_types", "RESTRICT", nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "endpoints",
        _id(),
        _tenant(),
        sa.Column("role", sa.Text(), nullable=True),
        sa.Column("scheme", sa.Text(), nullable=True),
        sa.Column("host", sa.Text(), nullable=True),
        sa.Column("port", sa.Integer(), nullable=True),
        sa.Column("path", sa.Text(), nullable=True),
        sa.Column("default", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("verify_ssl", sa.Boolean(), nullable=True),
        sa.Column("certificate_authority", sa.Text(), nullable=True),
        _fk("source_id", "sources", "CASCADE", nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("source_id", "role", name="uq_endpoints_source_role"),
    )

    op.create_table(
        "authentications",
        _id(),
        _tenant(),
        sa.Column("authtype", sa.Text(), nullable=True),
        sa.Column("username", sa.Text(), nullable=True),
        sa.Column("password", sa.Text(), nullable=True),
        sa.Column("status", sa.Text(), nullable=True),
        sa.Column("status_details", sa.Text(), nullable=True),
        sa.Column("resource_type", sa.Text(), nullable=False),
        sa.Column("resource_id", sa.BigInteger(), nullable=False, index=True),
        *_timestamps(),
    )

    op.create_table(
        "service_offerings",
        *_collected(
            sa.Column("name", sa.Text(), nullable=True),
            sa.Column("display_name", sa.Text(), nullable=True),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("extra", sa.JSON(), nullable=True),
            sa.Column("source_created_at", sa.DateTime(timezone=True), nullable=True),
            sa.Column("source_deleted_at", sa.DateTime(timezone=True), nullable=True),
        ),
    )

    op.create_table(
        "service_plans",
        *_collected(
            sa.Column("name", sa.Text(), nullable=True),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("create_json_schema", sa.JSON(), nullable=True),
            sa.Column("source_created_at", sa.DateTime(timezone=True), nullable=True),
            sa.Column("source_deleted_at", sa.DateTime(timezone=True), nullable=True),
            _fk("service_offering_id", "service_offerings", "CASCADE"),
        ),
    )

    op.create_table(
        "service_instances",
        *_collected(
            sa.Column("name", sa.Text(), nullable=True),
            sa.Column("external_url", sa.Text(), nullable=True),
            sa.Column("source_created_at", sa.DateTime(timezone=True), nullable=True),
            sa.Column("source_deleted_at", sa.DateTime(timezone=True), nullable=True),
            _fk("service_offering_id", "service_offerings", "CASCADE"),
            _fk("service_plan_id", "service_plans", "CASCADE"),
        ),
    )

    op.create_table(
        "flavors",
        *_collected(
            sa.Column("name", sa.Text(), nullable=True),
            sa.Column("cpus", sa.Integer(), nullable=True),
            sa.Column("memory", sa.BigInteger(), nullable=True),
            sa.Column("disk_size", sa.BigInteger(), nullable=True),
            sa.Column("disk_count", sa.Integer(), nullable=True),
        ),
    )

    op.create_table(
        "vms",
        *_collected(
            sa.Column("name", sa.Text(), nullable=True),
            sa.Column("uid_ems", sa.Text(), nullable=True),
            sa.Column("hostname", sa.Text(), nullable=True),
            sa.Column("power_state", sa.Text(), nullable=True),
            sa.Column("cpus", sa.Integer(), nullable=True),
            sa.Column("memory", sa.BigInteger(), nullable=True),
            _fk("flavor_id", "flavors", "SET NULL"),
        ),
    )

    op.create_table(
        "container_images",
        *_collected(
            sa.Column("name", sa.Text(), nullable=True),
            sa.Column("tag", sa.Text(), nullable=True),
            sa.Column("digest", sa.Text(), nullable=True),
            sa.Column("source_created_at", sa.DateTime(timezone=True), nullable=True),
            sa.Column("source_deleted_at", sa.DateTime(timezone=True), nullable=True),
        ),
    )

    op.create_table(
        "tags",
        _id(),
        _tenant(),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("namespace", sa.Text(), nullable=False, server_default=""),
        sa.Column("value", sa.Text(), nullable=False, server_default=""),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("tenant_id", "namespace", "name", "value", name="uq_tags_tenant_namespace_name_value"),
    )

    op.create_table(
        "container_image_tags",
        _id(),
        _tenant(),
        _fk("container_image_id", "container_images", "CASCADE", nullable=False),
        _fk("tag_id", "tags", "CASCADE", nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("container_image_id", "tag_id", name="uq_container_image_tags_image_tag"),
    )

    op.create_table(
        "tasks",
        _id(),
        _tenant(),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("state", sa.Text(), nullable=True),
        sa.Column("status", sa.Text(), nullable=True),
        sa.Column("context", sa.JSON(), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        _fk("source_id", "sources", "SET NULL"),
        *_timestamps(),
    )


def downgrade() -> None:
    for table in (
        "tasks",
        "container_image_tags",
        "tags",
        "container_images",
        "vms",
        "flavors",
        "service_instances",
        "service_plans",
        "service_offerings",
        "authentications",
        "endpoints",
        "sources",
        "source_types",
        "tenants",
    ):
        op.drop_table(table)
