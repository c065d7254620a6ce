"""create_catalog_schema

Revision ID: 3f9c1a7d2b64
Revises:
Create Date: 2026-10-17 10:12:44.318201

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9c1a7d2b64'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MODERATION_STATUS = sa.Enum('PENDING', 'APPROVED', name='moderationstatus')
USER_ROLE = sa.Enum('USER', 'ADMIN', 'SUPERADMIN', name='userrole')
COLLECTION_STATUS = sa.Enum('WISHLIST', 'PREORDER', 'OWNED', name='collectionstatus')
CURRENCY = sa.Enum('MXN', 'USD', 'YEN', name='currency')
NOTIFICATION_TYPE = sa.Enum('FIGURE_RELEASED', name='notificationtype')


def _moderation_columns() -> list[sa.Column]:
    """Columns shared by the five moderated tables."""
    return [
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('status', MODERATION_STATUS, nullable=False, server_default='PENDING'),
        sa.Column('created_by_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def _moderation_indexes(table: str) -> None:
    op.create_index(f'ix_{table}_slug', table, ['slug'], unique=True)
    op.create_index(f'ix_{table}_status', table, ['status'])
    op.create_index(f'ix_{table}_created_by_id', table, ['created_by_id'])


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('user_id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('username', sa.String(length=30), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=True),
        sa.Column('country', sa.String(length=60), nullable=True),
        sa.Column('bio', sa.String(length=500), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password', sa.String(length=255), nullable=False),
        sa.Column('role', USER_ROLE, nullable=False, server_default='USER'),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('date_joined', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('user_id'),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # Moderated catalog tables
    op.create_table(
        'brands',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('country', sa.String(length=60), nullable=True),
        *_moderation_columns(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['created_by_id'], ['users.user_id'], ondelete='SET NULL'),
    )
    _moderation_indexes('brands')

    op.create_table(
        'lines',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('release_year', sa.Integer(), nullable=True),
        sa.Column('brand_id', sa.Integer(), nullable=False),
        *_moderation_columns(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['brand_id'], ['brands.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['created_by_id'], ['users.user_id'], ondelete='SET NULL'),
    )
    _moderation_indexes('lines')
    op.create_index('ix_lines_brand_id', 'lines', ['brand_id'])

    op.create_table(
        'series',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        *_moderation_columns(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['created_by_id'], ['users.user_id'], ondelete='SET NULL'),
    )
    _moderation_indexes('series')

    op.create_table(
        'characters',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('series_id', sa.Integer(), nullable=True),
        *_moderation_columns(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['series_id'], ['series.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['created_by_id'], ['users.user_id'], ondelete='SET NULL'),
    )
    _moderation_indexes('characters')
    op.create_index('ix_characters_series_id', 'characters', ['series_id'])

    op.create_table(
        'figures',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('sku', sa.String(length=100), nullable=True),
        sa.Column('height_cm', sa.Float(), nullable=True),
        sa.Column('width_cm', sa.Float(), nullable=True),
        sa.Column('depth_cm', sa.Float(), nullable=True),
        sa.Column('scale', sa.String(length=20), nullable=True),
        sa.Column('material', sa.String(length=100), nullable=True),
        sa.Column('maker', sa.String(length=100), nullable=True),
        sa.Column('price_mxn', sa.Float(), nullable=True),
        sa.Column('price_usd', sa.Float(), nullable=True),
        sa.Column('price_yen', sa.Float(), nullable=True),
        sa.Column('original_price_currency', CURRENCY, nullable=True),
        sa.Column('release_date', sa.String(length=10), nullable=True),
        sa.Column('is_released', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_nsfw', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('brand_id', sa.Integer(), nullable=False),
        sa.Column('line_id', sa.Integer(), nullable=False),
        sa.Column('approved_by_id', sa.Integer(), nullable=True),
        sa.Column('approved_at', sa.DateTime(), nullable=True),
        *_moderation_columns(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['brand_id'], ['brands.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['line_id'], ['lines.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['approved_by_id'], ['users.user_id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['created_by_id'], ['users.user_id'], ondelete='SET NULL'),
    )
    _moderation_indexes('figures')
    op.create_index('ix_figures_brand_id', 'figures', ['brand_id'])
    op.create_index('ix_figures_line_id', 'figures', ['line_id'])
    op.create_index('ix_figures_release_date', 'figures', ['release_date'])

    op.create_table(
        'tags',
        sa.Column('tag_id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('slug', sa.String(length=100), nullable=False),
        sa.PrimaryKeyConstraint('tag_id'),
    )
    op.create_index('ix_tags_slug', 'tags', ['slug'], unique=True)

    # Figure dependent rows
    op.create_table(
        'figure_images',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('figure_id', sa.Integer(), nullable=False),
        sa.Column('url', sa.String(length=500), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['figure_id'], ['figures.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_figure_images_figure_id', 'figure_images', ['figure_id'])

    op.create_table(
        'figure_variants',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('figure_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('price_mxn', sa.Float(), nullable=True),
        sa.Column('price_usd', sa.Float(), nullable=True),
        sa.Column('price_yen', sa.Float(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['figure_id'], ['figures.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_figure_variants_figure_id', 'figure_variants', ['figure_id'])

    op.create_table(
        'figure_variant_images',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('variant_id', sa.Integer(), nullable=False),
        sa.Column('url', sa.String(length=500), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['variant_id'], ['figure_variants.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_figure_variant_images_variant_id', 'figure_variant_images', ['variant_id'])

    for table, column, target in (
        ('figure_tags', 'tag_id', 'tags.tag_id'),
        ('figure_series', 'series_id', 'series.id'),
        ('figure_characters', 'character_id', 'characters.id'),
    ):
        op.create_table(
            table,
            sa.Column('figure_id', sa.Integer(), nullable=False),
            sa.Column(column, sa.Integer(), nullable=False),
            sa.PrimaryKeyConstraint('figure_id', column),
            sa.ForeignKeyConstraint(['figure_id'], ['figures.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint([column], [target], ondelete='CASCADE'),
        )

    op.create_table(
        'system_configuration',
        sa.Column('key', sa.String(length=64), nullable=False),
        sa.Column('value', sa.Text(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('updated_by_id', sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint('key'),
        sa.ForeignKeyConstraint(['updated_by_id'], ['users.user_id'], ondelete='SET NULL'),
    )

    # Per-user data
    op.create_table(
        'user_figures',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('figure_id', sa.Integer(), nullable=False),
        sa.Column('status', COLLECTION_STATUS, nullable=False),
        sa.Column('user_price', sa.Float(), nullable=True),
        sa.Column('preorder_month', sa.String(length=10), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.user_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['figure_id'], ['figures.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', 'figure_id', name='uq_user_figures_user_figure'),
    )
    op.create_index('ix_user_figures_user_id', 'user_figures', ['user_id'])
    op.create_index('ix_user_figures_figure_id', 'user_figures', ['figure_id'])
    op.create_index('ix_user_figures_status', 'user_figures', ['status'])

    op.create_table(
        'reviews',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('figure_id', sa.Integer(), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.user_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['figure_id'], ['figures.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', 'figure_id', name='uq_reviews_user_figure'),
    )
    op.create_index('ix_reviews_user_id', 'reviews', ['user_id'])
    op.create_index('ix_reviews_figure_id', 'reviews', ['figure_id'])

    op.create_table(
        'review_images',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('review_id', sa.Integer(), nullable=False),
        sa.Column('url', sa.String(length=500), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['review_id'], ['reviews.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_review_images_review_id', 'review_images', ['review_id'])

    op.create_table(
        'lists',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_official', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_featured', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_by_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['created_by_id'], ['users.user_id'], ondelete='CASCADE'),
    )
    op.create_index('ix_lists_created_by_id', 'lists', ['created_by_id'])
    op.create_index('ix_lists_is_featured', 'lists', ['is_featured'])

    op.create_table(
        'list_items',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('list_id', sa.Integer(), nullable=False),
        sa.Column('figure_id', sa.Integer(), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('added_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['list_id'], ['lists.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['figure_id'], ['figures.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('list_id', 'figure_id', name='uq_list_items_list_figure'),
    )
    op.create_index('ix_list_items_list_id', 'list_items', ['list_id'])
    op.create_index('ix_list_items_figure_id', 'list_items', ['figure_id'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('type', NOTIFICATION_TYPE, nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('message', sa.String(length=500), nullable=False),
        sa.Column('link', sa.String(length=255), nullable=True),
        sa.Column('figure_id', sa.Integer(), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.user_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['figure_id'], ['figures.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])
    op.create_index('ix_notifications_figure_id', 'notifications', ['figure_id'])


def downgrade() -> None:
    """Downgrade schema."""
    for table in (
        'notifications',
        'list_items',
        'lists',
        'review_images',
        'reviews',
        'user_figures',
        'system_configuration',
        'figure_characters',
        'figure_series',
        'figure_variant_images',
        'figure_variants',
        'figure_tags',
        'figure_images',
        'tags',
        'figures',
        'characters',
        'series',
        'lines',
        'brands',
        'users',
    ):
        op.drop_table(table)
