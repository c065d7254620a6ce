"""Tests for the moderation state machine."""

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.config import CollectionStatus, EntityKind, ModerationStatus, VisibilityScope
from catalog.core.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
)
from catalog.models.character import Characters
from catalog.models.collection import UserFigures
from catalog.models.figure import (
    FigureImages,
    Figures,
    FigureSeries,
    FigureVariantImages,
    FigureVariants,
)
from catalog.models.line import Lines
from catalog.services import moderation, system_config
from catalog.services.collection import track
from catalog.services.figures import create_variant, load_figure_detail


@pytest.mark.unit
class TestCreateEntity:
    async def test_user_submission_is_pending_without_stamp(self, db_session, user, make_figure):
        figure = await make_figure(user)
        assert figure.status == ModerationStatus.PENDING
        assert figure.created_by_id == user.user_id
        assert figure.approved_by_id is None
        assert figure.approved_at is None

    async def test_admin_submission_is_approved_with_stamp(self, db_session, admin, make_figure):
        figure = await make_figure(admin)
        assert figure.status == ModerationStatus.APPROVED
        assert figure.approved_by_id == admin.user_id
        assert figure.approved_at is not None

    async def test_admin_brand_has_no_stamp_columns(self, db_session, admin):
        brand = await moderation.create_entity(db_session, admin, EntityKind.BRAND, {"name": "Max Factory"})
        assert brand.status == ModerationStatus.APPROVED
        assert brand.slug == "max-factory"
        assert not hasattr(brand, "approved_by_id")

    async def test_anonymous_is_rejected(self, db_session):
        with pytest.raises(UnauthenticatedError):
            await moderation.create_entity(db_session, None, EntityKind.SERIES, {"name": "Fate"})

    async def test_slug_collision_conflicts(self, db_session, user, catalog_rows):
        with pytest.raises(ConflictError):
            await moderation.create_entity(
                db_session, user, EntityKind.BRAND, {"name": "GOOD smile company!"}
            )

    @pytest.mark.parametrize("name", ["!!!", "   "])
    async def test_name_without_letters_is_invalid(self, db_session, user, name):
        with pytest.raises(ValidationError):
            await moderation.create_entity(db_session, user, EntityKind.SERIES, {"name": name})

    async def test_missing_brand_is_not_found(self, db_session, user, figure_payload):
        with pytest.raises(NotFoundError):
            await moderation.create_entity(
                db_session, user, EntityKind.FIGURE, figure_payload(brand_id=9999)
            )

    async def test_missing_link_target_is_not_found(self, db_session, user, figure_payload):
        with pytest.raises(NotFoundError):
            await moderation.create_entity(
                db_session, user, EntityKind.FIGURE, figure_payload(character_ids=[9999])
            )

    async def test_dependents_are_stored(self, db_session, admin, catalog_rows, make_figure):
        figure = await make_figure(
            admin,
            images=["https://img.example/a.jpg", "https://img.example/b.jpg"],
            series_ids=[catalog_rows["series_id"]],
            character_ids=[catalog_rows["character_id"]],
        )

        detail = await load_figure_detail(db_session, figure)

        assert [image.url for image in detail["images"]] == [
            "https://img.example/a.jpg",
            "https://img.example/b.jpg",
        ]
        assert detail["series_ids"] == [catalog_rows["series_id"]]
        assert detail["character_ids"] == [catalog_rows["character_id"]]
        assert detail["avg_rating"] is None
        assert detail["review_count"] == 0


@pytest.mark.unit
class TestSetApproval:
    async def test_approve_sets_stamp(self, db_session, user, admin, make_figure):
        figure = await make_figure(user)

        await moderation.set_approval(db_session, admin, EntityKind.FIGURE, figure.id, True)

        assert figure.status == ModerationStatus.APPROVED
        assert figure.approved_by_id == admin.user_id
        assert figure.approved_at is not None

    async def test_unapprove_clears_stamp(self, db_session, admin, make_figure):
        figure = await make_figure(admin)

        await moderation.set_approval(db_session, admin, EntityKind.FIGURE, figure.id, False)

        assert figure.status == ModerationStatus.PENDING
        assert figure.approved_by_id is None
        assert figure.approved_at is None

    async def test_approving_twice_is_idempotent(self, db_session, admin, catalog_rows):
        brand = await moderation.set_approval(
            db_session, admin, EntityKind.BRAND, catalog_rows["brand_id"], True
        )
        assert brand.status == ModerationStatus.APPROVED

    async def test_user_cannot_approve(self, db_session, user, make_figure):
        figure = await make_figure(user)
        with pytest.raises(ForbiddenError):
            await moderation.set_approval(db_session, user, EntityKind.FIGURE, figure.id, True)

    async def test_missing_row(self, db_session, admin):
        with pytest.raises(NotFoundError):
            await moderation.set_approval(db_session, admin, EntityKind.LINE, 9999, True)


@pytest.mark.unit
class TestUpdateEntity:
    async def test_rename_recomputes_slug(self, db_session, admin, catalog_rows):
        series = await moderation.update_entity(
            db_session, admin, EntityKind.SERIES, catalog_rows["series_id"], {"name": "Vocaloid 2"}
        )
        assert series.slug == "vocaloid-2"

    async def test_rename_into_existing_slug_changes_nothing(self, db_session, admin, catalog_rows):
        other = await moderation.create_entity(db_session, admin, EntityKind.SERIES, {"name": "Touhou"})

        with pytest.raises(ConflictError):
            await moderation.update_entity(
                db_session,
                admin,
                EntityKind.SERIES,
                other.id,
                {"name": "VOCALOID", "description": "changed"},
            )

        assert other.name == "Touhou"
        assert other.slug == "touhou"
        assert other.description is None

    async def test_same_slug_rename_is_allowed(self, db_session, admin, catalog_rows):
        brand = await moderation.update_entity(
            db_session, admin, EntityKind.BRAND, catalog_rows["brand_id"], {"name": "Good Smile Company!"}
        )
        assert brand.name == "Good Smile Company!"
        assert brand.slug == "good-smile-company"

    async def test_omitted_fields_are_kept_and_empty_clears(self, db_session, admin, make_figure):
        figure = await make_figure(admin, sku="GSC-1", scale="1/7")

        await moderation.update_entity(db_session, admin, EntityKind.FIGURE, figure.id, {"sku": ""})

        assert figure.sku is None
        assert figure.scale == "1/7"

    async def test_required_field_cannot_be_cleared(self, db_session, admin, make_figure):
        figure = await make_figure(admin)
        with pytest.raises(ValidationError):
            await moderation.update_entity(db_session, admin, EntityKind.FIGURE, figure.id, {"brand_id": None})

    async def test_images_are_replaced_as_a_set(self, db_session, admin, make_figure):
        figure = await make_figure(admin, images=["https://img.example/old.jpg"])

        await moderation.update_entity(
            db_session, admin, EntityKind.FIGURE, figure.id, {"images": ["https://img.example/new.jpg"]}
        )

        result = await db_session.execute(select(FigureImages).where(FigureImages.figure_id == figure.id))
        assert [image.url for image in result.scalars().all()] == ["https://img.example/new.jpg"]

    async def test_user_cannot_update(self, db_session, user, catalog_rows):
        with pytest.raises(ForbiddenError):
            await moderation.update_entity(
                db_session, user, EntityKind.BRAND, catalog_rows["brand_id"], {"name": "Mine"}
            )

    async def test_update_keeps_status(self, db_session, user, admin, make_figure):
        figure = await make_figure(user)
        await moderation.update_entity(db_session, admin, EntityKind.FIGURE, figure.id, {"maker": "Someone"})
        assert figure.status == ModerationStatus.PENDING


@pytest.mark.unit
class TestDeleteEntity:
    async def test_figure_delete_cascades(self, db_session: AsyncSession, admin, user, make_figure):
        figure = await make_figure(admin, images=["https://img.example/a.jpg"])
        await track(db_session, user, figure.id, CollectionStatus.OWNED)
        await db_session.commit()

        await moderation.delete_entity(db_session, admin, EntityKind.FIGURE, figure.id)
        await db_session.commit()

        assert (await db_session.execute(select(Figures))).first() is None
        assert (await db_session.execute(select(UserFigures))).first() is None
        assert (await db_session.execute(select(FigureImages))).first() is None

    async def test_figure_delete_removes_variants(self, db_session, admin, make_figure):
        figure = await make_figure(admin)
        await create_variant(db_session, admin, figure.id, "Exclusive", images=["https://img.example/v.jpg"])
        await db_session.commit()

        await moderation.delete_entity(db_session, admin, EntityKind.FIGURE, figure.id)
        await db_session.commit()

        assert (await db_session.execute(select(FigureVariants))).first() is None
        assert (await db_session.execute(select(FigureVariantImages))).first() is None

    async def test_brand_delete_removes_lines_and_figures(self, db_session, admin, catalog_rows, make_figure):
        await make_figure(admin)

        await moderation.delete_entity(db_session, admin, EntityKind.BRAND, catalog_rows["brand_id"])
        await db_session.commit()

        assert (await db_session.execute(select(Lines))).first() is None
        assert (await db_session.execute(select(Figures))).first() is None

    async def test_series_delete_keeps_characters(self, db_session, admin, catalog_rows, make_figure):
        await make_figure(admin, series_ids=[catalog_rows["series_id"]])

        await moderation.delete_entity(db_session, admin, EntityKind.SERIES, catalog_rows["series_id"])
        await db_session.commit()

        assert (await db_session.execute(select(FigureSeries))).first() is None
        character = await db_session.get(Characters, catalog_rows["character_id"])
        await db_session.refresh(character)
        assert character.series_id is None
        assert (await db_session.execute(select(Figures))).first() is not None

    async def test_user_cannot_delete(self, db_session, user, catalog_rows):
        with pytest.raises(ForbiddenError):
            await moderation.delete_entity(db_session, user, EntityKind.SERIES, catalog_rows["series_id"])


@pytest.mark.unit
class TestListing:
    async def test_default_scope_hides_pending_from_others(self, db_session, user, other_user, admin, make_figure):
        await make_figure(admin, name="Approved One")
        await make_figure(user, name="Pending One")

        anonymous, _ = await moderation.list_entities(db_session, None, EntityKind.FIGURE)
        creator, _ = await moderation.list_entities(db_session, user, EntityKind.FIGURE)
        other, _ = await moderation.list_entities(db_session, other_user, EntityKind.FIGURE)
        everything, total = await moderation.list_entities(
            db_session, admin, EntityKind.FIGURE, VisibilityScope.ALL
        )

        assert [f.name for f in anonymous] == ["Approved One"]
        assert sorted(f.name for f in creator) == ["Approved One", "Pending One"]
        assert [f.name for f in other] == ["Approved One"]
        assert total == 2
        assert [f.name for f in everything] == ["Pending One", "Approved One"]

    async def test_search_is_case_insensitive(self, db_session, admin, catalog_rows):
        found, total = await moderation.list_entities(
            db_session, None, EntityKind.BRAND, filters={"search": "SMILE"}
        )
        assert total == 1
        assert found[0].id == catalog_rows["brand_id"]

    async def test_search_wildcards_match_literally(self, db_session, admin, catalog_rows):
        await moderation.create_entity(db_session, admin, EntityKind.BRAND, {"name": "Kotobukiya"})
        scale = await moderation.create_entity(db_session, admin, EntityKind.BRAND, {"name": "100% Scale"})

        for term, expected in (("%", [scale.id]), ("o_o", []), ("100%", [scale.id])):
            found, _ = await moderation.list_entities(
                db_session, None, EntityKind.BRAND, filters={"search": term}
            )
            assert [b.id for b in found] == expected, term

    async def test_series_filter_on_figures(self, db_session, admin, catalog_rows, make_figure):
        await make_figure(admin, name="In Series", series_ids=[catalog_rows["series_id"]])
        await make_figure(admin, name="Not In Series")

        found, _ = await moderation.list_entities(
            db_session, None, EntityKind.FIGURE, filters={"series_id": catalog_rows["series_id"]}
        )
        assert [f.name for f in found] == ["In Series"]

    async def test_hidden_row_reads_as_missing(self, db_session, user, other_user, make_figure):
        figure = await make_figure(user)
        with pytest.raises(NotFoundError):
            await moderation.get_visible_entity(db_session, other_user, EntityKind.FIGURE, figure.id)
        assert await moderation.get_visible_entity(db_session, user, EntityKind.FIGURE, figure.id) is figure

    async def test_flag_makes_pending_figure_readable(self, db_session, user, other_user, superadmin, make_figure):
        figure = await make_figure(user)
        await system_config.set_config_value(db_session, superadmin, "SHOW_PENDING_FIGURES", True)

        found = await moderation.get_visible_entity(db_session, other_user, EntityKind.FIGURE, figure.id)
        assert found is figure
        assert await moderation.get_visible_entity(db_session, None, EntityKind.FIGURE, figure.id) is figure

    async def test_pending_summary(self, db_session, user, admin, catalog_rows, make_figure):
        await make_figure(user)
        await moderation.create_entity(db_session, user, EntityKind.BRAND, {"name": "Kotobukiya"})

        counts = await moderation.pending_summary(db_session, admin)

        assert counts == {"figures": 1, "brands": 1, "lines": 0, "series": 0, "characters": 0, "total": 2}

    async def test_pending_summary_is_admin_only(self, db_session, user):
        with pytest.raises(ForbiddenError):
            await moderation.pending_summary(db_session, user)


@pytest.mark.unit
class TestFigureVariants:
    async def test_admin_adds_variant_with_ordered_images(self, db_session, admin, make_figure):
        figure = await make_figure(admin)
        urls = ["https://img.example/b.jpg", "https://img.example/a.jpg"]

        variant = await create_variant(
            db_session, admin, figure.id, "  Racing Ver.  ", price_mxn=1500, price_yen=6000, images=urls
        )

        assert variant.name == "Racing Ver."
        detail = await load_figure_detail(db_session, figure)
        [stored] = detail["variants"]
        assert stored["id"] == variant.id
        assert stored["price_mxn"] == 1500
        assert stored["price_usd"] is None
        assert [image.url for image in stored["images"]] == urls

    async def test_pending_parent_is_fine(self, db_session, user, admin, make_figure):
        figure = await make_figure(user)
        variant = await create_variant(db_session, admin, figure.id, "Exclusive")
        assert variant.figure_id == figure.id

    async def test_user_cannot_add(self, db_session, user, admin, make_figure):
        figure = await make_figure(admin)
        with pytest.raises(ForbiddenError):
            await create_variant(db_session, user, figure.id, "Exclusive")

    async def test_missing_figure(self, db_session, admin):
        with pytest.raises(NotFoundError):
            await create_variant(db_session, admin, 9999, "Exclusive")

    @pytest.mark.parametrize("name", ["", "   "])
    async def test_blank_name(self, db_session, admin, make_figure, name):
        figure = await make_figure(admin)
        with pytest.raises(ValidationError):
            await create_variant(db_session, admin, figure.id, name)

    async def test_negative_price(self, db_session, admin, make_figure):
        figure = await make_figure(admin)
        with pytest.raises(ValidationError):
            await create_variant(db_session, admin, figure.id, "Exclusive", price_usd=-5)

    async def test_detail_without_variants(self, db_session, admin, make_figure):
        figure = await make_figure(admin)
        assert (await load_figure_detail(db_session, figure))["variants"] == []
