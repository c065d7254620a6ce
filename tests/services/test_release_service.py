"""Tests for the public release calendar."""

import pytest

from catalog.config import EntityKind, VisibilityScope
from catalog.core.errors import ValidationError
from catalog.services import moderation, system_config
from catalog.services.releases import release_calendar


@pytest.mark.unit
class TestReleaseCalendar:
    async def test_month_prefix_and_order(self, db_session, admin, make_figure):
        await make_figure(admin, name="Mid March", release_date="2025-03-15")
        await make_figure(admin, name="March", release_date="2025-03")
        await make_figure(admin, name="April", release_date="2025-04")
        await make_figure(admin, name="Undated")

        rows = await release_calendar(db_session, None, "2025-03")

        assert [row["name"] for row in rows] == ["March", "Mid March"]
        assert rows[0]["brand_name"] == "Good Smile Company"
        assert rows[0]["line_name"] == "Nendoroid"

    async def test_cover_is_first_image(self, db_session, admin, make_figure):
        await make_figure(
            admin,
            release_date="2025-03",
            images=["https://img.example/front.jpg", "https://img.example/back.jpg"],
        )
        await make_figure(admin, name="No Images", release_date="2025-03")

        rows = await release_calendar(db_session, None, "2025-03")

        covers = {row["name"]: row["cover_image"] for row in rows}
        assert covers == {"Miku Snow 2025": "https://img.example/front.jpg", "No Images": None}

    async def test_pending_follows_visibility(self, db_session, user, other_user, admin, make_figure):
        await make_figure(user, name="Pending", release_date="2025-03")

        assert await release_calendar(db_session, None, "2025-03") == []
        assert await release_calendar(db_session, other_user, "2025-03") == []
        assert len(await release_calendar(db_session, user, "2025-03")) == 1
        assert len(await release_calendar(db_session, admin, "2025-03", scope=VisibilityScope.ALL)) == 1

    async def test_flag_opens_pending_to_everyone(self, db_session, user, superadmin, make_figure):
        await make_figure(user, name="Pending", release_date="2025-03")
        await system_config.set_config_value(db_session, superadmin, "SHOW_PENDING_FIGURES", True)

        assert [row["name"] for row in await release_calendar(db_session, None, "2025-03")] == ["Pending"]

    async def test_brand_and_line_filters(self, db_session, admin, catalog_rows, make_figure):
        other_brand = await moderation.create_entity(db_session, admin, EntityKind.BRAND, {"name": "Alter"})
        other_line = await moderation.create_entity(
            db_session, admin, EntityKind.LINE, {"name": "Alter Scale", "brand_id": other_brand.id}
        )
        await make_figure(admin, name="GSC One", release_date="2025-03")
        await make_figure(
            admin,
            name="Alter One",
            release_date="2025-03",
            brand_id=other_brand.id,
            line_id=other_line.id,
        )

        by_brand = await release_calendar(db_session, None, "2025-03", brand_id=other_brand.id)
        by_line = await release_calendar(db_session, None, "2025-03", line_id=catalog_rows["line_id"])

        assert [row["name"] for row in by_brand] == ["Alter One"]
        assert [row["name"] for row in by_line] == ["GSC One"]

    @pytest.mark.parametrize("month", ["2025-3", "2025-13", "2025-03-01", "March", "%"])
    async def test_bad_month(self, db_session, month):
        with pytest.raises(ValidationError):
            await release_calendar(db_session, None, month)
