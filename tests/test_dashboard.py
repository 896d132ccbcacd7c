"""대시보드 API 테스트 — 요약 통계 및 Excel 내보내기."""

from datetime import datetime, timezone
from io import BytesIO

from httpx import AsyncClient
from openpyxl import load_workbook

from tests.conftest import auth_header, make_observation

SUMMARY = "/api/v1/app/dashboard/summary"
EXPORT = "/api/v1/admin/observations/export"


async def _seed(db, owner) -> None:
    await make_observation(db, owner, area="Chancado", severity="high",
                           created_at=datetime(2024, 1, 3, 12, 0, tzinfo=timezone.utc))
    await make_observation(db, owner, area="chancado ", severity="low",
                           created_at=datetime(2024, 1, 20, 12, 0, tzinfo=timezone.utc))
    await make_observation(db, owner, area="Molienda", severity="medium", state="closed",
                           closure_description="ok", closure_evidence_url="https://x/c.jpg",
                           closed_by=owner.email,
                           created_at=datetime(2024, 2, 5, 12, 0, tzinfo=timezone.utc),
                           closed_at=datetime(2024, 2, 6, 12, 0, tzinfo=timezone.utc))
    await db.commit()


class TestSummary:

    async def test_summary(self, client: AsyncClient, db, normal_user, user_token):
        await _seed(db, normal_user)

        res = await client.get(SUMMARY, headers=auth_header(user_token))
        assert res.status_code == 200
        data = res.json()
        assert data["totals"] == {"total": 3, "pending": 2, "closed": 1}
        assert data["severity"] == {"low": 1, "medium": 1, "high": 1}
        assert data["pending_severity"] == {"low": 1, "medium": 0, "high": 1}
        assert sum(data["urgency"].values()) == 2
        assert data["top_areas"]["items"][0] == {"key": "chancado", "label": "Chancado", "count": 2}
        assert data["top_responsibles"]["items"][0]["count"] == 2
        assert data["series"]["labels"] == ["2024-01", "2024-02"]
        assert data["series"]["series"]["created"] == [2, 1]
        assert data["series"]["series"]["closed"] == [0, 1]

    async def test_filters(self, client: AsyncClient, db, normal_user, user_token):
        await _seed(db, normal_user)

        res = await client.get(SUMMARY, params={
            "date_from": "2024-01-10",
            "areas": ["CHANCADO", "molienda"],
            "status": "pending",
        }, headers=auth_header(user_token))
        assert res.status_code == 200
        assert res.json()["totals"] == {"total": 1, "pending": 1, "closed": 0}

    async def test_week_interval(self, client: AsyncClient, db, normal_user, user_token):
        await _seed(db, normal_user)

        res = await client.get(SUMMARY, params={"interval": "week"}, headers=auth_header(user_token))
        assert res.status_code == 200
        assert res.json()["series"]["labels"][0] == "2024-01-01"

    async def test_bad_interval(self, client: AsyncClient, user_token):
        res = await client.get(SUMMARY, params={"interval": "year"}, headers=auth_header(user_token))
        assert res.status_code == 422
        assert res.json()["detail"]["field"] == "interval"

    async def test_bad_status(self, client: AsyncClient, user_token):
        res = await client.get(SUMMARY, params={"status": "open"}, headers=auth_header(user_token))
        assert res.status_code == 422
        assert res.json()["detail"]["field"] == "status"

    async def test_requires_auth(self, client: AsyncClient):
        res = await client.get(SUMMARY)
        assert res.status_code == 401


class TestExport:

    async def test_admin_export(self, client: AsyncClient, db, normal_user, admin_token):
        await _seed(db, normal_user)

        res = await client.get(EXPORT, headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.headers["content-type"].startswith(
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
        wb = load_workbook(BytesIO(res.content))
        assert wb.sheetnames == ["Observaciones", "Resumen"]
        # 헤더 1행 + 관찰 3행
        assert wb["Observaciones"].max_row == 4

    async def test_user_forbidden(self, client: AsyncClient, user_token):
        res = await client.get(EXPORT, headers=auth_header(user_token))
        assert res.status_code == 403
