"""Google Sheets 미러 테스트 — 행 구성, 비활성/실패 시 조용히 무시."""

from datetime import datetime, timezone

import pytest

from observations.config import settings
from observations.services.sheets_mirror_service import ROW_FIELDS, build_row, sheets_mirror_service

SNAPSHOT = {
    "id": "obs-1",
    "state": "pending",
    "responsible_name": "Bruno Operador",
    "area": "Chancado",
    "description": "Guarda suelta",
    "closed_at": None,
}


@pytest.fixture
def configured(monkeypatch):
    monkeypatch.setattr(settings, "GOOGLE_SA_KEY_PATH", "/tmp/sa.json")
    monkeypatch.setattr(settings, "GOOGLE_SHEETS_ID", "sheet-id")
    monkeypatch.setattr(settings, "GOOGLE_SHEETS_TAB", "Observaciones")


class TestBuildRow:

    def test_layout(self):
        now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        row = build_row("create", SNAPSHOT, now)
        assert len(row) == 2 + len(ROW_FIELDS)
        assert row[:4] == [now.isoformat(), "create", "obs-1", "pending"]
        assert row[2 + ROW_FIELDS.index("closed_at")] == ""
        assert row[2 + ROW_FIELDS.index("equipment_or_location")] == ""


class TestNotify:

    async def test_disabled_does_nothing(self, monkeypatch):
        monkeypatch.setattr(settings, "GOOGLE_SHEETS_ID", "")
        calls: list = []
        monkeypatch.setattr(sheets_mirror_service, "_append_row", calls.append)

        await sheets_mirror_service.notify("create", SNAPSHOT)
        assert calls == []

    async def test_unknown_action_ignored(self, configured, monkeypatch):
        calls: list = []
        monkeypatch.setattr(sheets_mirror_service, "_append_row", calls.append)

        await sheets_mirror_service.notify("delete", SNAPSHOT)
        assert calls == []

    async def test_appends_row(self, configured, monkeypatch):
        calls: list = []
        monkeypatch.setattr(sheets_mirror_service, "_append_row", calls.append)

        await sheets_mirror_service.notify("close", SNAPSHOT)
        assert len(calls) == 1
        assert calls[0][1] == "close"
        assert calls[0][2] == "obs-1"

    async def test_failure_is_swallowed(self, configured, monkeypatch):
        def _boom(row):
            raise RuntimeError("sheets unavailable")

        monkeypatch.setattr(sheets_mirror_service, "_append_row", _boom)
        # 예외가 전파되지 않아야 함
        await sheets_mirror_service.notify("edit", SNAPSHOT)
