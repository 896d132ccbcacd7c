"""Google Sheets 보고용 미러 서비스.

Reporting mirror — Appends one row per lifecycle transition to a Google
Sheet. Best effort only: it runs as a background task after the primary
write has committed, and every failure is logged and swallowed so a
spreadsheet outage never blocks or rolls back a create/edit/close.

Row layout (one column each):
    timestamp, action, id, state, responsible, area, equipment_or_location,
    severity, due_date, description, created_by, created_at, closed_by,
    closed_at, closure_description
"""

import asyncio
from datetime import datetime, timezone
from typing import Any

import structlog

from observations.config import settings

log = structlog.get_logger()

ACTIONS: tuple[str, ...] = ("create", "edit", "close")
SHEETS_SCOPE: str = "https://www.googleapis.com/auth/spreadsheets"

ROW_FIELDS: tuple[str, ...] = (
    "id",
    "state",
    "responsible_name",
    "area",
    "equipment_or_location",
    "severity",
    "due_date",
    "description",
    "created_by",
    "created_at",
    "closed_by",
    "closed_at",
    "closure_description",
)


def build_row(action: str, snapshot: dict[str, Any], now: datetime | None = None) -> list[str]:
    """시트에 추가할 한 행 — 누락 값은 빈 문자열."""
    stamp = (now or datetime.now(timezone.utc)).isoformat()
    row = [stamp, action]
    for name in ROW_FIELDS:
        value = snapshot.get(name)
        row.append("" if value is None else str(value))
    return row


class SheetsMirrorService:
    """Google Sheets append 클라이언트 (지연 생성)."""

    def __init__(self) -> None:
        self._service = None

    @property
    def is_configured(self) -> bool:
        return bool(settings.GOOGLE_SA_KEY_PATH and settings.GOOGLE_SHEETS_ID and settings.GOOGLE_SHEETS_TAB)

    @property
    def service(self):
        if self._service is None:
            from google.oauth2 import service_account
            from googleapiclient.discovery import build

            credentials = service_account.Credentials.from_service_account_file(
                settings.GOOGLE_SA_KEY_PATH, scopes=[SHEETS_SCOPE]
            )
            self._service = build("sheets", "v4", credentials=credentials, cache_discovery=False)
        return self._service

    def _append_row(self, row: list[str]) -> None:
        self.service.spreadsheets().values().append(
            spreadsheetId=settings.GOOGLE_SHEETS_ID,
            range=settings.GOOGLE_SHEETS_TAB,
            valueInputOption="RAW",
            insertDataOption="INSERT_ROWS",
            body={"values": [row]},
        ).execute()

    async def notify(self, action: str, snapshot: dict[str, Any]) -> None:
        """전이 1건을 시트에 기록합니다. 절대 예외를 던지지 않습니다.

        Append one row for a transition. Never raises.

        Args:
            action: "create" | "edit" | "close"
            snapshot: 관찰 스냅샷 (Flat observation snapshot)
        """
        observation_id = snapshot.get("id")
        if action not in ACTIONS:
            log.warning("sheets_mirror_unknown_action", action=action, observation_id=observation_id)
            return
        if not self.is_configured:
            log.debug("sheets_mirror_disabled", action=action, observation_id=observation_id)
            return

        row = build_row(action, snapshot)
        try:
            await asyncio.to_thread(self._append_row, row)
        except Exception:
            log.exception("sheets_mirror_failed", action=action, observation_id=observation_id)
            return
        log.info("sheets_mirror_appended", action=action, observation_id=observation_id)


sheets_mirror_service: SheetsMirrorService = SheetsMirrorService()
