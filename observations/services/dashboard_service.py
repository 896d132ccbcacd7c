"""대시보드 서비스 — 관찰 통계 요약 및 Excel 내보내기.

Dashboard service — Summary statistics and the Excel export.
Loads one snapshot of observations per request and runs the pure
aggregation functions over it; nothing is aggregated in SQL.
"""

from datetime import date
from io import BytesIO
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from sqlalchemy.ext.asyncio import AsyncSession

from observations.services import aggregation_service
from observations.services.aggregation_service import ObservationFilter
from observations.services.observation_service import observation_service
from observations.utils.dates import ensure_aware, local_today, site_timezone
from observations.utils.exceptions import ValidationError
from observations.utils.labels import display_label
from observations.utils.urgency import classify, tally_urgency

_STATE_LABELS: dict[str, str] = {"pending": "Pendiente", "closed": "Cerrada"}
_SEVERITY_LABELS: dict[str, str] = {"low": "Bajo", "medium": "Medio", "high": "Alto"}


def _local_text(value: Any) -> str:
    if value is None:
        return ""
    return ensure_aware(value).astimezone(site_timezone()).strftime("%Y-%m-%d %H:%M")


class DashboardService:

    async def _filtered(self, db: AsyncSession, criteria: ObservationFilter) -> list:
        if criteria.status not in aggregation_service.STATUSES:
            raise ValidationError("status", "status must be one of all, pending, closed")
        snapshot = await observation_service.list_all(db)
        return aggregation_service.filter_observations(snapshot, criteria)

    async def get_summary(
        self,
        db: AsyncSession,
        criteria: ObservationFilter,
        interval: str = "month",
        top: int = 5,
        today: date | None = None,
    ) -> dict:
        """대시보드 요약 — 합계, 위험도, 신호등, 상위 구역/책임자, 시계열.

        Dashboard summary over the filtered snapshot.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            criteria: 필터 조건 (Filter criteria)
            interval: 시계열 단위 "day" | "week" | "month"
            top: 상위 항목 수 (Entries per ranking)
            today: 신호등 기준일 (Reference day for urgency)

        Returns:
            dict: totals, severity, pending_severity, urgency, top_areas,
                top_responsibles, series
        """
        if interval not in aggregation_service.INTERVALS:
            raise ValidationError("interval", "interval must be one of day, week, month")

        items = await self._filtered(db, criteria)
        pending = [obs for obs in items if obs.state == "pending"]
        closed = [obs for obs in items if obs.state == "closed"]

        return {
            "totals": {"total": len(items), "pending": len(pending), "closed": len(closed)},
            "severity": aggregation_service.severity_tally(items),
            "pending_severity": aggregation_service.severity_tally(pending),
            "urgency": tally_urgency(pending, today),
            "top_areas": aggregation_service.ranked_labels(pending, "area", top),
            "top_responsibles": aggregation_service.ranked_labels(pending, "responsible_name", top),
            "interval": interval,
            "series": aggregation_service.created_closed_series(items, interval),
        }

    async def export_excel(
        self,
        db: AsyncSession,
        criteria: ObservationFilter,
        today: date | None = None,
    ) -> bytes:
        """필터된 관찰 목록을 Excel 파일로 내보내기."""
        items = await self._filtered(db, criteria)
        reference_day = today or local_today()

        wb = Workbook()
        header_font = Font(bold=True, color="FFFFFF", size=11)
        header_fill = PatternFill(start_color="2D3436", end_color="2D3436", fill_type="solid")

        def style_headers(ws, headers: list[str]) -> None:
            for col_idx, h in enumerate(headers, 1):
                cell = ws.cell(row=1, column=col_idx, value=h)
                cell.font = header_font
                cell.fill = header_fill
                cell.alignment = Alignment(horizontal="center")

        def set_widths(ws, widths: list[int]) -> None:
            for i, w in enumerate(widths, 1):
                ws.column_dimensions[ws.cell(row=1, column=i).column_letter].width = w

        # --- Sheet 1: 관찰 목록 ---
        ws1 = wb.active
        ws1.title = "Observaciones"
        style_headers(ws1, [
            "ID", "Estado", "Semáforo", "Área", "Equipo/Lugar", "Categoría", "Plazo",
            "Descripción", "Responsable", "Creado por", "Creado en",
            "Cerrado por", "Cerrado en", "Cierre",
        ])
        for obs in items:
            urgency = classify(obs.created_at, obs.due_date, reference_day).label if obs.state == "pending" else ""
            ws1.append([
                str(obs.id),
                _STATE_LABELS.get(obs.state, obs.state),
                urgency,
                display_label(obs.area),
                obs.equipment_or_location,
                _SEVERITY_LABELS.get(obs.severity, obs.severity),
                obs.due_date,
                obs.description,
                obs.responsible_name,
                obs.created_by,
                _local_text(obs.created_at),
                obs.closed_by or "",
                _local_text(obs.closed_at),
                obs.closure_description or "",
            ])
        set_widths(ws1, [38, 12, 12, 18, 24, 12, 12, 50, 22, 28, 18, 28, 18, 50])

        # --- Sheet 2: 요약 ---
        ws2 = wb.create_sheet("Resumen")
        style_headers(ws2, ["Indicador", "Valor"])
        pending = [obs for obs in items if obs.state == "pending"]
        ws2.append(["Total", len(items)])
        ws2.append(["Pendientes", len(pending)])
        ws2.append(["Cerradas", len(items) - len(pending)])
        for severity, count in aggregation_service.severity_tally(items).items():
            ws2.append([f"Categoría {_SEVERITY_LABELS[severity]}", count])
        for level, count in tally_urgency(pending, reference_day).items():
            ws2.append([f"Semáforo {level}", count])
        areas = aggregation_service.ranked_labels(pending, "area", 5)
        for entry in areas["items"]:
            ws2.append([f"Pendientes en {entry['label']}", entry["count"]])
        if areas["remainder"]:
            ws2.append(["Pendientes en otras áreas", areas["remainder"]])
        set_widths(ws2, [36, 12])

        buffer = BytesIO()
        wb.save(buffer)
        return buffer.getvalue()


# 싱글턴 인스턴스
dashboard_service: DashboardService = DashboardService()
