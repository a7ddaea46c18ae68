# api/app/schemas/stats.py
from pydantic import BaseModel

from app.schemas.attendance import AttendanceSummaryOut


class TierCountOut(BaseModel):
    count: int
    percentage: float


class DashboardStatsOut(BaseModel):
    total_santri: int
    total_halaqah: int
    avg_score: float
    mutqin: TierCountOut
    mutawassith: TierCountOut
    dhaif: TierCountOut
    attendance: AttendanceSummaryOut
