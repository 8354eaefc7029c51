from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Schedule:
    schedule_id: int
    organization_id: str
    user_id: str
    work_date: date
    shift_id: int
    note: Optional[str] = None
