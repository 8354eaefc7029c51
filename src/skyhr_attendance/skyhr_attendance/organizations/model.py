from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import DEFAULT_EARLY_TOLERANCE_MINUTES, DEFAULT_LATE_GRACE_MINUTES


@dataclass(frozen=True)
class Organization:
    organization_id: str
    name: str
    rekognition_collection_id: Optional[str] = None
    late_grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES
    early_tolerance_minutes: int = DEFAULT_EARLY_TOLERANCE_MINUTES
