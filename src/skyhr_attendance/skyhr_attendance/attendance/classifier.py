from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..core.constants import (
    DEFAULT_EARLY_TOLERANCE_MINUTES,
    DEFAULT_LATE_GRACE_MINUTES,
    MAX_LATE_GRACE_MINUTES,
)
from ..organizations.model import Organization
from ..organizations.repository import OrganizationRepository
from ..schedules.service import ShiftLookup
from .factory import AttendanceStrategyFactory
from .strategies.base import StatusDecision

logger = logging.getLogger(__name__)


class AttendanceStatusClassifier:
    """Timing status of a check-in: ``on_time``, ``late`` or ``early``.

    Never produces ``absent`` (batch sweep only) or ``out_of_bounds``
    (geofence override applied by the check-in flow).
    """

    def __init__(
        self,
        shift_lookup: ShiftLookup,
        organizations: OrganizationRepository,
        *,
        strategy_factory: Optional[AttendanceStrategyFactory] = None,
        default_grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES,
        default_early_tolerance_minutes: int = DEFAULT_EARLY_TOLERANCE_MINUTES,
    ):
        self._shift_lookup = shift_lookup
        self._organizations = organizations
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._default_grace = int(default_grace_minutes)
        self._default_early_tolerance = int(default_early_tolerance_minutes)

    def grace_minutes(self, org: Optional[Organization]) -> int:
        grace = self._default_grace if org is None or org.late_grace_minutes is None else int(org.late_grace_minutes)
        if not 0 <= grace <= MAX_LATE_GRACE_MINUTES:
            clamped = min(max(grace, 0), MAX_LATE_GRACE_MINUTES)
            logger.warning(
                "Grace period %s min out of range for organization %s; using %s",
                grace,
                org.organization_id if org else None,
                clamped,
            )
            grace = clamped
        return grace

    def early_tolerance_minutes(self, org: Optional[Organization]) -> int:
        if org is None or org.early_tolerance_minutes is None:
            return self._default_early_tolerance
        return max(0, int(org.early_tolerance_minutes))

    def classify(self, check_in_time: datetime, user_id: str, organization_id: str) -> StatusDecision:
        org = self._organizations.get_by_id(organization_id)
        # A check-in after midnight may still belong to last night's shift.
        work_date, shift = self._shift_lookup.shift_at(
            user_id=user_id, organization_id=organization_id, at=check_in_time
        )

        grace = self.grace_minutes(org)
        tolerance = self.early_tolerance_minutes(org)
        strategy = self._factory.for_checkin(
            now=check_in_time,
            today=work_date,
            shift=shift,
            grace_minutes=grace,
            early_tolerance_minutes=tolerance,
        )
        return strategy.decide_checkin(now=check_in_time, today=work_date, shift=shift)
