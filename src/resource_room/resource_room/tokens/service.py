from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import day_start, now_local
from ..common.validators import require_int
from ..core.exceptions import InsufficientTokens, InvalidAmount, InvalidPurchase, NotFound, PersistenceError, ValidationError
from ..students.repository import StudentRepository
from .model import BonusResult, PurchaseResult

logger = logging.getLogger(__name__)


class TokenService:
    """Bonus awards and store purchases.

    Balances only move through ``StudentRepository.adjust_tokens`` and
    ``record_purchase``, both single atomic statements at the storage layer,
    so concurrent requests for one student never lose an update.
    """

    def __init__(self, students: StudentRepository, attendance: AttendanceRepository):
        self._students = students
        self._attendance = attendance

    def award_bonus(
        self,
        *,
        teacher_id: int,
        student_id: int,
        amount: object,
        reason: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> BonusResult:
        try:
            amount = require_int(amount, "amount", minimum=1)
        except ValidationError:
            raise InvalidAmount("Invalid token amount") from None
        today = day_start(now or now_local())

        total = self._students.adjust_tokens(student_id=int(student_id), teacher_id=int(teacher_id), delta=amount)
        if total is None:
            raise NotFound("Student not found")

        # Audit only: a bonus never creates a session or marks attendance.
        # The balance is already committed at this point.
        try:
            self._attendance.add_tokens(
                student_id=int(student_id), teacher_id=int(teacher_id), session_date=today, amount=amount
            )
        except PersistenceError:
            logger.warning(
                "Bonus +%d for student %s committed but not added to the %s session",
                amount,
                student_id,
                today,
                exc_info=True,
            )

        reason = reason.strip() if isinstance(reason, str) and reason.strip() else None
        logger.info("Bonus +%d for student %s (%s) -> %d", amount, student_id, reason or "no reason", total)
        return BonusResult(tokens_awarded=amount, total_tokens=total, reason=reason)

    def purchase(
        self,
        *,
        teacher_id: int,
        student_id: int,
        item: Optional[str],
        cost: object,
        now: Optional[datetime] = None,
    ) -> PurchaseResult:
        if not isinstance(item, str) or not item.strip():
            raise InvalidPurchase("Invalid purchase data")
        try:
            cost = require_int(cost, "cost", minimum=1)
        except ValidationError:
            raise InvalidPurchase("Invalid purchase data") from None
        item = item.strip()
        now = now or now_local()

        student = self._students.get_active(student_id=int(student_id), teacher_id=int(teacher_id))
        if not student:
            raise NotFound("Student not found")

        remaining = self._students.record_purchase(
            student_id=student.student_id,
            teacher_id=int(teacher_id),
            item=item,
            cost=cost,
            purchased_at=now,
        )
        if remaining is None:
            raise InsufficientTokens("Student does not have enough tokens for this purchase")

        logger.info("Student %s bought %r for %d (remaining=%d)", student_id, item, cost, remaining)
        return PurchaseResult(item=item, cost=cost, remaining_tokens=remaining, purchased_at=now)
