"""
Budget period windows.

A budget's `spent` only counts transactions inside the budget's current
window. Which dates make up "the current window" is policy, not data:
period_window() is the default calendar policy (today / this week / this
calendar month), and callers may substitute their own.
"""

import calendar
from datetime import date, datetime, timedelta
from typing import Callable, Union

from pydantic import BaseModel, model_validator

from fintrack.models.entities import BudgetPeriod


class DateRange(BaseModel):
    """An inclusive range of calendar dates."""

    start: date
    end: date

    @model_validator(mode='after')
    def validate_order(self) -> 'DateRange':
        if self.end < self.start:
            raise ValueError("Date range end cannot be before start")
        return self

    def contains(self, value: Union[date, datetime]) -> bool:
        """True if the calendar date of value falls inside the range."""
        day = value.date() if isinstance(value, datetime) else value
        return self.start <= day <= self.end


WindowProvider = Callable[[BudgetPeriod, Union[date, datetime]], DateRange]


def period_window(
    period: BudgetPeriod,
    reference: Union[date, datetime],
    week_start: int = 0,
) -> DateRange:
    """
    The calendar window of `period` that contains `reference`.

    Args:
        period: Budget period
        reference: Any moment inside the wanted window
        week_start: First weekday of a weekly window (0 = Monday ... 6 = Sunday)
    """
    day = reference.date() if isinstance(reference, datetime) else reference

    if period == BudgetPeriod.DAILY:
        return DateRange(start=day, end=day)

    if period == BudgetPeriod.WEEKLY:
        start = day - timedelta(days=(day.weekday() - week_start) % 7)
        return DateRange(start=start, end=start + timedelta(days=6))

    if period == BudgetPeriod.MONTHLY:
        last_day = calendar.monthrange(day.year, day.month)[1]
        return DateRange(start=day.replace(day=1), end=day.replace(day=last_day))

    raise ValueError(f"Unknown budget period: {period}")


def calendar_window_provider(week_start: int = 0) -> WindowProvider:
    """Bind week_start into a provider flows can call with (period, reference)."""
    def provider(period: BudgetPeriod, reference: Union[date, datetime]) -> DateRange:
        return period_window(period, reference, week_start=week_start)
    return provider
