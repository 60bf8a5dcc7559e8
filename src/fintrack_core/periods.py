"""Calendar windows for period aggregation and budget tracking.

Windows are inclusive on both ends and day-granular. Month arithmetic
goes through ``relativedelta`` so that, for example, one month before
March 31 is February 28/29 rather than an invalid date.
"""

import calendar
from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta

from .models.records import Budget, BudgetPeriod
from .models.results import DateWindow, ReportPeriod


def month_window(day: date) -> DateWindow:
    """The calendar month containing ``day``."""
    last = calendar.monthrange(day.year, day.month)[1]
    return DateWindow(start=day.replace(day=1), end=day.replace(day=last))


def year_window(day: date) -> DateWindow:
    """The calendar year containing ``day``."""
    return DateWindow(start=date(day.year, 1, 1), end=date(day.year, 12, 31))


def period_window(period: ReportPeriod, as_of: date) -> DateWindow:
    """The month or year containing ``as_of``."""
    if ReportPeriod(period) == ReportPeriod.MONTH:
        return month_window(as_of)
    return year_window(as_of)


def previous_period_window(period: ReportPeriod, as_of: date) -> DateWindow:
    """The calendar month or year before the one containing ``as_of``."""
    if ReportPeriod(period) == ReportPeriod.MONTH:
        return month_window(as_of - relativedelta(months=1))
    return year_window(as_of - relativedelta(years=1))


def shift_months(day: date, months: int) -> date:
    """Move ``day`` by whole months, clamping to the end of short months."""
    return day + relativedelta(months=months)


def trailing_months_window(as_of: date, months: int) -> DateWindow:
    """From the same day ``months`` months ago through ``as_of``."""
    return DateWindow(start=shift_months(as_of, -months), end=as_of)


def month_key(day: date) -> str:
    """``YYYY-MM`` grouping key for a day."""
    return f"{day.year:04d}-{day.month:02d}"


def month_label(day: date) -> str:
    """Short display label such as ``Apr 2025``."""
    return f"{calendar.month_abbr[day.month]} {day.year}"


def resolve_budget_window(budget: Budget, as_of: Optional[date] = None) -> DateWindow:
    """The inclusive window a budget covers.

    An explicit end date wins. Otherwise a monthly budget ends with its
    start month and a yearly budget ends with its start year. ``as_of`` is
    accepted so every consumer calls this the same way; the window itself
    does not move with it.
    """
    if budget.end_date is not None:
        return DateWindow(start=budget.start_date, end=budget.end_date)
    if budget.period == BudgetPeriod.MONTHLY:
        end = month_window(budget.start_date).end
    else:
        end = year_window(budget.start_date).end
    return DateWindow(start=budget.start_date, end=end)


def is_budget_active(budget: Budget, as_of: date) -> bool:
    """Active means flagged active and covering the evaluation day."""
    return budget.is_active and resolve_budget_window(budget, as_of).contains(as_of)
