"""Period and per-truck roll-ups of trip figures for dashboards and charts."""
import calendar
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_FLOOR

from .calculations import ZERO, as_decimal

# Quick date-range presets offered on the analytics page (months back, label).
QUICK_RANGES = [
    (1, '1 Month'),
    (3, '3 Months'),
    (6, '6 Months'),
    (12, '1 Year'),
    (24, '2 Years'),
    (36, '3 Years'),
    (48, '4 Years'),
    (60, '5 Years'),
]
DEFAULT_RANGE_MONTHS = 12
HALF = Decimal('0.5')


@dataclass
class MonthlyFinancialSummary:
    month: str
    revenue: Decimal
    expenses: Decimal
    profit: Decimal
    first_date: date
    margin: int = 0


@dataclass
class PeriodTotals:
    revenue: Decimal
    expenses: Decimal
    profit: Decimal
    margin: int


@dataclass
class TruckSummary:
    truck_number: str
    truck_name: str
    driver_name: str
    trip_count: int
    revenue: Decimal
    expenses: Decimal
    profit: Decimal
    latest_trip: object = None


def months_ago(day, months):
    """Same calendar day `months` earlier, clamped to the end of short months."""
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def month_label(day):
    return day.strftime('%b %Y')


def filter_by_range(trips, start=None, end=None):
    """Trips whose start_date lies within [start, end]; None leaves a side open."""
    selected = []
    for trip in trips:
        if start is not None and trip.start_date < start:
            continue
        if end is not None and trip.start_date > end:
            continue
        selected.append(trip)
    return selected


def bucket_by_month(trips):
    buckets = {}
    for trip in sorted(trips, key=lambda t: t.start_date):
        key = (trip.start_date.year, trip.start_date.month)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = MonthlyFinancialSummary(
                month=month_label(trip.start_date),
                revenue=ZERO,
                expenses=ZERO,
                profit=ZERO,
                first_date=trip.start_date,
            )
            buckets[key] = bucket
        bucket.revenue += as_decimal(trip.rent)
        bucket.expenses += as_decimal(trip.total_expenses)
        bucket.profit += as_decimal(trip.profit_loss)

    for bucket in buckets.values():
        bucket.margin = profit_margin(bucket.profit, bucket.revenue)
    return sorted(buckets.values(), key=lambda b: b.first_date)


def monthly_summary(trips, start=None, end=None):
    return bucket_by_month(filter_by_range(trips, start, end))


def profit_margin(profit, revenue):
    """Whole-number profit percentage of revenue; 0 when there is no revenue."""
    revenue = as_decimal(revenue)
    if revenue <= 0:
        return 0
    ratio = as_decimal(profit) / revenue * 100
    # Halves round toward +infinity: 12.5 -> 13, -12.5 -> -12.
    return int((ratio + HALF).to_integral_value(rounding=ROUND_FLOOR))


def period_totals(summaries):
    revenue = sum((s.revenue for s in summaries), ZERO)
    expenses = sum((s.expenses for s in summaries), ZERO)
    profit = sum((s.profit for s in summaries), ZERO)
    return PeriodTotals(
        revenue=revenue,
        expenses=expenses,
        profit=profit,
        margin=profit_margin(profit, revenue),
    )


def truck_summaries(trips):
    """One summary per truck number; latest_trip is the most recent by start date."""
    summaries = {}
    for trip in trips:
        summary = summaries.get(trip.truck_number)
        if summary is None:
            summary = TruckSummary(
                truck_number=trip.truck_number,
                truck_name=trip.truck_name,
                driver_name=trip.driver1_name,
                trip_count=0,
                revenue=ZERO,
                expenses=ZERO,
                profit=ZERO,
            )
            summaries[trip.truck_number] = summary

        summary.trip_count += 1
        summary.revenue += as_decimal(trip.rent)
        summary.expenses += as_decimal(trip.total_expenses)
        summary.profit += as_decimal(trip.profit_loss)

        latest = summary.latest_trip
        if latest is None or trip.start_date > latest.start_date:
            summary.latest_trip = trip
            summary.truck_name = trip.truck_name
            summary.driver_name = trip.driver1_name

    return [summaries[number] for number in sorted(summaries)]
