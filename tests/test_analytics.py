from datetime import date
from decimal import Decimal
from types import SimpleNamespace

from trips.analytics import (
    filter_by_range, month_label, monthly_summary, months_ago, period_totals,
    profit_margin, truck_summaries,
)


def trip(start, rent, profit, truck='TN01AB1234', name='Tata Prima', driver='Murugan'):
    rent = Decimal(rent)
    profit = Decimal(profit)
    return SimpleNamespace(
        start_date=start,
        rent=rent,
        total_expenses=rent - profit,
        profit_loss=profit,
        truck_number=truck,
        truck_name=name,
        driver1_name=driver,
    )


def test_same_month_trips_share_one_bucket():
    trips = [trip(date(2024, 10, 5), '10000', '2500'), trip(date(2024, 10, 20), '12000', '3200')]

    summaries = monthly_summary(trips)

    assert len(summaries) == 1
    assert summaries[0].month == 'Oct 2024'
    assert summaries[0].revenue == Decimal('22000')
    assert summaries[0].profit == Decimal('5700')
    assert summaries[0].expenses == Decimal('16300')


def test_no_trips_no_buckets():
    assert monthly_summary([]) == []
    totals = period_totals([])
    assert totals.revenue == 0
    assert totals.margin == 0


def test_buckets_are_chronological():
    trips = [
        trip(date(2024, 3, 1), '1000', '100'),
        trip(date(2023, 12, 31), '1000', '100'),
        trip(date(2024, 1, 15), '1000', '100'),
    ]

    labels = [s.month for s in monthly_summary(trips)]

    assert labels == ['Dec 2023', 'Jan 2024', 'Mar 2024']


def test_range_bounds_are_inclusive():
    trips = [
        trip(date(2024, 1, 1), '1000', '100'),
        trip(date(2024, 1, 31), '2000', '200'),
        trip(date(2024, 2, 1), '4000', '400'),
    ]

    selected = filter_by_range(trips, date(2024, 1, 1), date(2024, 1, 31))

    assert [t.rent for t in selected] == [Decimal('1000'), Decimal('2000')]
    assert len(filter_by_range(trips)) == 3


def test_loss_making_month():
    summaries = monthly_summary([trip(date(2024, 10, 5), '25000', '-3706')])
    assert summaries[0].profit == Decimal('-3706')


def test_period_totals_and_margin():
    summaries = monthly_summary([
        trip(date(2024, 9, 5), '10000', '2500'),
        trip(date(2024, 10, 20), '12000', '3200'),
    ])

    totals = period_totals(summaries)

    assert totals.revenue == Decimal('22000')
    assert totals.profit == Decimal('5700')
    assert totals.margin == 26


def test_profit_margin_edges():
    assert profit_margin(Decimal('100'), Decimal('0')) == 0
    assert profit_margin(Decimal('-3706'), Decimal('25000')) == -15
    assert profit_margin(Decimal('1'), Decimal('200')) == 1


def test_truck_summaries_group_by_truck_number():
    trips = [
        trip(date(2024, 1, 5), '10000', '1000', truck='KA05XY0001', name='Ashok Leyland', driver='Ravi'),
        trip(date(2024, 2, 5), '20000', '-500', truck='KA05XY0001', name='Ashok Leyland', driver='Kumar'),
        trip(date(2024, 1, 20), '5000', '700'),
    ]

    summaries = truck_summaries(trips)

    assert [s.truck_number for s in summaries] == ['KA05XY0001', 'TN01AB1234']
    ka = summaries[0]
    assert ka.trip_count == 2
    assert ka.revenue == Decimal('30000')
    assert ka.profit == Decimal('500')
    assert ka.driver_name == 'Kumar'
    assert ka.latest_trip.start_date == date(2024, 2, 5)


def test_months_ago_clamps_short_months():
    assert months_ago(date(2024, 3, 31), 1) == date(2024, 2, 29)
    assert months_ago(date(2024, 1, 15), 1) == date(2023, 12, 15)
    assert months_ago(date(2024, 10, 19), 12) == date(2023, 10, 19)


def test_month_label():
    assert month_label(date(2024, 10, 5)) == 'Oct 2024'


def test_each_month_carries_its_margin():
    summaries = monthly_summary([
        trip(date(2024, 9, 5), '10000', '2500'),
        trip(date(2024, 10, 20), '12000', '-600'),
        trip(date(2024, 11, 2), '0', '-500'),
    ])

    assert [s.margin for s in summaries] == [25, -5, 0]


def test_margin_halves_round_up():
    assert profit_margin(Decimal('125'), Decimal('1000')) == 13
    assert profit_margin(Decimal('-125'), Decimal('1000')) == -12
    assert profit_margin(Decimal('-126'), Decimal('1000')) == -13
