from datetime import date, time
from decimal import Decimal

import pytest

from trips.models import DieselEntry, Trip


def trip_form_data(**overrides):
    """POST data for the trip wizard; the diesel rows use the 'diesel_entries' prefix."""
    data = {
        'truck_name': 'Tata Prima',
        'truck_number': 'TN01AB1234',
        'driver1_name': 'Murugan',
        'driver2_name': '',
        'trip_number': 'T-001',
        'start_date': '2024-10-05',
        'loading_point': 'Chennai',
        'starting_km': '10000',
        'eway_bill': '',
        'lr_number': '',
        'unloading_point': 'Bengaluru',
        'unloading_date': '2024-10-07',
        'closing_km': '10350',
        'loading_halt_cost': '1500',
        'unloading_halt_cost': '1200',
        'rent': '25000',
        'driver_bata_type': 'percentage',
        'driver_bata_percent': '10',
        'driver_bata_fixed': '',
        'agent_name': 'Ravi',
        'agent_mobile': '9876543210',
        'agent_commission_type': 'fixed',
        'agent_commission_percent': '',
        'agent_commission_fixed': '1250',
        'fastag_charges': '1000',
        'def_charges': '500',
        'rto_charges': '800',
        'other_expenses_text': 'Tarpaulin',
        'other_expenses_amount': '1500',
        'police_commission': '300',
    }
    data.update(diesel_form_data([
        ('2024-10-05', '08:30', 'Chennai', '120', '90.50'),
        ('2024-10-06', '14:00', 'Krishnagiri', '80', '91.20'),
    ]))
    data.update(overrides)
    return data


def diesel_form_data(rows, deleted=(), prefix='diesel_entries'):
    data = {
        f'{prefix}-TOTAL_FORMS': str(len(rows)),
        f'{prefix}-INITIAL_FORMS': '0',
        f'{prefix}-MIN_NUM_FORMS': '1',
        f'{prefix}-MAX_NUM_FORMS': '1000',
    }
    for index, (day, at, location, litres, price) in enumerate(rows):
        data[f'{prefix}-{index}-date'] = day
        data[f'{prefix}-{index}-time'] = at
        data[f'{prefix}-{index}-location'] = location
        data[f'{prefix}-{index}-litres_purchased'] = litres
        data[f'{prefix}-{index}-price_per_litre'] = price
        if index in deleted:
            data[f'{prefix}-{index}-DELETE'] = 'on'
    return data


@pytest.fixture
def make_trip(db):
    """Creates a saved Trip; keyword arguments override the defaults."""
    def _make_trip(**overrides):
        fields = {
            'trip_number': 'T-001',
            'truck_name': 'Tata Prima',
            'truck_number': 'TN01AB1234',
            'driver1_name': 'Murugan',
            'loading_point': 'Chennai',
            'unloading_point': 'Bengaluru',
            'start_date': date(2024, 10, 5),
            'unloading_date': date(2024, 10, 7),
            'starting_km': 10000,
            'closing_km': 10350,
            'rent': Decimal('25000'),
            'loading_halt_cost': Decimal('1500'),
            'unloading_halt_cost': Decimal('1200'),
            'driver_bata_type': 'percentage',
            'driver_bata_percent': Decimal('10'),
            'agent_commission_type': 'fixed',
            'agent_commission_fixed': Decimal('1250'),
            'fastag_charges': Decimal('1000'),
            'def_charges': Decimal('500'),
            'rto_charges': Decimal('800'),
            'other_expenses_amount': Decimal('1500'),
            'police_commission': Decimal('300'),
        }
        fields.update(overrides)
        return Trip.objects.create(**fields)
    return _make_trip


def scenario_entries():
    return [
        DieselEntry(date=date(2024, 10, 5), time=time(8, 30), location='Chennai',
                    litres_purchased=Decimal('120'), price_per_litre=Decimal('90.50')),
        DieselEntry(date=date(2024, 10, 6), time=time(14, 0), location='Krishnagiri',
                    litres_purchased=Decimal('80'), price_per_litre=Decimal('91.20')),
    ]
