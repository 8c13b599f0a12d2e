from datetime import date
from decimal import Decimal

import pytest
from django.db import DatabaseError
from django.urls import reverse

from trips.models import DieselEntry, Trip
from tests.conftest import scenario_entries, trip_form_data

pytestmark = pytest.mark.django_db


def test_dashboard_lists_trips(client, make_trip):
    make_trip(trip_number='T-100')

    response = client.get(reverse('dashboard'))

    assert response.status_code == 200
    assert b'T-100' in response.content
    assert response.context['total_revenue'] == Decimal('25000')
    assert b'Trips</small><strong>1</strong>' in response.content


def test_dashboard_empty(client):
    response = client.get(reverse('dashboard'))
    assert b'No trips recorded yet' in response.content


def test_create_form_renders(client):
    response = client.get(reverse('trip_create'))
    assert response.status_code == 200
    assert b'diesel_entries-TOTAL_FORMS' in response.content


def test_create_trip(client):
    response = client.post(reverse('trip_create'), trip_form_data(), follow=True)

    trip = Trip.objects.get()
    assert response.redirect_chain[-1][0] == reverse('trip_detail', args=[trip.pk])
    assert 'T-001 has been added.' in response.content.decode()
    assert trip.diesel_entries.count() == 2
    assert trip.total_expenses == Decimal('28706')
    assert trip.profit_loss == Decimal('-3706')


def test_create_with_errors_rerenders(client):
    response = client.post(reverse('trip_create'), trip_form_data(closing_km='9000'))

    assert response.status_code == 200
    assert Trip.objects.count() == 0
    assert 'Closing KM must be greater than or equal to Starting KM' in response.content.decode()


def test_create_storage_failure_is_reported(client, monkeypatch):
    def fail(self, entries):
        raise DatabaseError("disk full")

    monkeypatch.setattr(Trip, 'replace_diesel_entries', fail)

    response = client.post(reverse('trip_create'), trip_form_data())

    assert response.status_code == 200
    assert 'Failed to add trip: disk full' in response.content.decode()
    assert Trip.objects.count() == 0


def test_update_replaces_diesel_entries(client, make_trip):
    trip = make_trip()
    trip.replace_diesel_entries(scenario_entries())

    data = trip_form_data(rent='30000')
    data['diesel_entries-1-DELETE'] = 'on'
    response = client.post(reverse('trip_update', args=[trip.pk]), data, follow=True)

    trip.refresh_from_db()
    assert 'T-001 has been updated.' in response.content.decode()
    assert trip.diesel_entries.count() == 1
    assert trip.diesel_cost == Decimal('10860')
    assert trip.profit_loss == Decimal('30000') - trip.total_expenses


def test_update_form_prefills_diesel_rows(client, make_trip):
    trip = make_trip()
    trip.replace_diesel_entries(scenario_entries())

    response = client.get(reverse('trip_update', args=[trip.pk]))

    assert response.context['formset'].total_form_count() == 2
    assert b'Krishnagiri' in response.content


def test_preview_returns_figures_and_step_errors(client):
    response = client.post(reverse('trip_preview'), trip_form_data(truck_name='', step='1'))

    payload = response.json()
    assert payload['success'] is True
    assert payload['step_valid'] is False
    assert list(payload['errors']) == ['truck_name']
    assert Decimal(payload['figures']['total_expenses']) == Decimal('28706')
    assert Decimal(payload['figures']['profit_loss']) == Decimal('-3706')


def test_preview_valid_step(client):
    payload = client.post(reverse('trip_preview'), trip_form_data(step='3')).json()
    assert payload['step_valid'] is True
    assert payload['errors'] == {}


def test_preview_rejects_get(client):
    response = client.get(reverse('trip_preview'))
    assert response.status_code == 400
    assert response.json()['success'] is False


def test_detail_shows_breakdown(client, make_trip):
    trip = make_trip()
    trip.replace_diesel_entries(scenario_entries())

    response = client.get(reverse('trip_detail', args=[trip.pk]))

    assert response.status_code == 200
    assert response.context['profit_margin'] == -15
    labels = [label for label, _amount in response.context['expense_breakdown']]
    assert len(labels) == 10
    assert '₹18,156' in response.content.decode()


def test_detail_missing_trip(client):
    assert client.get(reverse('trip_detail', args=[999])).status_code == 404


def test_delete_trip(client, make_trip):
    trip = make_trip()
    trip.replace_diesel_entries(scenario_entries())

    assert client.get(reverse('trip_delete', args=[trip.pk])).status_code == 200
    response = client.post(reverse('trip_delete', args=[trip.pk]), follow=True)

    assert 'T-001 has been deleted.' in response.content.decode()
    assert Trip.objects.count() == 0
    assert DieselEntry.objects.count() == 0


def test_trip_report_download(client, make_trip):
    trip = make_trip()
    trip.replace_diesel_entries(scenario_entries())

    response = client.get(reverse('trip_report', args=[trip.pk]))
    text = response.content.decode('utf-8')

    assert response['Content-Type'].startswith('text/plain')
    assert 'trip_T-001.txt' in response['Content-Disposition']
    assert 'TRIP SHEET: T-001' in text
    assert '₹25,000' in text
    assert 'Krishnagiri' in text


def test_analytics_default_range(client, make_trip):
    today = date.today()
    make_trip(start_date=today, unloading_date=today)

    response = client.get(reverse('analytics'))

    summaries = response.context['summaries']
    assert len(summaries) == 1
    assert summaries[0].revenue == Decimal('25000')
    assert response.context['totals'].revenue == Decimal('25000')


def test_analytics_custom_range_excludes_old_trips(client, make_trip):
    make_trip(start_date=date(2020, 1, 10), unloading_date=date(2020, 1, 12))

    response = client.get(reverse('analytics'), {'start': '2024-01-01', 'end': '2024-12-31'})

    assert response.context['summaries'] == []
    assert b'No trips found in the selected date range' in response.content


def test_analytics_invalid_range_warns(client):
    response = client.get(reverse('analytics'), {'start': '2024-10-10', 'end': '2024-10-01'})

    assert response.status_code == 200
    assert 'Invalid date range' in response.content.decode()


def test_truck_pages(client, make_trip):
    make_trip(trip_number='T-1', truck_number='KA05XY0001')
    make_trip(trip_number='T-2', truck_number='KA05XY0001')
    make_trip(trip_number='T-3')

    listing = client.get(reverse('truck_list'))
    assert [t.truck_number for t in listing.context['trucks']] == ['KA05XY0001', 'TN01AB1234']

    detail = client.get(reverse('truck_detail', args=['KA05XY0001']))
    assert detail.context['summary'].trip_count == 2
    assert detail.context['summary'].revenue == Decimal('50000')


def test_unknown_truck(client):
    assert client.get(reverse('truck_detail', args=['XX00'])).status_code == 404


def test_rerendered_wizard_shows_current_figures(client):
    response = client.post(reverse('trip_create'), trip_form_data(eway_bill='E' * 60))
    text = response.content.decode()

    assert response.status_code == 200
    assert Trip.objects.count() == 0
    figures = response.context['figures']
    assert figures.total_expenses == Decimal('28706')
    assert figures.profit_loss == Decimal('-3706')
    assert 'data-figure="total_expenses">₹28,706<' in text
    assert 'data-figure="profit_loss">-₹3,706<' in text


def test_edit_wizard_shows_stored_figures(client, make_trip):
    trip = make_trip()
    trip.replace_diesel_entries(scenario_entries())

    response = client.get(reverse('trip_update', args=[trip.pk]))

    assert response.context['figures'].diesel_cost == Decimal('18156')
    assert 'data-figure="diesel_cost">₹18,156<' in response.content.decode()


def test_new_wizard_starts_at_zero(client):
    response = client.get(reverse('trip_create'))
    assert response.context['figures'].total_expenses == 0


def test_analytics_lists_monthly_margin(client, make_trip):
    today = date.today()
    make_trip(start_date=today, unloading_date=today, rent=Decimal('40000'))

    response = client.get(reverse('analytics'))

    summary = response.context['summaries'][0]
    assert summary.margin == 70
    assert '<td class="text-end">70%</td>' in response.content.decode()
