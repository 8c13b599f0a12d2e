import logging

from django.contrib import messages
from django.db import DatabaseError, transaction
from django.http import Http404, HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.template.loader import render_to_string

from .analytics import (
    filter_by_range, monthly_summary, period_totals, profit_margin, truck_summaries,
)
from .calculations import ZERO
from .forms import (
    DIESEL_STEP, DateRangeForm, DieselEntryFormSet, LAST_STEP, TripForm, WIZARD_STEPS,
    diesel_initial, live_financials, step_errors,
)
from .models import Trip

logger = logging.getLogger(__name__)

DIESEL_PREFIX = 'diesel_entries'


def expense_breakdown(trip):
    return [
        ('Driver Bata', trip.driver_bata_amount),
        ('Agent Commission', trip.agent_commission_amount),
        ('Diesel Cost', trip.diesel_cost),
        ('FASTag Charges', trip.fastag_charges),
        ('DEF Charges', trip.def_charges),
        ('RTO Charges', trip.rto_charges),
        ('Loading Halt Cost', trip.loading_halt_cost),
        ('Unloading Halt Cost', trip.unloading_halt_cost),
        ('Police Commission', trip.police_commission),
        ('Other Expenses', trip.other_expenses_amount),
    ]


# ----------------------------------------------------------------------
# 1. Dashboard
# ----------------------------------------------------------------------
def dashboard(request):
    """Lists all trips, newest first, with overall revenue and profit."""
    trips = list(Trip.objects.all())
    total_revenue = sum((trip.rent for trip in trips), ZERO)
    total_profit = sum((trip.profit_loss for trip in trips), ZERO)
    context = {
        'trips': trips,
        'total_revenue': total_revenue,
        'total_profit': total_profit,
        'title': 'Trips Dashboard',
    }
    return render(request, 'trips/dashboard.html', context)


# ----------------------------------------------------------------------
# 2. Create/Update Trip (wizard)
# ----------------------------------------------------------------------
def _save_trip(form, formset):
    """Saves the trip row and its diesel entries together."""
    with transaction.atomic():
        trip = form.save()
        trip.replace_diesel_entries(formset.entries())
    return trip


def _render_wizard(request, form, formset, title, trip=None):
    # Bound fields per step; None marks the review step.
    steps = [
        (number, step_title, None if names is None else [form[name] for name in names])
        for number, step_title, names in WIZARD_STEPS
    ]
    # A bound form shows the figures its current inputs derive, even invalid ones.
    if form.is_bound:
        figures = live_financials(form, formset)
    else:
        figures = form.instance.recalculate()
    context = {
        'form': form,
        'formset': formset,
        'trip': trip,
        'figures': figures,
        'steps': steps,
        'diesel_step': DIESEL_STEP,
        'last_step': LAST_STEP,
        'title': title,
    }
    return render(request, 'trips/trip_form.html', context)


def trip_create(request):
    if request.method == 'POST':
        form = TripForm(request.POST)
        formset = DieselEntryFormSet(request.POST, prefix=DIESEL_PREFIX)
        if form.is_valid() and formset.is_valid():
            try:
                trip = _save_trip(form, formset)
            except DatabaseError as e:
                logger.exception("Failed to add trip %s", form.cleaned_data.get('trip_number'))
                messages.error(request, f"Failed to add trip: {e}")
            else:
                messages.success(request, f"Trip {trip.trip_number} has been added.")
                return redirect('trip_detail', pk=trip.pk)
    else:
        form = TripForm()
        formset = DieselEntryFormSet(prefix=DIESEL_PREFIX)

    return _render_wizard(request, form, formset, 'Add New Trip')


def trip_update(request, pk):
    """Edits a trip; its diesel entries are replaced as a whole."""
    trip = get_object_or_404(Trip, pk=pk)

    if request.method == 'POST':
        form = TripForm(request.POST, instance=trip)
        formset = DieselEntryFormSet(request.POST, prefix=DIESEL_PREFIX)
        if form.is_valid() and formset.is_valid():
            try:
                trip = _save_trip(form, formset)
            except DatabaseError as e:
                logger.exception("Failed to update trip %s", pk)
                messages.error(request, f"Failed to update trip: {e}")
            else:
                messages.success(request, f"Trip {trip.trip_number} has been updated.")
                return redirect('trip_detail', pk=trip.pk)
    else:
        form = TripForm(instance=trip)
        formset = DieselEntryFormSet(initial=diesel_initial(trip), prefix=DIESEL_PREFIX)

    return _render_wizard(request, form, formset, f'Edit Trip: {trip.trip_number}', trip=trip)


def trip_preview(request):
    """
    AJAX endpoint for the wizard: recomputes the derived figures from the
    current form state and reports the errors of the requested step.
    """
    if request.method != 'POST':
        return JsonResponse({'success': False, 'message': 'Invalid request method.'}, status=400)

    try:
        form = TripForm(request.POST)
        formset = DieselEntryFormSet(request.POST, prefix=DIESEL_PREFIX)
        try:
            step = int(request.POST.get('step', LAST_STEP))
        except ValueError:
            step = LAST_STEP

        financials = live_financials(form, formset)
        errors = step_errors(form, formset, step)

        return JsonResponse({
            'success': True,
            'step': step,
            'step_valid': not errors,
            'errors': errors,
            'figures': {name: str(value) for name, value in financials.as_dict().items()},
        })
    except Exception as e:
        logger.exception("Trip preview failed")
        return JsonResponse({'success': False, 'message': f'Internal Server Error: {str(e)}'}, status=500)


# ----------------------------------------------------------------------
# 3. Trip Detail, Delete & Report
# ----------------------------------------------------------------------
def trip_detail(request, pk):
    trip = get_object_or_404(Trip, pk=pk)
    context = {
        'trip': trip,
        'diesel_entries': trip.diesel_entries.all(),
        'expense_breakdown': expense_breakdown(trip),
        'profit_margin': profit_margin(trip.profit_loss, trip.rent),
        'title': f'Trip Details: {trip.trip_number}',
    }
    return render(request, 'trips/trip_detail.html', context)


def trip_delete(request, pk):
    trip = get_object_or_404(Trip, pk=pk)
    if request.method == 'POST':
        trip_number = trip.trip_number
        try:
            trip.delete()
        except DatabaseError as e:
            logger.exception("Failed to delete trip %s", pk)
            messages.error(request, f"Failed to delete trip: {e}")
            return redirect('trip_detail', pk=pk)
        messages.success(request, f"Trip {trip_number} has been deleted.")
        return redirect('dashboard')

    context = {'trip': trip, 'title': f'Delete {trip.trip_number}'}
    return render(request, 'trips/trip_confirm_delete.html', context)


def trip_report(request, pk):
    """Plain-text trip sheet for download."""
    trip = get_object_or_404(Trip, pk=pk)
    content = render_to_string('trips/trip_report.txt', {
        'trip': trip,
        'diesel_entries': trip.diesel_entries.all(),
        'expense_breakdown': expense_breakdown(trip),
        'profit_margin': profit_margin(trip.profit_loss, trip.rent),
    })
    resp = HttpResponse(content, content_type='text/plain; charset=utf-8')
    resp['Content-Disposition'] = f'attachment; filename="trip_{trip.trip_number}.txt"'
    return resp


# ----------------------------------------------------------------------
# 4. Analytics
# ----------------------------------------------------------------------
def analytics(request):
    form = DateRangeForm(request.GET or None)
    if form.is_bound and not form.is_valid():
        messages.warning(request, "Invalid date range; showing the last year instead.")
    start, end = form.resolve()

    summaries = monthly_summary(Trip.objects.all(), start, end)
    context = {
        'form': form,
        'start': start,
        'end': end,
        'summaries': summaries,
        'totals': period_totals(summaries),
        'chart': {
            'labels': [s.month for s in summaries],
            'revenue': [float(s.revenue) for s in summaries],
            'expenses': [float(s.expenses) for s in summaries],
            'profit': [float(s.profit) for s in summaries],
        },
        'title': 'Financial Analytics',
    }
    return render(request, 'trips/analytics.html', context)


# ----------------------------------------------------------------------
# 5. Trucks
# ----------------------------------------------------------------------
def truck_list(request):
    context = {
        'trucks': truck_summaries(Trip.objects.all()),
        'title': 'Trucks',
    }
    return render(request, 'trips/truck_list.html', context)


def truck_detail(request, truck_number):
    trips = list(Trip.objects.filter(truck_number=truck_number).order_by('-start_date', '-pk'))
    if not trips:
        raise Http404(f"No trips recorded for truck {truck_number}.")

    form = DateRangeForm(request.GET or None)
    if form.is_bound and form.is_valid():
        start, end = form.resolve()
        trips = filter_by_range(trips, start, end)

    summary = truck_summaries(trips)
    context = {
        'truck_number': truck_number,
        'summary': summary[0] if summary else None,
        'trips': trips,
        'form': form,
        'title': f'Truck {truck_number}',
    }
    return render(request, 'trips/truck_detail.html', context)
