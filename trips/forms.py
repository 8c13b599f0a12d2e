from datetime import date

from django import forms
from django.core.exceptions import ValidationError

from .analytics import DEFAULT_RANGE_MONTHS, QUICK_RANGES, months_ago
from .calculations import derive_trip_financials
from .models import DieselEntry, Trip, RAW_FIELDS

MONEY_INPUT = {'class': 'form-control', 'step': '0.01', 'min': '0'}


# ----------------------------------------------------------------------
# 1. Trip Entry Form
# ----------------------------------------------------------------------
class TripForm(forms.ModelForm):
    start_date = forms.DateField(widget=forms.DateInput(attrs={'type': 'date', 'class': 'form-control'}))
    unloading_date = forms.DateField(widget=forms.DateInput(attrs={'type': 'date', 'class': 'form-control'}))

    class Meta:
        model = Trip
        fields = [
            # Truck & Driver
            'truck_name', 'truck_number', 'driver1_name', 'driver2_name',
            # Trip Information
            'trip_number', 'start_date', 'loading_point', 'starting_km',
            'eway_bill', 'lr_number', 'unloading_point', 'unloading_date', 'closing_km',
            # Expenses & Payments
            'loading_halt_cost', 'unloading_halt_cost', 'rent',
            'driver_bata_type', 'driver_bata_percent', 'driver_bata_fixed',
            'agent_name', 'agent_mobile',
            'agent_commission_type', 'agent_commission_percent', 'agent_commission_fixed',
            'fastag_charges', 'def_charges', 'rto_charges',
            'other_expenses_text', 'other_expenses_amount', 'police_commission',
        ]

        widgets = {
            'driver_bata_type': forms.RadioSelect,
            'agent_commission_type': forms.RadioSelect,
            'starting_km': forms.NumberInput(attrs={'class': 'form-control', 'min': '0'}),
            'closing_km': forms.NumberInput(attrs={'class': 'form-control', 'min': '0'}),
            'driver_bata_percent': forms.NumberInput(attrs=MONEY_INPUT),
            'agent_commission_percent': forms.NumberInput(attrs=MONEY_INPUT),
            'other_expenses_text': forms.Textarea(attrs={'rows': 2, 'class': 'form-control'}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for field_name, field in self.fields.items():
            if isinstance(field.widget, forms.RadioSelect):
                continue
            if isinstance(field, forms.DecimalField) and field_name not in self.Meta.widgets:
                field.widget.attrs.update(MONEY_INPUT)
            field.widget.attrs.setdefault('class', 'form-control')

    # Cross-field rules (closing KM, unloading date, bata/commission variants)
    # live in Trip.clean() and surface here through full_clean().


# ----------------------------------------------------------------------
# 2. Diesel Entries (Step 3 of the wizard)
# ----------------------------------------------------------------------
class DieselEntryForm(forms.ModelForm):
    class Meta:
        model = DieselEntry
        fields = ['date', 'time', 'location', 'litres_purchased', 'price_per_litre']
        widgets = {
            'date': forms.DateInput(attrs={'type': 'date', 'class': 'form-control'}),
            'time': forms.TimeInput(attrs={'type': 'time', 'class': 'form-control'}, format='%H:%M'),
            'location': forms.TextInput(attrs={'class': 'form-control'}),
            'litres_purchased': forms.NumberInput(attrs=MONEY_INPUT),
            'price_per_litre': forms.NumberInput(attrs=MONEY_INPUT),
        }


class BaseDieselEntryFormSet(forms.BaseFormSet):

    def clean(self):
        if any(self.errors):
            return
        if self.forms and self.can_delete and self._should_delete_form(self.forms[0]):
            raise ValidationError("The first diesel entry is mandatory.")

    def kept_forms(self):
        for form in self.forms:
            if form.empty_permitted and not form.has_changed():
                continue
            if self.can_delete and self._should_delete_form(form):
                continue
            yield form

    def entries(self):
        """Unsaved DieselEntry objects for every row that survives the submission."""
        return [form.save(commit=False) for form in self.kept_forms()]


DieselEntryFormSet = forms.formset_factory(
    DieselEntryForm,
    formset=BaseDieselEntryFormSet,
    extra=0,
    min_num=1,
    validate_min=True,
    can_delete=True,
)


def diesel_initial(trip):
    return list(trip.diesel_entries.values(
        'date', 'time', 'location', 'litres_purchased', 'price_per_litre'
    ))


# ----------------------------------------------------------------------
# 3. Wizard Steps & Live Figures
# ----------------------------------------------------------------------
DIESEL_STEP = 3

WIZARD_STEPS = [
    (1, 'Truck & Driver', ['truck_name', 'truck_number', 'driver1_name', 'driver2_name']),
    (2, 'Trip Information', [
        'trip_number', 'start_date', 'loading_point', 'starting_km', 'eway_bill',
        'lr_number', 'unloading_point', 'unloading_date', 'closing_km',
    ]),
    (DIESEL_STEP, 'Diesel Entries', []),
    (4, 'Expenses & Payments', [
        'loading_halt_cost', 'unloading_halt_cost', 'rent',
        'driver_bata_type', 'driver_bata_percent', 'driver_bata_fixed',
        'agent_name', 'agent_mobile',
        'agent_commission_type', 'agent_commission_percent', 'agent_commission_fixed',
        'fastag_charges', 'def_charges', 'rto_charges',
        'other_expenses_text', 'other_expenses_amount', 'police_commission',
    ]),
    (5, 'Review', None),
]
LAST_STEP = WIZARD_STEPS[-1][0]


def _diesel_errors(formset):
    errors = {}
    if formset.non_form_errors():
        errors[formset.prefix] = list(formset.non_form_errors())
    # formset.errors skips deleted rows, so walk the forms to keep row indexes.
    for index, entry_form in enumerate(formset.forms):
        if formset.can_delete and formset._should_delete_form(entry_form):
            continue
        for field, messages in entry_form.errors.items():
            errors[f'{formset.prefix}-{index}-{field}'] = list(messages)
    return errors


def step_errors(form, formset, step):
    """
    Validation errors belonging to one wizard step, keyed by field name.
    The review step reports everything.
    """
    form.is_valid()
    formset.is_valid()

    fields = dict((number, names) for number, _title, names in WIZARD_STEPS).get(step, [])
    if fields is None:
        errors = {name: list(messages) for name, messages in form.errors.items()}
        errors.update(_diesel_errors(formset))
        return errors
    if step == DIESEL_STEP:
        return _diesel_errors(formset)
    return {name: list(form.errors[name]) for name in fields if name in form.errors}


def live_financials(form, formset):
    """
    Derived trip figures from whatever parts of a bound submission are valid,
    so the wizard can show current totals before the trip is saved.
    """
    form.is_valid()
    formset.is_valid()
    cleaned = getattr(form, 'cleaned_data', {})
    fields = {name: cleaned.get(name) for name in RAW_FIELDS}

    entries = []
    for entry_form in formset.forms:
        data = getattr(entry_form, 'cleaned_data', None) or {}
        if data.get('DELETE'):
            continue
        entries.append(DieselEntry(
            litres_purchased=data.get('litres_purchased') or 0,
            price_per_litre=data.get('price_per_litre') or 0,
        ))
    return derive_trip_financials(fields, entries)


# ----------------------------------------------------------------------
# 4. Analytics Date Range Form
# ----------------------------------------------------------------------
class DateRangeForm(forms.Form):
    range_months = forms.TypedChoiceField(
        label="Quick Range",
        choices=[('', 'Custom')] + QUICK_RANGES,
        coerce=int,
        empty_value=None,
        required=False,
        widget=forms.Select(attrs={'class': 'form-control'}),
    )
    start = forms.DateField(
        required=False,
        widget=forms.DateInput(attrs={'type': 'date', 'class': 'form-control'}),
    )
    end = forms.DateField(
        required=False,
        widget=forms.DateInput(attrs={'type': 'date', 'class': 'form-control'}),
    )

    def clean(self):
        cleaned_data = super().clean()
        start = cleaned_data.get('start')
        end = cleaned_data.get('end')

        if start and end and start > end:
            raise ValidationError("Start date cannot be after end date")

        return cleaned_data

    def resolve(self, today=None):
        """The (start, end) pair to filter on; defaults to the last year."""
        today = today or date.today()
        data = getattr(self, 'cleaned_data', None) or {}
        if self.errors:
            data = {}

        start, end = data.get('start'), data.get('end')
        if start or end:
            end = end or today
            start = start or months_ago(end, DEFAULT_RANGE_MONTHS)
            return start, end

        months = data.get('range_months') or DEFAULT_RANGE_MONTHS
        return months_ago(today, months), today
