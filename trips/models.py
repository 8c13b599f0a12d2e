import logging
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models, transaction
from django.utils.translation import gettext_lazy as _

from .calculations import (
    FIXED, PERCENTAGE, POLICY_CHOICES, derive_trip_financials, entry_cost,
)

logger = logging.getLogger(__name__)

# --- CONSTANTS ---
NON_NEGATIVE = [MinValueValidator(Decimal('0.00'))]

# Derived columns keep enough places to hold the exact calculator output
# (2dp amount x 2dp percent / 100).
DERIVED_MAX_DIGITS = 18
DERIVED_DECIMAL_PLACES = 6

DEFAULT_BATA_PERCENT = Decimal('10.00')

# Raw inputs the financial derivation reads.
RAW_FIELDS = (
    'starting_km', 'closing_km', 'rent',
    'loading_halt_cost', 'unloading_halt_cost',
    'driver_bata_type', 'driver_bata_percent', 'driver_bata_fixed',
    'agent_commission_type', 'agent_commission_percent', 'agent_commission_fixed',
    'fastag_charges', 'def_charges', 'rto_charges',
    'other_expenses_amount', 'police_commission',
)

DERIVED_FIELDS = (
    'running_km', 'diesel_cost', 'driver_bata_amount',
    'agent_commission_amount', 'total_expenses', 'profit_loss',
)


def money_field(**kwargs):
    kwargs.setdefault('default', Decimal('0.00'))
    return models.DecimalField(max_digits=12, decimal_places=2, validators=NON_NEGATIVE, **kwargs)


def derived_money_field(**kwargs):
    return models.DecimalField(
        max_digits=DERIVED_MAX_DIGITS,
        decimal_places=DERIVED_DECIMAL_PLACES,
        default=Decimal('0'),
        editable=False,
        **kwargs
    )


# =========================================================================
# A. TRIP
# =========================================================================

class Trip(models.Model):
    trip_number = models.CharField(max_length=50, verbose_name="Trip Number")

    # Truck & Driver
    truck_name = models.CharField(max_length=100)
    truck_number = models.CharField(max_length=20)
    driver1_name = models.CharField(max_length=100, verbose_name="Driver 1")
    driver2_name = models.CharField(max_length=100, blank=True, null=True, verbose_name="Driver 2")

    # Route
    loading_point = models.CharField(max_length=150)
    unloading_point = models.CharField(max_length=150)
    start_date = models.DateField()
    unloading_date = models.DateField()
    eway_bill = models.CharField(max_length=50, blank=True, null=True, verbose_name="E-Way Bill")
    lr_number = models.CharField(max_length=50, blank=True, null=True, verbose_name="LR Number")

    # Distance
    starting_km = models.PositiveIntegerField(default=0, verbose_name="Starting KM")
    closing_km = models.PositiveIntegerField(default=0, verbose_name="Closing KM")
    running_km = models.IntegerField(default=0, editable=False, verbose_name="Running KM")

    # Revenue
    rent = money_field(verbose_name="Rent (Revenue)")

    # Cost inputs
    loading_halt_cost = money_field()
    unloading_halt_cost = money_field()
    fastag_charges = money_field(verbose_name="FASTag Charges")
    def_charges = money_field(verbose_name="DEF Charges")
    rto_charges = money_field(verbose_name="RTO Charges")
    police_commission = money_field()
    other_expenses_amount = money_field(verbose_name="Other Expenses")
    other_expenses_text = models.TextField(blank=True, null=True, verbose_name="Other Expenses Notes")

    # Driver bata policy
    driver_bata_type = models.CharField(max_length=20, choices=POLICY_CHOICES, default=PERCENTAGE)
    driver_bata_percent = models.DecimalField(
        max_digits=5, decimal_places=2, blank=True, null=True,
        default=DEFAULT_BATA_PERCENT, validators=NON_NEGATIVE, verbose_name="Driver Bata %"
    )
    driver_bata_fixed = models.DecimalField(
        max_digits=12, decimal_places=2, blank=True, null=True,
        validators=NON_NEGATIVE, verbose_name="Driver Bata (Fixed Amount)"
    )

    # Agent
    agent_name = models.CharField(max_length=100, blank=True, null=True)
    agent_mobile = models.CharField(max_length=15, blank=True, null=True)
    agent_commission_type = models.CharField(max_length=20, choices=POLICY_CHOICES, default=FIXED)
    agent_commission_percent = models.DecimalField(
        max_digits=5, decimal_places=2, blank=True, null=True,
        validators=NON_NEGATIVE, verbose_name="Agent Commission %"
    )
    agent_commission_fixed = models.DecimalField(
        max_digits=12, decimal_places=2, blank=True, null=True, default=Decimal('0.00'),
        validators=NON_NEGATIVE, verbose_name="Agent Commission (Fixed Amount)"
    )

    # Calculated Fields
    diesel_cost = derived_money_field()
    driver_bata_amount = derived_money_field()
    agent_commission_amount = derived_money_field()
    total_expenses = derived_money_field()
    profit_loss = derived_money_field(verbose_name="Profit/Loss")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-pk']

    def raw_fields(self):
        return {name: getattr(self, name) for name in RAW_FIELDS}

    def recalculate(self, diesel_entries=None):
        """Refreshes every derived column from the raw inputs."""
        if diesel_entries is None:
            diesel_entries = list(DieselEntry.objects.filter(trip=self)) if self.pk else []

        financials = derive_trip_financials(self.raw_fields(), diesel_entries)
        for name, value in financials.as_dict().items():
            setattr(self, name, value)
        return financials

    def clean(self):
        errors = {}

        if (self.starting_km is not None and self.closing_km is not None
                and self.closing_km < self.starting_km):
            errors['closing_km'] = _('Closing KM must be greater than or equal to Starting KM')

        if (self.start_date and self.unloading_date
                and self.unloading_date < self.start_date):
            errors['unloading_date'] = _('Unloading date must be after loading date')

        if self.driver_bata_type == PERCENTAGE and self.driver_bata_percent is None:
            errors['driver_bata_percent'] = _('Driver Bata percentage is required when using percentage type')
        if self.driver_bata_type == FIXED and self.driver_bata_fixed is None:
            errors['driver_bata_fixed'] = _('Driver Bata fixed amount is required when using fixed type')

        if self.agent_commission_type == PERCENTAGE and self.agent_commission_percent is None:
            errors['agent_commission_percent'] = _('Agent Commission percentage is required when using percentage type')
        if self.agent_commission_type == FIXED and self.agent_commission_fixed is None:
            errors['agent_commission_fixed'] = _('Agent Commission fixed amount is required when using fixed type')

        if errors:
            raise ValidationError(errors)

    def save(self, *args, **kwargs):
        # Derived figures are never taken from the caller.
        self.recalculate()
        super().save(*args, **kwargs)

    def refresh_totals(self):
        """Re-derives totals from the stored diesel entries and saves only derived columns."""
        self.save(update_fields=list(DERIVED_FIELDS) + ['updated_at'])

    def replace_diesel_entries(self, entries):
        """
        Swaps the trip's fuel purchases for `entries` (unsaved DieselEntry
        objects) in one transaction, then stores the new totals. If anything
        fails the previous entries and totals are left untouched.
        """
        entries = list(entries)
        with transaction.atomic():
            # No per-row post_delete refresh; totals are stored once below.
            stale = DieselEntry.objects.filter(trip=self)
            stale._raw_delete(stale.db)
            for entry in entries:
                entry.trip = self
                entry.total_cost = entry_cost(entry.litres_purchased, entry.price_per_litre)
            DieselEntry.objects.bulk_create(entries)
            self.refresh_totals()
        logger.info("Trip %s now has %d diesel entries", self.pk, len(entries))

    def __str__(self):
        return f"{self.trip_number}: {self.loading_point} to {self.unloading_point}"


# =========================================================================
# B. DIESEL ENTRY
# =========================================================================

class DieselEntry(models.Model):
    trip = models.ForeignKey(Trip, on_delete=models.CASCADE, related_name='diesel_entries')
    date = models.DateField()
    time = models.TimeField()
    location = models.CharField(max_length=150)
    litres_purchased = models.DecimalField(max_digits=10, decimal_places=2, validators=NON_NEGATIVE)
    price_per_litre = models.DecimalField(max_digits=10, decimal_places=2, validators=NON_NEGATIVE)
    total_cost = derived_money_field()

    class Meta:
        ordering = ['date', 'time', 'pk']
        verbose_name_plural = 'diesel entries'

    def save(self, *args, **kwargs):
        self.total_cost = entry_cost(self.litres_purchased, self.price_per_litre)
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.litres_purchased} L @ {self.price_per_litre} ({self.location})"
