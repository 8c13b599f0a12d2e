"""
Trip financial calculations.

Every derived money figure on a trip (diesel cost, driver bata, agent
commission, total expenses, profit/loss) comes out of this module. Nothing
here touches the database, so the same functions back the model's save(),
the live preview in the trip wizard and the tests.

Amounts are Decimals and are never rounded here; rounding happens only when
a figure is formatted for display.
"""
from dataclasses import dataclass
from decimal import Decimal

ZERO = Decimal('0')
HUNDRED = Decimal('100')

PERCENTAGE = 'percentage'
FIXED = 'fixed'

POLICY_CHOICES = [
    (PERCENTAGE, 'Percentage of Rent'),
    (FIXED, 'Fixed Amount'),
]

# The ten components that make up a trip's total expenses.
COST_FIELDS = (
    'loading_halt_cost',
    'unloading_halt_cost',
    'driver_bata_amount',
    'agent_commission_amount',
    'diesel_cost',
    'fastag_charges',
    'def_charges',
    'rto_charges',
    'other_expenses_amount',
    'police_commission',
)


def as_decimal(value):
    """Coerces form/model input to Decimal; None and '' count as zero."""
    if value is None or value == '':
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


# =========================================================================
# A. PAYMENT POLICIES (driver bata / agent commission)
# =========================================================================

@dataclass(frozen=True)
class PercentageRate:
    percent: Decimal

    def amount_on(self, base):
        return as_decimal(base) * as_decimal(self.percent) / HUNDRED


@dataclass(frozen=True)
class FixedAmount:
    amount: Decimal

    def amount_on(self, base):
        return as_decimal(self.amount)


def make_policy(kind, percent=None, fixed=None):
    """Builds the policy variant stored as a (type, percent, fixed) triple."""
    if kind == PERCENTAGE:
        return PercentageRate(as_decimal(percent))
    if kind == FIXED:
        return FixedAmount(as_decimal(fixed))
    raise ValueError(f"Unknown payment type: {kind!r}")


# =========================================================================
# B. SINGLE COMPUTATIONS
# =========================================================================

def entry_cost(litres, price):
    return as_decimal(litres) * as_decimal(price)


def compute_diesel_cost(entries):
    """Sum of litres x price across all fuel purchases of a trip."""
    total = ZERO
    for entry in entries:
        total += entry_cost(entry.litres_purchased, entry.price_per_litre)
    return total


def compute_running_km(starting_km, closing_km):
    # Negative results are left for validation to flag.
    return int(closing_km or 0) - int(starting_km or 0)


def compute_agent_commission(rent, policy):
    return policy.amount_on(rent)


def compute_driver_bata(rent, policy):
    """Driver bata on the gross rent (commission is not deducted first)."""
    return policy.amount_on(rent)


@dataclass(frozen=True)
class Totals:
    total_expenses: Decimal
    profit_loss: Decimal


def compute_totals(rent, costs):
    total_expenses = sum((as_decimal(costs.get(name)) for name in COST_FIELDS), ZERO)
    return Totals(
        total_expenses=total_expenses,
        profit_loss=as_decimal(rent) - total_expenses,
    )


# =========================================================================
# C. FULL DERIVATION
# =========================================================================

@dataclass(frozen=True)
class TripFinancials:
    running_km: int
    diesel_cost: Decimal
    driver_bata_amount: Decimal
    agent_commission_amount: Decimal
    total_expenses: Decimal
    profit_loss: Decimal

    def as_dict(self):
        return {
            'running_km': self.running_km,
            'diesel_cost': self.diesel_cost,
            'driver_bata_amount': self.driver_bata_amount,
            'agent_commission_amount': self.agent_commission_amount,
            'total_expenses': self.total_expenses,
            'profit_loss': self.profit_loss,
        }


def derive_trip_financials(fields, diesel_entries):
    """
    Derives every computed trip figure from the raw inputs.

    `fields` maps raw trip field names to values (a Trip's attributes or a
    form's cleaned_data); `diesel_entries` is an iterable of objects with
    `litres_purchased` and `price_per_litre`. Call it again after any input
    changes: the result depends on nothing but the arguments.
    """
    rent = as_decimal(fields.get('rent'))

    commission_policy = make_policy(
        fields.get('agent_commission_type') or FIXED,
        fields.get('agent_commission_percent'),
        fields.get('agent_commission_fixed'),
    )
    bata_policy = make_policy(
        fields.get('driver_bata_type') or PERCENTAGE,
        fields.get('driver_bata_percent'),
        fields.get('driver_bata_fixed'),
    )

    costs = {name: fields.get(name) for name in COST_FIELDS}
    costs['diesel_cost'] = compute_diesel_cost(diesel_entries)
    costs['agent_commission_amount'] = compute_agent_commission(rent, commission_policy)
    costs['driver_bata_amount'] = compute_driver_bata(rent, bata_policy)

    totals = compute_totals(rent, costs)

    return TripFinancials(
        running_km=compute_running_km(fields.get('starting_km'), fields.get('closing_km')),
        diesel_cost=costs['diesel_cost'],
        driver_bata_amount=costs['driver_bata_amount'],
        agent_commission_amount=costs['agent_commission_amount'],
        total_expenses=totals.total_expenses,
        profit_loss=totals.profit_loss,
    )
