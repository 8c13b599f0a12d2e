from django.contrib import admin
from .models import DieselEntry, Trip

# --- INLINE ADMINS ---

# Inline for editing fuel purchases directly on the Trip page.
# Each saved row refreshes the trip totals through the DieselEntry signals.
class DieselEntryInline(admin.TabularInline):
    model = DieselEntry
    extra = 0
    min_num = 1
    readonly_fields = ('total_cost',)


# 1. Trip Admin
@admin.register(Trip)
class TripAdmin(admin.ModelAdmin):
    list_display = (
        'trip_number', 'start_date', 'truck_number', 'driver1_name', 'loading_point',
        'unloading_point', 'rent', 'total_expenses', 'profit_loss'
    )
    # The calculated fields are readonly
    readonly_fields = (
        'running_km', 'diesel_cost', 'driver_bata_amount', 'agent_commission_amount',
        'total_expenses', 'profit_loss', 'created_at', 'updated_at'
    )
    list_filter = ('truck_number', 'driver_bata_type', 'agent_commission_type')
    search_fields = ('trip_number', 'truck_number', 'truck_name', 'driver1_name', 'loading_point', 'unloading_point')
    date_hierarchy = 'start_date'
    inlines = [DieselEntryInline]

    fieldsets = (
        ('Truck & Driver', {
            'fields': ('truck_name', 'truck_number', 'driver1_name', 'driver2_name'),
        }),
        ('Trip Information', {
            'fields': (
                'trip_number', 'start_date', 'unloading_date', 'loading_point', 'unloading_point',
                'starting_km', 'closing_km', 'running_km', 'eway_bill', 'lr_number',
            ),
        }),
        ('Driver Bata & Agent', {
            'fields': (
                'driver_bata_type', 'driver_bata_percent', 'driver_bata_fixed',
                'agent_name', 'agent_mobile',
                'agent_commission_type', 'agent_commission_percent', 'agent_commission_fixed',
            ),
        }),
        ('Revenue & Expenses', {
            'fields': (
                'rent', 'loading_halt_cost', 'unloading_halt_cost', 'fastag_charges',
                'def_charges', 'rto_charges', 'police_commission',
                'other_expenses_amount', 'other_expenses_text',
            ),
        }),
        ('Calculated Totals', {
            'fields': (
                'diesel_cost', 'driver_bata_amount', 'agent_commission_amount',
                'total_expenses', 'profit_loss', 'created_at', 'updated_at',
            ),
            'description': 'Recomputed on every save from the fields above.',
        }),
    )


# 2. Diesel Entry Admin
@admin.register(DieselEntry)
class DieselEntryAdmin(admin.ModelAdmin):
    list_display = ('trip', 'date', 'time', 'location', 'litres_purchased', 'price_per_litre', 'total_cost')
    search_fields = ('trip__trip_number', 'location')
    readonly_fields = ('total_cost',)
    date_hierarchy = 'date'
