from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .models import DieselEntry, Trip


def _refresh_trip(trip_id):
    trip = Trip.objects.filter(pk=trip_id).first()
    if trip is not None:
        trip.refresh_totals()


@receiver(post_save, sender=DieselEntry)
def refresh_trip_after_entry_saved(sender, instance, created, **kwargs):
    """
    Keeps the owning trip's diesel cost and totals in step when a single
    entry is saved outside the trip form (e.g. the admin inline).
    """
    if kwargs.get('raw'):
        return
    _refresh_trip(instance.trip_id)


@receiver(post_delete, sender=DieselEntry)
def refresh_trip_after_entry_deleted(sender, instance, **kwargs):
    # Entries removed because their trip is being deleted need no refresh.
    if isinstance(kwargs.get('origin'), Trip):
        return
    _refresh_trip(instance.trip_id)
