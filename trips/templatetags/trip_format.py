from django import template

from ..formatting import format_date, format_inr

register = template.Library()


@register.filter
def inr(value):
    return format_inr(value)


@register.filter
def display_date(value):
    return format_date(value)
