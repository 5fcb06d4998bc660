"""
Ledger aggregates.
"""
from decimal import Decimal

from django.db.models import Sum

from apps.finance.models import FinancialKindChoices, FinancialRecord, FinancialStatusChoices


def _paid_total(qs, kind):
    total = qs.filter(kind=kind, status=FinancialStatusChoices.PAID).aggregate(total=Sum('amount'))['total']
    return total or Decimal('0.00')


def monthly_summary(year, month, queryset=None):
    """
    Paid revenue, paid expenses, net profit and pending count for a month.

    Pending and canceled entries never count towards the totals.
    """
    qs = FinancialRecord.objects.all() if queryset is None else queryset
    qs = qs.filter(date__year=year, date__month=month)

    revenue = _paid_total(qs, FinancialKindChoices.REVENUE)
    expenses = _paid_total(qs, FinancialKindChoices.EXPENSE)

    return {
        'year': year,
        'month': month,
        'revenue': revenue,
        'expenses': expenses,
        'net_profit': revenue - expenses,
        'pending_count': qs.filter(status=FinancialStatusChoices.PENDING).count(),
    }
