"""
Finance URLs
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import FinancialRecordViewSet, MonthlySummaryView

router = DefaultRouter()
router.register(r'records', FinancialRecordViewSet, basename='financial-record')

urlpatterns = [
    path('summary/', MonthlySummaryView.as_view(), name='finance-summary'),
    path('', include(router.urls)),
]
