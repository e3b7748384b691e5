"""
API URLs for the equipment registry
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from inventory.views import InkIssueViewSet, InkProductViewSet, InkReceiptViewSet, InkSupplierViewSet
from equipment.views import EquipmentViewSet
from maintenance.views import ITRoundViewSet, RepairTicketViewSet

router = DefaultRouter()
router.register(r'ink/products', InkProductViewSet, basename='inkproduct')
router.register(r'ink/suppliers', InkSupplierViewSet, basename='inksupplier')
router.register(r'ink/receipts', InkReceiptViewSet, basename='inkreceipt')
router.register(r'ink/issues', InkIssueViewSet, basename='inkissue')
router.register(r'equipment', EquipmentViewSet, basename='equipment')
router.register(r'it-rounds', ITRoundViewSet, basename='itround')
router.register(r'repairs', RepairTicketViewSet, basename='repair')

urlpatterns = [
    # JWT Authentication
    path('auth/login/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/refresh/', TokenRefreshView.as_view(), name='token_refresh'),

    # Step-up confirmation for edit / delete / history
    path('step-up/', include('stepup.urls')),

    # Audit logs
    path('audit/', include('audit.urls')),

    # API routes
    path('', include(router.urls)),
]
