from django.urls import path, include
from rest_framework.routers import SimpleRouter
from .views import BinaryTreeViewSet

router = SimpleRouter()
router.register(r'', BinaryTreeViewSet, basename='tree')

urlpatterns = [
    path('', include(router.urls)),
]
