from __future__ import annotations

from django.urls import path

from apps.identity import views

urlpatterns = [
    path("authorize", views.authorize_endpoint, name="authorize"),
    path("catalog/permissions", views.permissions_catalog_endpoint, name="catalog-permissions"),
    path("catalog/roles", views.roles_catalog_endpoint, name="catalog-roles"),
]
