"""URL routing for uploads."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import AssetDeleteView, UploadSignatureView

urlpatterns = [
    path("signature/", UploadSignatureView.as_view(), name="signature"),
    path("delete/", AssetDeleteView.as_view(), name="delete"),
]
