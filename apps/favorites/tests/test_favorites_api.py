"""Tests for the favorites API."""

from __future__ import annotations

from decimal import Decimal

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.favorites.models import Favorite
from apps.locations.models import City, Department
from apps.properties.models import Property, PropertyImage, PropertyType
from apps.users.models import User


class FavoriteAPITests(APITestCase):
    def setUp(self) -> None:
        self.student = User.objects.create_user(
            email="student@example.com", password="secret123", name="Camila Estudiante"
        )
        owner = User.objects.create_user(
            email="owner@example.com", password="secret123", name="Raúl Dueño", user_type=User.UserType.OWNER
        )
        department = Department.objects.create(name="Antioquia", code="ANT")
        city = City.objects.create(name="Medellín", department=department)
        property_type = PropertyType.objects.create(name="aparta-estudio")
        common = {
            "owner": owner,
            "property_type": property_type,
            "description": "Aparta-estudio amoblado con cocina, baño privado y servicios incluidos.",
            "monthly_rent": Decimal("1200000"),
            "city": city,
            "street": "Calle 50 # 40-20",
        }
        self.listing = Property.objects.create(
            title="Aparta-estudio cerca a la UdeA", status=Property.Status.APPROVED, **common
        )
        PropertyImage.objects.create(property=self.listing, url="https://x/cover.jpg", is_featured=True)
        self.pending = Property.objects.create(
            title="Aparta-estudio en revisión", status=Property.Status.PENDING, **common
        )
        self.client.force_authenticate(self.student)

    def test_requires_authentication(self) -> None:
        self.client.force_authenticate(None)
        response = self.client.get(reverse("favorites:favorite-list"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_add_and_list(self) -> None:
        response = self.client.post(
            reverse("favorites:favorite-list"), {"property_id": self.listing.id}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["property"]["city"], "Medellín")
        self.assertEqual(response.data["property"]["featured_image"], "https://x/cover.jpg")

        listing = self.client.get(reverse("favorites:favorite-list"))
        self.assertEqual(listing.data["count"], 1)

    def test_duplicate_add(self) -> None:
        Favorite.objects.create(user=self.student, property=self.listing)
        response = self.client.post(
            reverse("favorites:favorite-list"), {"property_id": self.listing.id}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unpublished_listing_cannot_be_added(self) -> None:
        response = self.client.post(
            reverse("favorites:favorite-list"), {"property_id": self.pending.id}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("property_id", response.data)

    def test_toggle(self) -> None:
        url = reverse("favorites:favorite-toggle")
        added = self.client.post(url, {"property_id": self.listing.id}, format="json")
        self.assertEqual(added.status_code, status.HTTP_201_CREATED, added.data)
        self.assertEqual(added.data["action"], "added")
        removed = self.client.post(url, {"property_id": self.listing.id}, format="json")
        self.assertEqual(removed.data["action"], "removed")
        self.assertFalse(Favorite.objects.exists())

    def test_check(self) -> None:
        url = reverse("favorites:favorite-check", args=[self.listing.id])
        self.assertFalse(self.client.get(url).data["is_favorite"])
        favorite = Favorite.objects.create(user=self.student, property=self.listing)
        response = self.client.get(url)
        self.assertTrue(response.data["is_favorite"])
        self.assertEqual(response.data["favorite_id"], favorite.id)

    def test_remove(self) -> None:
        favorite = Favorite.objects.create(user=self.student, property=self.listing)
        response = self.client.delete(reverse("favorites:favorite-detail", args=[favorite.id]))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

        Favorite.objects.create(user=self.student, property=self.listing)
        response = self.client.delete(reverse("favorites:favorite-remove-property", args=[self.listing.id]))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        response = self.client.delete(reverse("favorites:favorite-remove-property", args=[self.listing.id]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_bulk_delete_only_touches_own(self) -> None:
        mine = Favorite.objects.create(user=self.student, property=self.listing)
        other_user = User.objects.create_user(email="o@example.com", password="secret123", name="Otro Estudiante")
        theirs = Favorite.objects.create(user=other_user, property=self.listing)
        response = self.client.post(
            reverse("favorites:favorite-bulk-delete"), {"favorite_ids": [mine.id, theirs.id]}, format="json"
        )
        self.assertEqual(response.data["deleted"], 1)
        self.assertTrue(Favorite.objects.filter(pk=theirs.pk).exists())

    def test_cannot_delete_someone_elses_favorite(self) -> None:
        other_user = User.objects.create_user(email="o@example.com", password="secret123", name="Otro Estudiante")
        theirs = Favorite.objects.create(user=other_user, property=self.listing)
        response = self.client.delete(reverse("favorites:favorite-detail", args=[theirs.id]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
