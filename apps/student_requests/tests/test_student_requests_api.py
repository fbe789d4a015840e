"""Tests for the student request board."""

from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.locations.models import City, Department, Institution
from apps.properties.models import PropertyType
from apps.student_requests.models import StudentRequest
from apps.users.models import User


class StudentRequestAPITests(APITestCase):
    def setUp(self) -> None:
        department = Department.objects.create(name="Santander", code="SAN")
        self.city = City.objects.create(name="Bucaramanga", department=department)
        self.other_city = City.objects.create(name="Floridablanca", department=department)
        self.uis = Institution.objects.create(
            name="Universidad Industrial de Santander", acronym="UIS", city=self.city
        )
        self.room = PropertyType.objects.create(name="habitacion")
        self.student = User.objects.create_user(
            email="student@example.com", password="secret123", name="Valentina Estudiante"
        )
        self.owner = User.objects.create_user(
            email="owner@example.com", password="secret123", name="Hernán Dueño", user_type=User.UserType.OWNER
        )
        self.admin = User.objects.create_user(
            email="admin@example.com", password="secret123", name="Admin", user_type=User.UserType.ADMIN
        )

    def payload(self, **overrides) -> dict:
        data = {
            "student_name": "Valentina Estudiante",
            "student_email": "student@example.com",
            "student_phone": "3001234567",
            "city_id": self.city.id,
            "institution_id": self.uis.id,
            "budget_max": "700000",
            "property_type_desired_id": self.room.id,
            "required_amenities": ["WiFi", "Lavadora"],
            "move_in_date": "2026-02-01",
            "contract_duration": 6,
        }
        data.update(overrides)
        return data

    def make_request(self, **overrides) -> StudentRequest:
        data = {
            "student": self.student,
            "student_name": "Valentina Estudiante",
            "student_email": "student@example.com",
            "student_phone": "3001234567",
            "city": self.city,
            "institution": self.uis,
            "budget_max": 700000,
            "property_type_desired": self.room,
            "move_in_date": "2026-02-01",
        }
        data.update(overrides)
        return StudentRequest.objects.create(**data)

    def test_anonymous_create(self) -> None:
        response = self.client.post(reverse("student_requests:student-request-list"), self.payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        request_obj = StudentRequest.objects.get()
        self.assertIsNone(request_obj.student)
        self.assertEqual(request_obj.status, StudentRequest.Status.OPEN)
        self.assertEqual(request_obj.required_amenities, ["WiFi", "Lavadora"])

    def test_authenticated_create_links_student(self) -> None:
        self.client.force_authenticate(self.student)
        response = self.client.post(reverse("student_requests:student-request-list"), self.payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(StudentRequest.objects.get().student, self.student)

    def test_required_fields(self) -> None:
        payload = self.payload()
        payload.pop("budget_max")
        response = self.client.post(reverse("student_requests:student-request-list"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["budget_max"][0], "Por favor complete todos los campos requeridos.")

    def test_single_open_request_per_student(self) -> None:
        self.make_request()
        self.client.force_authenticate(self.student)
        response = self.client.post(reverse("student_requests:student-request-list"), self.payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_institution_must_match_city(self) -> None:
        response = self.client.post(
            reverse("student_requests:student-request-list"),
            self.payload(city_id=self.other_city.id),
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("institution_id", response.data)

    def test_list_filters(self) -> None:
        self.make_request()
        self.make_request(student=None, city=self.other_city, institution=None, budget_max=1500000,
                          university_target="Universidad Santo Tomás")
        self.make_request(student=None, status=StudentRequest.Status.CLOSED)
        self.client.force_authenticate(self.owner)
        url = reverse("student_requests:student-request-list")

        self.assertEqual(self.client.get(url).data["count"], 2)
        self.assertEqual(self.client.get(url, {"status": "closed"}).data["count"], 1)
        self.assertEqual(self.client.get(url, {"city": self.other_city.id}).data["count"], 1)
        self.assertEqual(self.client.get(url, {"max_budget": 800000}).data["count"], 1)
        self.assertEqual(self.client.get(url, {"university": "UIS"}).data["count"], 1)
        self.assertEqual(self.client.get(url, {"university": "santo tom"}).data["count"], 1)
        self.assertEqual(self.client.get(url, {"property_type": "habitacion"}).data["count"], 2)

    def test_list_requires_authentication(self) -> None:
        response = self.client.get(reverse("student_requests:student-request-list"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_creator_closes_request(self) -> None:
        request_obj = self.make_request()
        self.client.force_authenticate(self.owner)
        url = reverse("student_requests:student-request-close", args=[request_obj.id])
        self.assertEqual(self.client.post(url).status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.student)
        response = self.client.post(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], "closed")
        self.assertEqual(self.client.post(url).status_code, status.HTTP_400_BAD_REQUEST)

    def test_creator_updates_request(self) -> None:
        request_obj = self.make_request()
        self.client.force_authenticate(self.student)
        response = self.client.patch(
            reverse("student_requests:student-request-detail", args=[request_obj.id]),
            {"budget_max": "900000"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        request_obj.refresh_from_db()
        self.assertEqual(int(request_obj.budget_max), 900000)

    def test_only_admin_deletes(self) -> None:
        request_obj = self.make_request()
        url = reverse("student_requests:student-request-detail", args=[request_obj.id])
        self.client.force_authenticate(self.student)
        self.assertEqual(self.client.delete(url).status_code, status.HTTP_403_FORBIDDEN)
        self.client.force_authenticate(self.admin)
        self.assertEqual(self.client.delete(url).status_code, status.HTTP_204_NO_CONTENT)

    def test_mine(self) -> None:
        self.make_request()
        self.make_request(student=None)
        self.client.force_authenticate(self.student)
        response = self.client.get(reverse("student_requests:student-request-mine"))
        self.assertEqual(len(response.data), 1)
