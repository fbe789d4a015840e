from django.core.management.base import BaseCommand  # type: ignore
from django.db import transaction  # type: ignore

from apps.administration.models import SystemConfig
from apps.administration.seed_data import AMENITIES, COMMON_AREAS, DEPARTMENTS, PROPERTY_TYPES
from apps.locations.models import City, Department
from apps.properties.models import Amenity, CommonArea, PropertyType


class Command(BaseCommand):
    help = 'Carga departamentos, ciudades, tipos de inmueble, comodidades, zonas comunes y la configuración por defecto'

    @transaction.atomic
    def handle(self, *args, **options):
        departments_created = cities_created = 0
        for name, code, cities in DEPARTMENTS:
            department, created = Department.objects.get_or_create(code=code, defaults={'name': name})
            departments_created += created
            for city_name in cities:
                _, created = City.objects.get_or_create(department=department, name=city_name)
                cities_created += created

        types_created = 0
        for name, description in PROPERTY_TYPES:
            _, created = PropertyType.objects.get_or_create(name=name, defaults={'description': description})
            types_created += created

        amenities_created = 0
        for name, icon in AMENITIES:
            _, created = Amenity.objects.get_or_create(name=name, defaults={'icon': icon})
            amenities_created += created

        common_areas_created = 0
        for name, icon in COMMON_AREAS:
            _, created = CommonArea.objects.get_or_create(name=name, defaults={'icon': icon})
            common_areas_created += created

        SystemConfig.load()

        self.stdout.write(
            f"Departamentos: {departments_created}, ciudades: {cities_created}, "
            f"tipos: {types_created}, comodidades: {amenities_created}, "
            f"zonas comunes: {common_areas_created}"
        )
        self.stdout.write(self.style.SUCCESS('Datos de referencia cargados'))
