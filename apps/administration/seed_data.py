"""Reference data loaded by ``manage.py seed_reference_data``."""

from __future__ import annotations

# (name, code, [cities])
DEPARTMENTS: list[tuple[str, str, list[str]]] = [
    ("Amazonas", "AMA", ["Leticia"]),
    ("Antioquia", "ANT", ["Medellín", "Bello", "Itagüí", "Envigado", "Rionegro", "Sabaneta"]),
    ("Arauca", "ARA", ["Arauca"]),
    ("Atlántico", "ATL", ["Barranquilla", "Soledad", "Malambo"]),
    ("Bogotá D.C.", "BOG", ["Bogotá"]),
    ("Bolívar", "BOL", ["Cartagena", "Magangué"]),
    ("Boyacá", "BOY", ["Tunja", "Duitama", "Sogamoso"]),
    ("Caldas", "CAL", ["Manizales"]),
    ("Caquetá", "CAQ", ["Florencia"]),
    ("Casanare", "CAS", ["Yopal"]),
    ("Cauca", "CAU", ["Popayán"]),
    ("Cesar", "CES", ["Valledupar", "Aguachica"]),
    ("Chocó", "CHO", ["Quibdó"]),
    ("Córdoba", "COR", ["Montería"]),
    ("Cundinamarca", "CUN", ["Soacha", "Chía", "Zipaquirá", "Fusagasugá", "Girardot"]),
    ("Guainía", "GUA", ["Inírida"]),
    ("Guaviare", "GUV", ["San José del Guaviare"]),
    ("Huila", "HUI", ["Neiva", "Pitalito"]),
    ("La Guajira", "LAG", ["Riohacha", "Maicao"]),
    ("Magdalena", "MAG", ["Santa Marta"]),
    ("Meta", "MET", ["Villavicencio"]),
    ("Nariño", "NAR", ["Pasto", "Ipiales"]),
    ("Norte de Santander", "NSA", ["Cúcuta", "Pamplona", "Ocaña"]),
    ("Putumayo", "PUT", ["Mocoa"]),
    ("Quindío", "QUI", ["Armenia"]),
    ("Risaralda", "RIS", ["Pereira", "Dosquebradas"]),
    ("San Andrés y Providencia", "SAP", ["San Andrés"]),
    ("Santander", "SAN", ["Bucaramanga", "Floridablanca", "Girón", "Piedecuesta", "Barrancabermeja"]),
    ("Sucre", "SUC", ["Sincelejo"]),
    ("Tolima", "TOL", ["Ibagué"]),
    ("Valle del Cauca", "VAL", ["Cali", "Palmira", "Tuluá", "Buenaventura"]),
    ("Vaupés", "VAU", ["Mitú"]),
    ("Vichada", "VID", ["Puerto Carreño"]),
]

PROPERTY_TYPES: list[tuple[str, str]] = [
    ("pension", "Habitación con alimentación incluida"),
    ("habitacion", "Habitación en vivienda compartida"),
    ("apartamento", "Apartamento completo"),
    ("aparta-estudio", "Apartamento de un solo ambiente"),
]

# (name, icon)
AMENITIES: list[tuple[str, str]] = [
    ("WiFi", "wifi"),
    ("Parqueadero", "parking"),
    ("Piscina", "pool"),
    ("Gimnasio", "gym"),
    ("Lavandería", "laundry"),
    ("Seguridad 24h", "security"),
    ("Ascensor", "elevator"),
    ("Balcón", "balcony"),
    ("Amoblado", "furnished"),
    ("Aire Acondicionado", "ac"),
    ("Cocina Equipada", "kitchen"),
    ("Baño Interno", "private-bathroom"),
    ("Closet", "closet"),
    ("Abanico", "fan"),
    ("Escritorio", "desk"),
    ("Ventana Exterior", "window"),
    ("Cama Incluida", "bed"),
    ("TV", "tv"),
]

# (name, icon)
COMMON_AREAS: list[tuple[str, str]] = [
    ("Cocina", "kitchen"),
    ("Sala", "sofa"),
    ("Comedor", "dining"),
    ("Patio de ropas", "laundry"),
    ("Terraza", "terrace"),
    ("Zona de estudio", "book"),
]
