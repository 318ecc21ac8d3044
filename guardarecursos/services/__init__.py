"""
Módulo de Servicios

Este paquete contiene la lógica de negocio y las interacciones
con la base de datos para las diferentes entidades de la aplicación.

Cada módulo define un servicio (una instancia de clase) que encapsula
las operaciones CRUD y las reglas propias de su entidad. Ningún servicio
realiza commit: la transacción la cierra la ruta.
"""

from .rol import rol_service
from .catalogo import departamento_service, ecosistema_service, tipo_actividad_service
from .usuario import usuario_service
from .area import area_service
from .equipo import equipo_service
from .seguimiento import seguimiento_service
from .hallazgo import hallazgo_service
from .incidente import incidente_service
from .actividad import actividad_service
from .dashboard import dashboard_service
from .init_data import init_data_service

__all__ = [
    "rol_service",
    "departamento_service",
    "ecosistema_service",
    "tipo_actividad_service",
    "usuario_service",
    "area_service",
    "equipo_service",
    "seguimiento_service",
    "hallazgo_service",
    "incidente_service",
    "actividad_service",
    "dashboard_service",
    "init_data_service",
]
