import logging
from typing import Dict, List

from sqlalchemy.orm import Session

from guardarecursos.core.permissions import ROLES_SISTEMA
from guardarecursos.models.rol import Rol

from .catalogo import departamento_service, ecosistema_service, tipo_actividad_service
from .rol import rol_service

logger = logging.getLogger(__name__)

TIPOS_ACTIVIDAD = [
    "Patrullaje de Control y Vigilancia",
    "Actividades de Prevención y Atención de Incendios Forestales",
    "Mantenimiento de Área Protegida",
    "Reforestación de Área Protegida",
    "Mantenimiento de Reforestación",
]

ECOSISTEMAS = [
    "Bosque Tropical Húmedo",
    "Bosque Tropical Seco",
    "Bosque Nublado",
    "Humedales",
    "Manglares",
    "Sabanas",
    "Bosque Mixto",
    "Matorral Volcánico",
    "Karst",
]

DEPARTAMENTOS = [
    "Alta Verapaz", "Baja Verapaz", "Chimaltenango", "Chiquimula", "El Progreso",
    "Escuintla", "Guatemala", "Huehuetenango", "Izabal", "Jalapa", "Jutiapa",
    "Petén", "Quetzaltenango", "Quiché", "Retalhuleu", "Sacatepéquez",
    "San Marcos", "Santa Rosa", "Sololá", "Suchitepéquez", "Totonicapán", "Zacapa",
]


class InitDataService:
    """
    Crea los catálogos base (roles, tipos de actividad, ecosistemas y
    departamentos). Es idempotente: solo inserta lo que falta.
    """

    def inicializar(self, db: Session) -> Dict[str, List[str]]:
        """NO realiza db.commit()."""
        created: Dict[str, List[str]] = {"roles": [], "tipos_actividad": [], "ecosistemas": [], "departamentos": []}

        for nombre in ROLES_SISTEMA:
            if not rol_service.get_by_name(db, name=nombre):
                db.add(Rol(nombre=nombre))
                created["roles"].append(nombre)
        db.flush()

        catalogos = (
            ("tipos_actividad", tipo_actividad_service, TIPOS_ACTIVIDAD),
            ("ecosistemas", ecosistema_service, ECOSISTEMAS),
            ("departamentos", departamento_service, DEPARTAMENTOS),
        )
        for clave, servicio, nombres in catalogos:
            for nombre in nombres:
                _, nuevo = servicio.get_or_create(db, nombre=nombre)
                if nuevo:
                    created[clave].append(nombre)

        resumen = ", ".join(f"{clave}: {len(nombres)}" for clave, nombres in created.items())
        logger.info(f"Inicialización de datos base completada. Creados -> {resumen}")
        return created

    def verificar(self, db: Session) -> List[str]:
        """Devuelve los catálogos que aún no están completos."""
        missing = []
        if any(not rol_service.get_by_name(db, name=nombre) for nombre in ROLES_SISTEMA):
            missing.append("roles")
        if tipo_actividad_service.get_count(db) == 0:
            missing.append("tipos_actividad")
        return missing


init_data_service = InitDataService()
