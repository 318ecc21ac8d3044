import logging
from typing import List

from sqlalchemy.orm import Session

from guardarecursos.schemas.dashboard import AreaDashboard, DashboardStats
from guardarecursos.schemas.enums import EstadoAreaEnum

from .actividad import actividad_service
from .area import area_service
from .usuario import usuario_service

logger = logging.getLogger(__name__)


class DashboardService:
    def get_stats(self, db: Session) -> DashboardStats:
        logger.info("Obteniendo estadísticas para el dashboard.")

        total_areas = area_service.contar_activas(db)
        total_guardarecursos = usuario_service.contar_guardarecursos_activos(db)
        total_actividades = actividad_service.get_count(db)
        actividades_hoy = actividad_service.contar_programadas_hoy(db)
        logger.debug(
            f"Áreas activas: {total_areas}, guardarecursos activos: {total_guardarecursos}, "
            f"actividades: {total_actividades}, hoy: {actividades_hoy}"
        )

        return DashboardStats(
            total_areas_activas=total_areas,
            total_guardarecursos_activos=total_guardarecursos,
            total_actividades=total_actividades,
            actividades_hoy=actividades_hoy,
        )

    def get_areas(self, db: Session) -> List[AreaDashboard]:
        """Áreas activas con coordenadas, para el mapa del dashboard."""
        areas = area_service.listar(db, estado=EstadoAreaEnum.ACTIVO)
        return [
            AreaDashboard(
                id=area.id,
                nombre=area.nombre,
                latitud=area.latitud,
                longitud=area.longitud,
                descripcion=area.descripcion,
                extension=area.extension,
                departamento=area.departamento.nombre if area.departamento else "Sin departamento",
                ecosistema=area.ecosistema.nombre if area.ecosistema else "Sin ecosistema",
            )
            for area in areas
        ]


dashboard_service = DashboardService()
