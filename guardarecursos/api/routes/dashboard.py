import logging
from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from guardarecursos.api import deps
from guardarecursos.core import permissions as perms
from guardarecursos.schemas import DashboardStats, AreaDashboard
from guardarecursos.services.dashboard import dashboard_service
from guardarecursos.models import Usuario as UsuarioModel

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get(
    "/stats",
    response_model=DashboardStats,
    summary="Obtener métricas del dashboard",
    response_description="Conteos de áreas, guardarecursos y actividades."
)
def read_dashboard_stats(
    db: Session = Depends(deps.get_db),
    current_user: UsuarioModel = Depends(deps.PermissionChecker(perms.MOD_DASHBOARD, perms.ACCION_VER)),
) -> Any:
    """
    Áreas activas, guardarecursos activos, total de actividades y actividades
    programadas para hoy (hora local UTC-6).
    """
    logger.info(f"Usuario '{current_user.email}' solicitando métricas del dashboard.")
    try:
        return dashboard_service.get_stats(db)
    except Exception as e:
        logger.error(f"Error al generar las métricas del dashboard: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error interno del servidor al generar los datos del dashboard."
        )


@router.get(
    "/areas",
    response_model=List[AreaDashboard],
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_DASHBOARD, perms.ACCION_VER))],
    summary="Áreas activas para el mapa del dashboard",
)
def read_dashboard_areas(db: Session = Depends(deps.get_db)) -> Any:
    try:
        return dashboard_service.get_areas(db)
    except Exception as e:
        logger.error(f"Error al obtener las áreas del dashboard: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error interno del servidor al obtener las áreas del dashboard."
        )
