import logging
from datetime import date
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from guardarecursos.api import deps
from guardarecursos.core import permissions as perms
from guardarecursos.schemas import Ruta
from guardarecursos.services.actividad import actividad_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get(
    "/",
    response_model=List[Ruta],
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_GEOLOCALIZACION, perms.ACCION_VER))],
    summary="Rutas de patrullajes completados",
)
def read_rutas(
    db: Session = Depends(deps.get_db),
    guardarecurso_id: Optional[int] = Query(None, description="Filtrar por guardarecurso"),
    fecha_desde: Optional[date] = Query(None, description="Fecha de finalización desde (inclusive)"),
    fecha_hasta: Optional[date] = Query(None, description="Fecha de finalización hasta (inclusive)"),
) -> Any:
    """
    Lista los patrullajes completados con sus puntos GPS. `tiene_gps` indica
    si el recorrido tiene al menos un punto registrado.
    """
    rutas = actividad_service.listar_rutas(
        db, usuario_id=guardarecurso_id, fecha_desde=fecha_desde, fecha_hasta=fecha_hasta
    )
    logger.debug(f"Rutas encontradas: {len(rutas)}")
    return rutas
