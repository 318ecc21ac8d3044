import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from guardarecursos.api import deps
from guardarecursos.core import permissions as perms
from guardarecursos.schemas import (
    Incidente, IncidenteCreate, IncidenteEstadoUpdate, Seguimiento, SeguimientoCreate, Msg,
)
from guardarecursos.schemas.enums import EstadoIncidenteEnum, GravedadIncidenteEnum
from guardarecursos.services.incidente import incidente_service
from guardarecursos.services.seguimiento import seguimiento_service
from guardarecursos.services.usuario import usuario_service
from guardarecursos.models import Usuario as UsuarioModel

logger = logging.getLogger(__name__)
router = APIRouter()

# ==============================================================================
# Endpoints para INCIDENTES
# ==============================================================================

@router.get(
    "/",
    response_model=List[Incidente],
    summary="Listar incidentes",
)
def read_incidentes(
    db: Session = Depends(deps.get_db),
    estado: Optional[EstadoIncidenteEnum] = Query(None),
    gravedad: Optional[GravedadIncidenteEnum] = Query(None),
    usuario_id: Optional[int] = Query(None, description="Filtrar por usuario que reporta"),
    current_user: UsuarioModel = Depends(deps.PermissionChecker(perms.MOD_INCIDENTES, perms.ACCION_VER)),
) -> Any:
    """Un guardarecurso solo ve los incidentes que reportó."""
    if usuario_service.es_guardarecurso(current_user):
        usuario_id = current_user.id
    return incidente_service.listar(db, estado=estado, gravedad=gravedad, usuario_id=usuario_id)


@router.get(
    "/{incidente_id}",
    response_model=Incidente,
    summary="Obtener un incidente con su seguimiento",
)
def read_incidente(
    incidente_id: int,
    db: Session = Depends(deps.get_db),
    current_user: UsuarioModel = Depends(deps.PermissionChecker(perms.MOD_INCIDENTES, perms.ACCION_VER)),
) -> Any:
    incidente = incidente_service.get_or_404(db, id=incidente_id)
    if usuario_service.es_guardarecurso(current_user) and incidente.usuario_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Incidente con ID {incidente_id} no encontrado.")
    return incidente


@router.post(
    "/",
    response_model=Incidente,
    status_code=status.HTTP_201_CREATED,
    summary="Reportar un incidente",
)
def create_incidente(
    *,
    db: Session = Depends(deps.get_db),
    incidente_in: IncidenteCreate,
    current_user: UsuarioModel = Depends(deps.PermissionChecker(perms.MOD_INCIDENTES, perms.ACCION_CREAR)),
) -> Any:
    """
    Registra un incidente en estado Reportado. Sin `area_id` se usa el área
    del usuario que reporta.
    """
    try:
        incidente = incidente_service.create(db, obj_in=incidente_in, usuario=current_user)
        db.commit()
        db.refresh(incidente)
        logger.info(f"Incidente '{incidente.titulo}' (ID: {incidente.id}) reportado por '{current_user.email}'.")
        return incidente
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado reportando incidente '{incidente_in.titulo}': {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor al reportar el incidente.")


@router.patch(
    "/{incidente_id}/estado",
    response_model=Incidente,
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_INCIDENTES, perms.ACCION_EDITAR))],
    summary="Cambiar el estado de un incidente",
)
def update_estado_incidente(
    *,
    db: Session = Depends(deps.get_db),
    incidente_id: int,
    estado_in: IncidenteEstadoUpdate,
    current_user: UsuarioModel = Depends(deps.get_current_active_user),
) -> Any:
    incidente = incidente_service.get_or_404(db, id=incidente_id)
    try:
        incidente = incidente_service.cambiar_estado(db, db_obj=incidente, estado=estado_in.estado)
        db.commit()
        db.refresh(incidente)
        return incidente
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado cambiando estado del incidente ID {incidente_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor al cambiar el estado del incidente.")


@router.delete(
    "/{incidente_id}",
    response_model=Msg,
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_INCIDENTES, perms.ACCION_ELIMINAR))],
    summary="Eliminar un incidente",
)
def delete_incidente(
    *,
    db: Session = Depends(deps.get_db),
    incidente_id: int,
    current_user: UsuarioModel = Depends(deps.get_current_active_user),
) -> Any:
    try:
        incidente_service.remove(db, id=incidente_id)
        db.commit()
        logger.info(f"Incidente ID {incidente_id} eliminado por '{current_user.email}'.")
        return {"msg": "Incidente eliminado correctamente."}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado eliminando incidente ID {incidente_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor al eliminar el incidente.")


@router.post(
    "/{incidente_id}/seguimiento",
    response_model=Seguimiento,
    status_code=status.HTTP_201_CREATED,
    summary="Agregar una nota de seguimiento a un incidente",
)
def create_seguimiento_incidente(
    *,
    db: Session = Depends(deps.get_db),
    incidente_id: int,
    seguimiento_in: SeguimientoCreate,
    current_user: UsuarioModel = Depends(deps.PermissionChecker(perms.MOD_SEGUIMIENTO, perms.ACCION_CREAR)),
) -> Any:
    incidente = incidente_service.get_or_404(db, id=incidente_id)
    try:
        seguimiento = seguimiento_service.crear_para_incidente(
            db, incidente=incidente, obj_in=seguimiento_in, usuario=current_user
        )
        db.commit()
        db.refresh(seguimiento)
        return seguimiento
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado agregando seguimiento al incidente ID {incidente_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor al registrar el seguimiento.")
