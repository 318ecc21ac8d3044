import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from guardarecursos.api import deps
from guardarecursos.core import permissions as perms
from guardarecursos.schemas import (
    Hallazgo, HallazgoCreate, HallazgoEstadoUpdate, Seguimiento, SeguimientoCreate, Msg,
)
from guardarecursos.schemas.enums import EstadoHallazgoEnum, PrioridadHallazgoEnum
from guardarecursos.services.hallazgo import hallazgo_service
from guardarecursos.services.seguimiento import seguimiento_service
from guardarecursos.models import Usuario as UsuarioModel

logger = logging.getLogger(__name__)
router = APIRouter()

# ==============================================================================
# Endpoints para HALLAZGOS
# ==============================================================================

@router.get(
    "/",
    response_model=List[Hallazgo],
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_HALLAZGOS, perms.ACCION_VER))],
    summary="Listar hallazgos",
)
def read_hallazgos(
    db: Session = Depends(deps.get_db),
    estado: Optional[EstadoHallazgoEnum] = Query(None),
    prioridad: Optional[PrioridadHallazgoEnum] = Query(None),
    usuario_id: Optional[int] = Query(None, description="Filtrar por usuario que reporta"),
) -> Any:
    return hallazgo_service.listar(db, estado=estado, prioridad=prioridad, usuario_id=usuario_id)


@router.get(
    "/{hallazgo_id}",
    response_model=Hallazgo,
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_HALLAZGOS, perms.ACCION_VER))],
    summary="Obtener un hallazgo con su seguimiento",
)
def read_hallazgo(hallazgo_id: int, db: Session = Depends(deps.get_db)) -> Any:
    return hallazgo_service.get_or_404(db, id=hallazgo_id)


@router.post(
    "/",
    response_model=Hallazgo,
    status_code=status.HTTP_201_CREATED,
    summary="Reportar un hallazgo",
)
def create_hallazgo(
    *,
    db: Session = Depends(deps.get_db),
    hallazgo_in: HallazgoCreate,
    current_user: UsuarioModel = Depends(deps.PermissionChecker(perms.MOD_HALLAZGOS, perms.ACCION_CREAR)),
) -> Any:
    """Registra un hallazgo en estado Reportado a nombre del usuario actual."""
    try:
        hallazgo = hallazgo_service.create(db, obj_in=hallazgo_in, usuario=current_user)
        db.commit()
        db.refresh(hallazgo)
        logger.info(f"Hallazgo '{hallazgo.titulo}' (ID: {hallazgo.id}) reportado por '{current_user.email}'.")
        return hallazgo
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado reportando hallazgo '{hallazgo_in.titulo}': {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor al reportar el hallazgo.")


@router.patch(
    "/{hallazgo_id}/estado",
    response_model=Hallazgo,
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_HALLAZGOS, perms.ACCION_EDITAR))],
    summary="Cambiar el estado de un hallazgo",
)
def update_estado_hallazgo(
    *,
    db: Session = Depends(deps.get_db),
    hallazgo_id: int,
    estado_in: HallazgoEstadoUpdate,
    current_user: UsuarioModel = Depends(deps.get_current_active_user),
) -> Any:
    hallazgo = hallazgo_service.get_or_404(db, id=hallazgo_id)
    try:
        hallazgo = hallazgo_service.cambiar_estado(db, db_obj=hallazgo, estado=estado_in.estado)
        db.commit()
        db.refresh(hallazgo)
        logger.info(f"Hallazgo ID {hallazgo_id} pasa a '{hallazgo.estado}' por '{current_user.email}'.")
        return hallazgo
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado cambiando estado del hallazgo ID {hallazgo_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor al cambiar el estado del hallazgo.")


@router.delete(
    "/{hallazgo_id}",
    response_model=Msg,
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_HALLAZGOS, perms.ACCION_ELIMINAR))],
    summary="Eliminar un hallazgo",
)
def delete_hallazgo(
    *,
    db: Session = Depends(deps.get_db),
    hallazgo_id: int,
    current_user: UsuarioModel = Depends(deps.get_current_active_user),
) -> Any:
    try:
        hallazgo_service.remove(db, id=hallazgo_id)
        db.commit()
        logger.info(f"Hallazgo ID {hallazgo_id} eliminado por '{current_user.email}'.")
        return {"msg": "Hallazgo eliminado correctamente."}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado eliminando hallazgo ID {hallazgo_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor al eliminar el hallazgo.")


@router.post(
    "/{hallazgo_id}/seguimiento",
    response_model=Seguimiento,
    status_code=status.HTTP_201_CREATED,
    summary="Agregar una nota de seguimiento a un hallazgo",
)
def create_seguimiento_hallazgo(
    *,
    db: Session = Depends(deps.get_db),
    hallazgo_id: int,
    seguimiento_in: SeguimientoCreate,
    current_user: UsuarioModel = Depends(deps.PermissionChecker(perms.MOD_SEGUIMIENTO, perms.ACCION_CREAR)),
) -> Any:
    hallazgo = hallazgo_service.get_or_404(db, id=hallazgo_id)
    try:
        seguimiento = seguimiento_service.crear_para_hallazgo(
            db, hallazgo=hallazgo, obj_in=seguimiento_in, usuario=current_user
        )
        db.commit()
        db.refresh(seguimiento)
        return seguimiento
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado agregando seguimiento al hallazgo ID {hallazgo_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor al registrar el seguimiento.")
