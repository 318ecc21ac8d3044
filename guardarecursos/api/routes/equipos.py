import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from guardarecursos.api import deps
from guardarecursos.core import permissions as perms
from guardarecursos.schemas import Equipo, EquipoCreate, EquipoUpdate, EquipoEstadoUpdate
from guardarecursos.services.equipo import equipo_service
from guardarecursos.services.usuario import usuario_service
from guardarecursos.models import Usuario as UsuarioModel

logger = logging.getLogger(__name__)
router = APIRouter()

# ==============================================================================
# Endpoints para EQUIPOS
# ==============================================================================

@router.get(
    "/",
    response_model=List[Equipo],
    summary="Listar equipos",
)
def read_equipos(
    db: Session = Depends(deps.get_db),
    usuario_id: Optional[int] = Query(None, description="Filtrar por guardarecurso asignado"),
    current_user: UsuarioModel = Depends(deps.PermissionChecker(perms.MOD_CONTROL_EQUIPOS, perms.ACCION_VER)),
) -> Any:
    """
    Lista el equipo de campo. Un guardarecurso solo ve el equipo que tiene asignado.
    """
    if usuario_service.es_guardarecurso(current_user):
        usuario_id = current_user.id
    return equipo_service.listar(db, usuario_id=usuario_id)


@router.post(
    "/",
    response_model=Equipo,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_CONTROL_EQUIPOS, perms.ACCION_CREAR))],
    summary="Registrar un equipo",
    response_description="El equipo creado."
)
def create_equipo(
    *,
    db: Session = Depends(deps.get_db),
    equipo_in: EquipoCreate,
    current_user: UsuarioModel = Depends(deps.get_current_active_user),
) -> Any:
    """
    Registra un equipo en estado Operativo. El código de inventario debe ser único.
    """
    logger.info(f"Usuario '{current_user.email}' intentando crear equipo '{equipo_in.nombre}'.")
    try:
        equipo = equipo_service.create(db, obj_in=equipo_in)
        db.commit()
        db.refresh(equipo)
        logger.info(f"Equipo '{equipo.nombre}' (ID: {equipo.id}) creado exitosamente por '{current_user.email}'.")
        return equipo
    except HTTPException as http_exc:
        db.rollback()
        logger.warning(f"Error HTTP al crear equipo '{equipo_in.nombre}': {http_exc.detail}")
        raise http_exc
    except IntegrityError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado creando equipo '{equipo_in.nombre}': {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor al crear el equipo.")


@router.put(
    "/{equipo_id}",
    response_model=Equipo,
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_CONTROL_EQUIPOS, perms.ACCION_EDITAR))],
    summary="Actualizar observaciones y asignación de un equipo",
)
def update_equipo(
    *,
    db: Session = Depends(deps.get_db),
    equipo_id: int,
    equipo_in: EquipoUpdate,
    current_user: UsuarioModel = Depends(deps.get_current_active_user),
) -> Any:
    """Un equipo en reparación no puede asignarse a un guardarecurso."""
    equipo = equipo_service.get_or_404(db, id=equipo_id)
    try:
        equipo = equipo_service.update(db, db_obj=equipo, obj_in=equipo_in)
        db.commit()
        db.refresh(equipo)
        logger.info(f"Equipo ID {equipo_id} actualizado por '{current_user.email}'.")
        return equipo
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado actualizando equipo ID {equipo_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor al actualizar el equipo.")


@router.patch(
    "/{equipo_id}/estado",
    response_model=Equipo,
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_CONTROL_EQUIPOS, perms.ACCION_EDITAR))],
    summary="Cambiar el estado de un equipo",
)
def update_estado_equipo(
    *,
    db: Session = Depends(deps.get_db),
    equipo_id: int,
    estado_in: EquipoEstadoUpdate,
    current_user: UsuarioModel = Depends(deps.get_current_active_user),
) -> Any:
    """Al pasar a 'En Reparación' el equipo queda sin guardarecurso asignado."""
    equipo = equipo_service.get_or_404(db, id=equipo_id)
    try:
        equipo = equipo_service.cambiar_estado(db, db_obj=equipo, estado=estado_in.estado)
        db.commit()
        db.refresh(equipo)
        logger.info(f"Equipo ID {equipo_id} pasa a '{equipo.estado}' por '{current_user.email}'.")
        return equipo
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado cambiando estado del equipo ID {equipo_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor al cambiar el estado del equipo.")
