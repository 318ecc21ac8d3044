import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from guardarecursos.api import deps
from guardarecursos.core import permissions as perms
from guardarecursos.schemas import Area, AreaCreate, AreaUpdate, AreaEstadoUpdate
from guardarecursos.schemas.enums import EstadoAreaEnum
from guardarecursos.services.area import area_service
from guardarecursos.models import Usuario as UsuarioModel

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get(
    "/",
    response_model=List[Area],
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_ASIGNACION_ZONAS, perms.ACCION_VER))],
    summary="Listar áreas protegidas",
)
def read_areas(
    db: Session = Depends(deps.get_db),
    estado: Optional[EstadoAreaEnum] = Query(None, description="Filtrar por estado"),
) -> Any:
    return area_service.listar(db, estado=estado)


@router.get(
    "/{area_id}",
    response_model=Area,
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_ASIGNACION_ZONAS, perms.ACCION_VER))],
    summary="Obtener un área protegida",
)
def read_area(area_id: int, db: Session = Depends(deps.get_db)) -> Any:
    return area_service.get_or_404(db, id=area_id)


@router.post(
    "/",
    response_model=Area,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_ASIGNACION_ZONAS, perms.ACCION_CREAR))],
    summary="Crear un área protegida",
)
def create_area(
    *,
    db: Session = Depends(deps.get_db),
    area_in: AreaCreate,
    current_user: UsuarioModel = Depends(deps.get_current_active_user)
) -> Any:
    """
    Crea un área protegida. El departamento y el ecosistema se crean si no existen.
    """
    logger.info(f"Usuario '{current_user.email}' creando área protegida '{area_in.nombre}'.")
    try:
        area = area_service.create(db, obj_in=area_in)
        db.commit()
        db.refresh(area)
        logger.info(f"Área protegida '{area.nombre}' (ID: {area.id}) creada.")
        return area
    except HTTPException as http_exc:
        db.rollback()
        logger.warning(f"Error HTTP al crear área '{area_in.nombre}': {http_exc.detail}")
        raise http_exc
    except IntegrityError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado creando área '{area_in.nombre}': {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor al crear el área protegida.")


@router.put(
    "/{area_id}",
    response_model=Area,
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_ASIGNACION_ZONAS, perms.ACCION_EDITAR))],
    summary="Actualizar un área protegida",
)
def update_area(
    *,
    db: Session = Depends(deps.get_db),
    area_id: int,
    area_in: AreaUpdate,
    current_user: UsuarioModel = Depends(deps.get_current_active_user)
) -> Any:
    area = area_service.get_or_404(db, id=area_id)
    try:
        area = area_service.update(db, db_obj=area, obj_in=area_in)
        db.commit()
        db.refresh(area)
        logger.info(f"Área protegida ID {area_id} actualizada por '{current_user.email}'.")
        return area
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado actualizando área ID {area_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor al actualizar el área protegida.")


@router.patch(
    "/{area_id}/estado",
    response_model=Area,
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_ASIGNACION_ZONAS, perms.ACCION_EDITAR))],
    summary="Activar o desactivar un área protegida",
)
def update_estado_area(
    *,
    db: Session = Depends(deps.get_db),
    area_id: int,
    estado_in: AreaEstadoUpdate,
    current_user: UsuarioModel = Depends(deps.get_current_active_user)
) -> Any:
    """No se puede desactivar un área con guardarecursos Activos asignados."""
    area = area_service.get_or_404(db, id=area_id)
    try:
        area = area_service.cambiar_estado(db, db_obj=area, estado=estado_in.estado)
        db.commit()
        db.refresh(area)
        logger.info(f"Área protegida ID {area_id} pasa a '{area.estado}' por '{current_user.email}'.")
        return area
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado cambiando estado del área ID {area_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor al cambiar el estado del área.")
