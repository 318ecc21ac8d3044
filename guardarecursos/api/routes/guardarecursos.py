import logging
from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from guardarecursos.api import deps
from guardarecursos.core import permissions as perms
from guardarecursos.schemas import Usuario, GuardarecursoCreate, GuardarecursoUpdate, UsuarioEstadoUpdate
from guardarecursos.services.usuario import usuario_service
from guardarecursos.models import Usuario as UsuarioModel

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get(
    "/",
    response_model=List[Usuario],
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_REGISTRO_GUARDA, perms.ACCION_VER))],
    summary="Listar guardarecursos",
)
def read_guardarecursos(db: Session = Depends(deps.get_db)) -> Any:
    return usuario_service.listar_guardarecursos(db)


@router.post(
    "/",
    response_model=Usuario,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_REGISTRO_GUARDA, perms.ACCION_CREAR))],
    summary="Registrar un guardarecurso",
)
def create_guardarecurso(
    *,
    db: Session = Depends(deps.get_db),
    guarda_in: GuardarecursoCreate,
    current_user: UsuarioModel = Depends(deps.get_current_active_user)
) -> Any:
    """
    Registra un guardarecurso en estado Activo. El correo y el DPI deben ser únicos.
    """
    logger.info(f"Usuario '{current_user.email}' registrando guardarecurso '{guarda_in.email}'.")
    try:
        guarda = usuario_service.crear_guardarecurso(db, obj_in=guarda_in)
        db.commit()
        db.refresh(guarda)
        logger.info(f"Guardarecurso '{guarda.email}' (ID: {guarda.id}) registrado.")
        return guarda
    except HTTPException as http_exc:
        db.rollback()
        logger.warning(f"Error HTTP al registrar guardarecurso '{guarda_in.email}': {http_exc.detail}")
        raise http_exc
    except IntegrityError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado registrando guardarecurso '{guarda_in.email}': {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor al registrar el guardarecurso.")


@router.put(
    "/{guardarecurso_id}",
    response_model=Usuario,
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_REGISTRO_GUARDA, perms.ACCION_EDITAR))],
    summary="Actualizar teléfono y área de un guardarecurso",
)
def update_guardarecurso(
    *,
    db: Session = Depends(deps.get_db),
    guardarecurso_id: int,
    guarda_in: GuardarecursoUpdate,
    current_user: UsuarioModel = Depends(deps.get_current_active_user)
) -> Any:
    guarda = usuario_service.get_guardarecurso_or_404(db, id=guardarecurso_id)
    try:
        guarda = usuario_service.actualizar_guardarecurso(db, db_obj=guarda, obj_in=guarda_in)
        db.commit()
        db.refresh(guarda)
        logger.info(f"Guardarecurso ID {guardarecurso_id} actualizado por '{current_user.email}'.")
        return guarda
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado actualizando guardarecurso ID {guardarecurso_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor al actualizar el guardarecurso.")


@router.patch(
    "/{guardarecurso_id}/estado",
    response_model=Usuario,
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_REGISTRO_GUARDA, perms.ACCION_EDITAR))],
    summary="Cambiar el estado de un guardarecurso",
)
def update_estado_guardarecurso(
    *,
    db: Session = Depends(deps.get_db),
    guardarecurso_id: int,
    estado_in: UsuarioEstadoUpdate,
    current_user: UsuarioModel = Depends(deps.get_current_active_user)
) -> Any:
    """Activo, Suspendido o Desactivado. Solo los Activos pueden iniciar sesión y recibir actividades."""
    guarda = usuario_service.get_guardarecurso_or_404(db, id=guardarecurso_id)
    try:
        guarda = usuario_service.cambiar_estado(db, db_obj=guarda, estado=estado_in.estado)
        db.commit()
        db.refresh(guarda)
        logger.info(f"Guardarecurso ID {guardarecurso_id} pasa a '{guarda.estado}' por '{current_user.email}'.")
        return guarda
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado cambiando estado del guardarecurso ID {guardarecurso_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor al cambiar el estado.")
