import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from guardarecursos.api import deps
from guardarecursos.core import permissions as perms
from guardarecursos.schemas import InitResultado, InitEstado
from guardarecursos.services.init_data import init_data_service
from guardarecursos.models import Usuario as UsuarioModel

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post(
    "/data",
    response_model=InitResultado,
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_USUARIOS, perms.ACCION_CREAR))],
    summary="Inicializar los catálogos base",
)
def init_data(
    db: Session = Depends(deps.get_db),
    current_user: UsuarioModel = Depends(deps.get_current_active_user),
) -> Any:
    """
    Crea los roles, tipos de actividad, ecosistemas y departamentos que falten.
    Puede ejecutarse varias veces sin duplicar registros.
    """
    logger.info(f"Usuario '{current_user.email}' solicita la inicialización de datos base.")
    try:
        created = init_data_service.inicializar(db)
        db.commit()
        return {"created": created}
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado inicializando datos base: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor al inicializar los datos.")


@router.get(
    "/check",
    response_model=InitEstado,
    summary="Verificar si los datos base existen",
)
def check_init(db: Session = Depends(deps.get_db)) -> Any:
    missing = init_data_service.verificar(db)
    return {"initialized": not missing, "missing": missing}
