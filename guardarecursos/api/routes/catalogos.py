import logging
from typing import Any, List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from guardarecursos.api import deps
from guardarecursos.schemas import Departamento, Ecosistema, TipoActividad
from guardarecursos.services.catalogo import (
    departamento_service,
    ecosistema_service,
    tipo_actividad_service,
)

logger = logging.getLogger(__name__)

# Lectura para cualquier usuario autenticado y activo
router = APIRouter(dependencies=[Depends(deps.get_current_active_user)])


@router.get("/ecosistemas", response_model=List[Ecosistema], summary="Listar ecosistemas")
def read_ecosistemas(db: Session = Depends(deps.get_db)) -> Any:
    return ecosistema_service.get_all_ordered(db)


@router.get("/departamentos", response_model=List[Departamento], summary="Listar departamentos")
def read_departamentos(db: Session = Depends(deps.get_db)) -> Any:
    return departamento_service.get_all_ordered(db)


@router.get("/tipos-actividad", response_model=List[TipoActividad], summary="Listar tipos de actividad")
def read_tipos_actividad(db: Session = Depends(deps.get_db)) -> Any:
    return tipo_actividad_service.get_all_ordered(db)
