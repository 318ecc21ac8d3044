from typing import Any

from fastapi import APIRouter, Depends

from guardarecursos.api import deps
from guardarecursos.core import permissions as perms
from guardarecursos.schemas import MisPermisos
from guardarecursos.models import Usuario as UsuarioModel

router = APIRouter()


@router.get(
    "/mis-permisos",
    response_model=MisPermisos,
    summary="Permisos del usuario actual",
)
def read_mis_permisos(current_user: UsuarioModel = Depends(deps.get_current_active_user)) -> Any:
    """Fila de la matriz de permisos del rol del usuario, por módulo y acción."""
    rol = current_user.rol.nombre if current_user.rol else ""
    return {
        "rol": rol,
        "modulos": perms.get_role_permissions(rol),
        "modulos_accesibles": perms.get_accessible_modules(rol),
    }
