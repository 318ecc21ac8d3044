from typing import Generator
from fastapi import Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
import logging

from guardarecursos.core.config import settings
from guardarecursos.core import permissions as perms
from guardarecursos.core import security
from guardarecursos.db.session import SessionLocal

from guardarecursos.models.usuario import Usuario
from guardarecursos.services.usuario import usuario_service

logger = logging.getLogger(__name__)


# --- Dependencia para la Sesión de Base de Datos ---
def get_db() -> Generator[Session, None, None]:
    """Dependency para obtener la sesión de base de datos."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

# --- Dependencia para Autenticación ---
reusable_oauth2 = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/auth/login/access-token"
)

def get_current_user(
    db: Session = Depends(get_db), token: str = Depends(reusable_oauth2)
) -> Usuario:
    """Obtiene el usuario actual a partir del token JWT."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="No se pudieron validar las credenciales",
        headers={"WWW-Authenticate": "Bearer"},
    )
    token_data = security.decode_access_token(token)
    if not token_data or not token_data.sub:
        logger.warning("Token inválido o expirado.")
        raise credentials_exception

    user = db.get(Usuario, token_data.sub)
    if not user:
        logger.warning(f"Usuario no encontrado para ID {token_data.sub} en token válido.")
        raise credentials_exception
    return user

def get_current_active_user(
    current_user: Usuario = Depends(get_current_user),
) -> Usuario:
    """
    Obtiene el usuario actual y verifica que esté Activo.
    Un usuario suspendido o desactivado pierde la sesión (401), lo que el
    cliente interpreta como cierre de sesión forzado.
    """
    if not usuario_service.is_active(current_user):
        logger.warning(f"Sesión rechazada: usuario '{current_user.email}' (ID: {current_user.id}) en estado '{current_user.estado}'.")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="La sesión ya no es válida: el usuario no está activo.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return current_user


class PermissionChecker:
    """
    Dependencia de FastAPI que aplica la matriz de permisos rol -> módulo -> acción.
    """
    def __init__(self, modulo: str, accion: str = perms.ACCION_VER):
        if accion not in perms.ACCIONES:
            logger.error(f"PermissionChecker inicializado con una acción desconocida: '{accion}'.")
            raise ValueError(f"Acción desconocida: {accion}")
        self.modulo = modulo
        self.accion = accion

    def __call__(self, request: Request, current_user: Usuario = Depends(get_current_active_user)) -> Usuario:
        rol = current_user.rol.nombre if current_user.rol else None
        logger.debug(f"PermissionChecker: '{current_user.email}' ({rol}) en '{request.url.path}'. Requerido: {self.modulo}/{self.accion}")

        if not perms.can_perform_action(rol, self.modulo, self.accion):
            logger.warning(f"Acceso denegado a '{current_user.email}'. Rol: '{rol}'. Requerido: {self.modulo}/{self.accion}.")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="No tiene permiso para realizar esta acción."
            )
        return current_user
