import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from guardarecursos.api import deps
from guardarecursos.core import security
from guardarecursos.models.usuario import Usuario as UsuarioModel
from guardarecursos.schemas.common import Msg
from guardarecursos.schemas.token import Token
from guardarecursos.schemas.password import CambioContrasenaPropia
from guardarecursos.services.usuario import usuario_service

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/login/access-token", response_model=Token, summary="Iniciar sesión")
def login_access_token(
    request: Request,
    db: Session = Depends(deps.get_db),
    form_data: OAuth2PasswordRequestForm = Depends()
) -> Any:
    """
    Login con correo electrónico (campo `username`) y contraseña.
    Solo los usuarios en estado Activo reciben un token.
    """
    ip_address = request.client.host if request.client else "N/A"
    email_attempt = form_data.username.strip().lower()
    logger.info(f"Intento de login para '{email_attempt}' desde IP {ip_address}")

    user = usuario_service.authenticate(db, email=email_attempt, password=form_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Correo electrónico o contraseña incorrectos.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not usuario_service.is_active(user):
        logger.warning(f"Login rechazado para '{email_attempt}': usuario en estado '{user.estado}'.")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"El usuario está {user.estado.lower()}. Contacte al administrador.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        access_token = security.create_access_token(subject=user.id)
        usuario_service.handle_successful_login(db, user=user)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Error crítico al crear sesión para {user.email}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error interno del servidor al procesar el login.")

    logger.info(f"Login exitoso para '{email_attempt}'.")
    return {"access_token": access_token, "token_type": "bearer"}


@router.post(
    "/cambiar-contrasena",
    response_model=Msg,
    summary="Cambiar la contraseña propia"
)
def cambiar_contrasena_propia(
    *,
    datos: CambioContrasenaPropia,
    db: Session = Depends(deps.get_db),
    current_user: UsuarioModel = Depends(deps.get_current_active_user)
):
    """
    Permite al usuario autenticado cambiar su propia contraseña. Es la única
    vía para cambiar la contraseña de un Administrador.
    """
    logger.info(f"Usuario '{current_user.email}' ha solicitado cambiar su contraseña.")
    try:
        usuario_service.cambiar_contrasena_propia(db, user=current_user, datos=datos)
        db.commit()
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error al cambiar la contraseña para '{current_user.email}'. Error: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ocurrió un error interno al cambiar la contraseña."
        )
    return {"msg": "Contraseña actualizada correctamente."}
