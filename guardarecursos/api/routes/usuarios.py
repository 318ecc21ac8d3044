import logging
from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import EmailStr, TypeAdapter, ValidationError
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from guardarecursos.api import deps
from guardarecursos.core import permissions as perms
from guardarecursos.schemas import (
    Usuario, UsuarioCreate, UsuarioUpdate, UsuarioEstadoUpdate, CambioContrasenaAdmin, Msg,
)
from guardarecursos.services.usuario import usuario_service
from guardarecursos.models import Usuario as UsuarioModel

logger = logging.getLogger(__name__)
router = APIRouter()

_email_adapter = TypeAdapter(EmailStr)


@router.get(
    "/perfil/{email}",
    response_model=Usuario,
    summary="Obtener el perfil de un usuario por correo",
)
def read_perfil(
    email: str,
    db: Session = Depends(deps.get_db),
    current_user: UsuarioModel = Depends(deps.get_current_active_user),
) -> Any:
    """
    Devuelve el perfil asociado a un correo. Cada usuario puede consultar el
    suyo; consultar otros requiere acceso a gestión de usuarios o, para
    guardarecursos, al registro de guardarecursos.
    """
    try:
        email_normalizado = _email_adapter.validate_python(email.strip()).lower()
    except ValidationError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Formato de correo electrónico inválido.")

    user = usuario_service.get_by_email(db, email=email_normalizado)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Usuario no encontrado.")

    rol = current_user.rol.nombre if current_user.rol else None
    if user.id != current_user.id:
        puede_ver = perms.has_module_access(rol, perms.MOD_USUARIOS) or (
            usuario_service.es_guardarecurso(user) and perms.has_module_access(rol, perms.MOD_REGISTRO_GUARDA)
        )
        if not puede_ver:
            logger.warning(f"Usuario '{current_user.email}' intentó consultar el perfil de '{email_normalizado}'.")
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="No tiene permiso para realizar esta acción.")
    return user


@router.get(
    "/",
    response_model=List[Usuario],
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_USUARIOS, perms.ACCION_VER))],
    summary="Listar Administradores y Coordinadores",
)
def read_usuarios(db: Session = Depends(deps.get_db)) -> Any:
    """Usuarios del módulo de gestión (los guardarecursos se listan en su propio recurso)."""
    return usuario_service.listar_gestion(db)


@router.post(
    "/",
    response_model=Usuario,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_USUARIOS, perms.ACCION_CREAR))],
    summary="Crear un Coordinador",
    response_description="El usuario creado."
)
def create_usuario(
    *,
    db: Session = Depends(deps.get_db),
    user_in: UsuarioCreate,
    current_user: UsuarioModel = Depends(deps.get_current_active_user)
) -> Any:
    """
    Crea un usuario con rol Coordinador y estado Activo.
    """
    logger.info(f"Intento de creación de coordinador '{user_in.email}' por '{current_user.email}'")
    try:
        user = usuario_service.crear_coordinador(db, obj_in=user_in)
        db.commit()
        db.refresh(user)
        logger.info(f"Coordinador '{user.email}' (ID: {user.id}) creado exitosamente por '{current_user.email}'.")
        return user
    except HTTPException as http_exc:
        db.rollback()
        logger.warning(f"Error HTTP al crear usuario '{user_in.email}': {http_exc.detail}")
        raise http_exc
    except IntegrityError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado creando usuario '{user_in.email}': {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor al crear el usuario.")


@router.put(
    "/{usuario_id}",
    response_model=Usuario,
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_USUARIOS, perms.ACCION_EDITAR))],
    summary="Actualizar datos de un usuario",
)
def update_usuario(
    *,
    db: Session = Depends(deps.get_db),
    usuario_id: int,
    user_in: UsuarioUpdate,
    current_user: UsuarioModel = Depends(deps.get_current_active_user)
) -> Any:
    """Actualiza nombre, apellido, teléfono y correo."""
    user = usuario_service.get_or_404(db, id=usuario_id)
    try:
        user = usuario_service.actualizar_datos(db, db_obj=user, obj_in=user_in)
        db.commit()
        db.refresh(user)
        logger.info(f"Usuario ID {usuario_id} actualizado por '{current_user.email}'.")
        return user
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado actualizando usuario ID {usuario_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor al actualizar el usuario.")


@router.patch(
    "/{usuario_id}/estado",
    response_model=Usuario,
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_USUARIOS, perms.ACCION_EDITAR))],
    summary="Cambiar el estado de un usuario",
)
def update_estado_usuario(
    *,
    db: Session = Depends(deps.get_db),
    usuario_id: int,
    estado_in: UsuarioEstadoUpdate,
    current_user: UsuarioModel = Depends(deps.get_current_active_user)
) -> Any:
    """Activa, suspende o desactiva un usuario. Un usuario no puede cambiar su propio estado."""
    user = usuario_service.get_or_404(db, id=usuario_id)
    if user.id == current_user.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No puede cambiar el estado de su propio usuario.")
    try:
        user = usuario_service.cambiar_estado(db, db_obj=user, estado=estado_in.estado)
        db.commit()
        db.refresh(user)
        logger.info(f"Estado del usuario ID {usuario_id} cambiado a '{user.estado}' por '{current_user.email}'.")
        return user
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado cambiando estado del usuario ID {usuario_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor al cambiar el estado.")


@router.post(
    "/{usuario_id}/cambiar-contrasena",
    response_model=Msg,
    summary="Cambiar la contraseña de otro usuario",
)
def cambiar_contrasena_usuario(
    *,
    db: Session = Depends(deps.get_db),
    usuario_id: int,
    datos: CambioContrasenaAdmin,
    current_user: UsuarioModel = Depends(deps.get_current_active_user)
) -> Any:
    """
    Un Administrador puede cambiar la contraseña de Coordinadores y
    Guardarecursos; un Coordinador solo la de Guardarecursos. La contraseña
    de un Administrador no puede cambiarse por esta vía.
    """
    try:
        target = usuario_service.cambiar_contrasena_por_admin(
            db, actor=current_user, target_id=usuario_id, nueva_contrasena=datos.nueva_contrasena
        )
        db.commit()
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error al cambiar la contraseña del usuario ID {usuario_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Ocurrió un error interno al cambiar la contraseña.")
    return {"msg": f"Contraseña de {target.nombre_completo} actualizada correctamente."}
