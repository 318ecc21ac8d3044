import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session
from sqlalchemy import func, select
from fastapi import HTTPException, status

from guardarecursos.core.permissions import (
    ADMIN_ROLE_NAME,
    COORDINADOR_ROLE_NAME,
    GUARDARECURSO_ROLE_NAME,
)
from guardarecursos.core.password import MIN_PASSWORD_LENGTH, verify_password, get_password_hash
from guardarecursos.core.tiempo import ahora
from guardarecursos.models.area import Area
from guardarecursos.models.rol import Rol
from guardarecursos.models.usuario import Usuario
from guardarecursos.schemas.enums import EstadoUsuarioEnum
from guardarecursos.schemas.usuario import (
    GuardarecursoCreate,
    GuardarecursoUpdate,
    UsuarioCreate,
    UsuarioUpdate,
)
from guardarecursos.schemas.password import CambioContrasenaPropia

from .base_service import BaseService
from .rol import rol_service

logger = logging.getLogger(__name__)


class UsuarioService(BaseService[Usuario, UsuarioCreate, UsuarioUpdate]):
    """
    Servicio para gestionar Usuarios (administradores, coordinadores y
    guardarecursos). Incluye la lógica de contraseñas y las reglas por rol.
    """

    # ===============================================================
    # Consultas
    # ===============================================================
    def get_by_email(self, db: Session, *, email: str) -> Optional[Usuario]:
        """Obtiene un usuario por su correo electrónico (sin distinguir mayúsculas)."""
        statement = select(self.model).where(self.model.email == email.strip().lower())
        return db.execute(statement).scalar_one_or_none()

    def get_by_dpi(self, db: Session, *, dpi: str) -> Optional[Usuario]:
        statement = select(self.model).where(self.model.dpi == dpi)
        return db.execute(statement).scalar_one_or_none()

    def _listar_por_roles(self, db: Session, roles: List[str]) -> List[Usuario]:
        statement = (
            select(self.model)
            .join(Rol, self.model.rol_id == Rol.id)
            .where(Rol.nombre.in_(roles))
            .order_by(self.model.nombre, self.model.apellido)
        )
        return list(db.execute(statement).scalars().unique().all())

    def listar_gestion(self, db: Session) -> List[Usuario]:
        """Usuarios del módulo de gestión: Administradores y Coordinadores."""
        return self._listar_por_roles(db, [ADMIN_ROLE_NAME, COORDINADOR_ROLE_NAME])

    def listar_guardarecursos(self, db: Session) -> List[Usuario]:
        return self._listar_por_roles(db, [GUARDARECURSO_ROLE_NAME])

    def contar_guardarecursos_activos(self, db: Session) -> int:
        statement = (
            select(func.count(self.model.id))
            .join(Rol, self.model.rol_id == Rol.id)
            .where(Rol.nombre == GUARDARECURSO_ROLE_NAME, self.model.estado == EstadoUsuarioEnum.ACTIVO.value)
        )
        return db.execute(statement).scalar_one_or_none() or 0

    def es_guardarecurso(self, user: Usuario) -> bool:
        return bool(user.rol) and user.rol.nombre == GUARDARECURSO_ROLE_NAME

    def get_guardarecurso_or_404(self, db: Session, *, id: int) -> Usuario:
        """Obtiene un usuario con rol Guardarecurso o lanza 404."""
        user = self.get(db, id=id)
        if not user or not self.es_guardarecurso(user):
            logger.warning(f"Guardarecurso con ID {id} no encontrado.")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Guardarecurso con ID {id} no encontrado.")
        return user

    # ===============================================================
    # Validaciones de unicidad
    # ===============================================================
    def _validar_email_unico(self, db: Session, email: str, detail: str, excluir_id: Optional[int] = None) -> None:
        existente = self.get_by_email(db, email=email)
        if existente and existente.id != excluir_id:
            logger.warning(f"Correo electrónico duplicado: {email}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

    def _validar_dpi_unico(self, db: Session, dpi: Optional[str], detail: str) -> None:
        if dpi and self.get_by_dpi(db, dpi=dpi):
            logger.warning(f"DPI duplicado: {dpi}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

    def _validar_area(self, db: Session, area_id: Optional[int]) -> None:
        if area_id is not None and not db.get(Area, area_id):
            logger.warning(f"Área con ID {area_id} no encontrada al asignar guardarecurso.")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Área con ID {area_id} no encontrada.")

    # ===============================================================
    # Creación y edición
    # ===============================================================
    def _crear_con_rol(self, db: Session, *, datos: Dict[str, Any], rol_nombre: str) -> Usuario:
        rol = rol_service.get_by_name_or_500(db, name=rol_nombre)
        datos["hashed_password"] = get_password_hash(datos.pop("password"))
        datos["rol_id"] = rol.id
        datos["estado"] = EstadoUsuarioEnum.ACTIVO.value
        db_obj = self.model(**datos)
        db.add(db_obj)
        db.flush()
        logger.info(f"Usuario '{db_obj.email}' con rol {rol_nombre} preparado para ser creado.")
        return db_obj

    def crear_coordinador(self, db: Session, *, obj_in: UsuarioCreate) -> Usuario:
        """
        Crea un usuario con rol Coordinador y estado Activo.
        NO realiza db.commit().
        """
        self._validar_email_unico(db, obj_in.email, "Ya existe un usuario con este correo electrónico")
        self._validar_dpi_unico(db, obj_in.dpi, "Ya existe un usuario con este DPI")
        return self._crear_con_rol(db, datos=obj_in.model_dump(), rol_nombre=COORDINADOR_ROLE_NAME)

    def crear_administrador(self, db: Session, *, obj_in: UsuarioCreate) -> Usuario:
        """Solo para el arranque del sistema (scripts/create_superuser.py). NO realiza db.commit()."""
        self._validar_email_unico(db, obj_in.email, "Ya existe un usuario con este correo electrónico")
        return self._crear_con_rol(db, datos=obj_in.model_dump(), rol_nombre=ADMIN_ROLE_NAME)

    def crear_guardarecurso(self, db: Session, *, obj_in: GuardarecursoCreate) -> Usuario:
        """
        Crea un guardarecurso, opcionalmente asignado a un área.
        NO realiza db.commit().
        """
        self._validar_email_unico(db, obj_in.email, "Ya existe un guardarecurso con este correo electrónico")
        self._validar_dpi_unico(db, obj_in.dpi, "Ya existe un guardarecurso con este DPI")
        self._validar_area(db, obj_in.area_id)
        return self._crear_con_rol(db, datos=obj_in.model_dump(), rol_nombre=GUARDARECURSO_ROLE_NAME)

    def actualizar_datos(self, db: Session, *, db_obj: Usuario, obj_in: UsuarioUpdate) -> Usuario:
        """Actualiza nombre, apellido, teléfono y correo. NO realiza db.commit()."""
        update_data = obj_in.model_dump(exclude_unset=True)
        # nombre, apellido y email son obligatorios: un null explícito se ignora
        for campo in ("nombre", "apellido", "email"):
            if campo in update_data and update_data[campo] is None:
                update_data.pop(campo)
        if "email" in update_data and update_data["email"] != db_obj.email:
            self._validar_email_unico(
                db, update_data["email"], "Correo electrónico ya registrado por otro usuario.", excluir_id=db_obj.id
            )
        return self.update(db, db_obj=db_obj, obj_in=update_data)

    def actualizar_guardarecurso(self, db: Session, *, db_obj: Usuario, obj_in: GuardarecursoUpdate) -> Usuario:
        """Solo el teléfono y el área asignada son editables. NO realiza db.commit()."""
        update_data = obj_in.model_dump(exclude_unset=True)
        if "area_id" in update_data:
            self._validar_area(db, update_data["area_id"])
        return self.update(db, db_obj=db_obj, obj_in=update_data)

    def cambiar_estado(self, db: Session, *, db_obj: Usuario, estado: EstadoUsuarioEnum) -> Usuario:
        logger.info(f"Cambiando estado de usuario ID {db_obj.id} de '{db_obj.estado}' a '{estado.value}'.")
        return self.update(db, db_obj=db_obj, obj_in={"estado": estado.value})

    # ===============================================================
    # Autenticación
    # ===============================================================
    def authenticate(self, db: Session, *, email: str, password: str) -> Optional[Usuario]:
        """
        Autentica a un usuario por correo y contraseña.
        El estado se evalúa aparte con `is_active` para que el endpoint
        pueda diferenciar 'credenciales incorrectas' de 'usuario inactivo'.
        """
        user = self.get_by_email(db, email=email)
        if not user:
            logger.warning(f"Intento de login fallido: Usuario '{email}' no encontrado.")
            return None
        if not verify_password(password, user.hashed_password):
            logger.warning(f"Intento de login fallido: Contraseña incorrecta para '{email}'.")
            return None
        logger.info(f"Usuario '{email}' autenticado (contraseña correcta).")
        return user

    def is_active(self, user: Usuario) -> bool:
        """Solo los usuarios en estado Activo pueden iniciar o mantener sesión."""
        return user.estado == EstadoUsuarioEnum.ACTIVO.value

    def handle_successful_login(self, db: Session, *, user: Usuario) -> None:
        """Registra la fecha de último login. NO realiza db.commit()."""
        user.ultimo_login = ahora()
        db.add(user)
        logger.info(f"Último login actualizado para {user.email}.")

    # ===============================================================
    # Contraseñas
    # ===============================================================
    def cambiar_contrasena_por_admin(
        self, db: Session, *, actor: Usuario, target_id: int, nueva_contrasena: str
    ) -> Usuario:
        """
        Cambia la contraseña de otro usuario.

        * Administrador: puede cambiar la de Coordinadores y Guardarecursos.
        * Coordinador: solo la de Guardarecursos.
        * La contraseña de un Administrador solo se cambia desde el cambio de
          contraseña propio.

        Las reglas de rol se evalúan antes que la contraseña.
        NO realiza db.commit().
        """
        rol_actor = actor.rol.nombre if actor.rol else None
        if rol_actor not in (ADMIN_ROLE_NAME, COORDINADOR_ROLE_NAME):
            logger.warning(f"Usuario '{actor.email}' ({rol_actor}) intentó cambiar la contraseña de otro usuario.")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="No tiene permisos para cambiar contraseñas de otros usuarios.",
            )

        target = self.get_or_404(db, id=target_id)
        rol_target = target.rol.nombre if target.rol else None

        if rol_target == ADMIN_ROLE_NAME:
            logger.warning(f"Usuario '{actor.email}' intentó cambiar la contraseña del Administrador '{target.email}'.")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="No se puede cambiar la contraseña de un Administrador. Debe cambiarse desde el perfil del propio Administrador.",
            )
        if rol_actor == COORDINADOR_ROLE_NAME and rol_target != GUARDARECURSO_ROLE_NAME:
            logger.warning(f"Coordinador '{actor.email}' intentó cambiar la contraseña de '{target.email}' ({rol_target}).")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Un Coordinador solo puede cambiar contraseñas de Guardarecursos.",
            )

        if not nueva_contrasena or len(nueva_contrasena) < MIN_PASSWORD_LENGTH:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"La contraseña debe tener al menos {MIN_PASSWORD_LENGTH} caracteres.",
            )

        target.hashed_password = get_password_hash(nueva_contrasena)
        db.add(target)
        logger.info(f"Contraseña de '{target.email}' actualizada por '{actor.email}'.")
        return target

    def cambiar_contrasena_propia(
        self, db: Session, *, user: Usuario, datos: CambioContrasenaPropia
    ) -> Usuario:
        """
        Permite a un usuario autenticado cambiar su propia contraseña.
        Verifica la contraseña actual antes de establecer la nueva.
        NO realiza db.commit().
        """
        logger.info(f"Iniciando cambio de contraseña para el usuario: {user.email}")

        if len(datos.nueva_contrasena) < MIN_PASSWORD_LENGTH:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"La contraseña debe tener al menos {MIN_PASSWORD_LENGTH} caracteres.",
            )
        if datos.nueva_contrasena != datos.confirmar_contrasena:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Las contraseñas no coinciden.")
        if datos.nueva_contrasena == datos.contrasena_actual:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="La nueva contraseña debe ser diferente a la actual.",
            )
        if not verify_password(datos.contrasena_actual, user.hashed_password):
            logger.warning(f"Cambio de contraseña fallido para '{user.email}': contraseña actual incorrecta.")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="La contraseña actual es incorrecta.")

        user.hashed_password = get_password_hash(datos.nueva_contrasena)
        db.add(user)
        logger.info(f"Contraseña actualizada exitosamente para el usuario '{user.email}'.")
        return user


usuario_service = UsuarioService(Usuario, "Usuario")
