import logging
from typing import List, Optional

from sqlalchemy.orm import Session
from sqlalchemy import func, select
from fastapi import HTTPException, status

from guardarecursos.core.permissions import GUARDARECURSO_ROLE_NAME
from guardarecursos.models.area import Area
from guardarecursos.models.rol import Rol
from guardarecursos.models.usuario import Usuario
from guardarecursos.schemas.area import AreaCreate, AreaUpdate, DEFAULT_ECOSISTEMA
from guardarecursos.schemas.enums import EstadoAreaEnum, EstadoUsuarioEnum

from .base_service import BaseService
from .catalogo import departamento_service, ecosistema_service

logger = logging.getLogger(__name__)

# Solo los guardarecursos Activos bloquean la desactivación de su área
ESTADO_GUARDA_ASIGNADO = EstadoUsuarioEnum.ACTIVO.value


class AreaService(BaseService[Area, AreaCreate, AreaUpdate]):
    """
    Servicio para gestionar las áreas protegidas.
    """

    def get_by_name(self, db: Session, *, nombre: str) -> Optional[Area]:
        statement = select(self.model).where(func.lower(self.model.nombre) == nombre.strip().lower())
        return db.execute(statement).scalars().first()

    def listar(self, db: Session, *, estado: Optional[EstadoAreaEnum] = None) -> List[Area]:
        statement = select(self.model).order_by(self.model.nombre)
        if estado:
            statement = statement.where(self.model.estado == estado.value)
        return list(db.execute(statement).scalars().unique().all())

    def contar_activas(self, db: Session) -> int:
        statement = select(func.count(self.model.id)).where(self.model.estado == EstadoAreaEnum.ACTIVO.value)
        return db.execute(statement).scalar_one_or_none() or 0

    def contar_guardarecursos_asignados(self, db: Session, *, area_id: int) -> int:
        """Guardarecursos Activos asignados al área."""
        statement = (
            select(func.count(Usuario.id))
            .join(Rol, Usuario.rol_id == Rol.id)
            .where(
                Usuario.area_id == area_id,
                Rol.nombre == GUARDARECURSO_ROLE_NAME,
                Usuario.estado == ESTADO_GUARDA_ASIGNADO,
            )
        )
        return db.execute(statement).scalar_one_or_none() or 0

    def _validar_nombre_unico(self, db: Session, nombre: str, excluir_id: Optional[int] = None) -> None:
        existente = self.get_by_name(db, nombre=nombre)
        if existente and existente.id != excluir_id:
            logger.warning(f"Intento de registrar área protegida duplicada: '{nombre}'")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Ya existe un área protegida con este nombre",
            )

    def _resolver_ecosistema_id(self, db: Session, ecosistemas: Optional[List[str]]) -> int:
        """Toma el primer ecosistema de la lista (o el de por defecto) y lo crea si no existe."""
        nombres = [e for e in (ecosistemas or []) if e and e.strip()]
        ecosistema, _ = ecosistema_service.get_or_create(db, nombre=nombres[0] if nombres else DEFAULT_ECOSISTEMA)
        return ecosistema.id

    def create(self, db: Session, *, obj_in: AreaCreate) -> Area:
        """
        Crea un área protegida. El departamento y el ecosistema se resuelven
        por nombre y se crean si no existen.
        NO realiza db.commit().
        """
        self._validar_nombre_unico(db, obj_in.nombre)
        departamento, _ = departamento_service.get_or_create(db, nombre=obj_in.departamento)

        db_obj = self.model(
            nombre=obj_in.nombre.strip(),
            descripcion=obj_in.descripcion,
            extension=obj_in.extension,
            latitud=obj_in.lat,
            longitud=obj_in.lng,
            departamento_id=departamento.id,
            ecosistema_id=self._resolver_ecosistema_id(db, obj_in.ecosistemas),
            estado=EstadoAreaEnum.ACTIVO.value,
        )
        db.add(db_obj)
        logger.info(f"Área protegida '{db_obj.nombre}' preparada para ser creada.")
        return db_obj

    def update(self, db: Session, *, db_obj: Area, obj_in: AreaUpdate) -> Area:
        """NO realiza db.commit()."""
        datos = obj_in.model_dump(exclude_unset=True)
        update_data = {}

        if datos.get("nombre"):
            self._validar_nombre_unico(db, datos["nombre"], excluir_id=db_obj.id)
            update_data["nombre"] = datos["nombre"].strip()
        for campo in ("descripcion", "extension"):
            if campo in datos:
                update_data[campo] = datos[campo]
        if datos.get("lat") is not None:
            update_data["latitud"] = datos["lat"]
        if datos.get("lng") is not None:
            update_data["longitud"] = datos["lng"]
        if datos.get("departamento"):
            departamento, _ = departamento_service.get_or_create(db, nombre=datos["departamento"])
            update_data["departamento_id"] = departamento.id
        if datos.get("ecosistemas") is not None:
            update_data["ecosistema_id"] = self._resolver_ecosistema_id(db, datos["ecosistemas"])

        return super().update(db, db_obj=db_obj, obj_in=update_data)

    def cambiar_estado(self, db: Session, *, db_obj: Area, estado: EstadoAreaEnum) -> Area:
        """
        Activa o desactiva un área. No se puede desactivar mientras tenga
        guardarecursos Activos asignados.
        NO realiza db.commit().
        """
        if estado == EstadoAreaEnum.DESACTIVADO:
            asignados = self.contar_guardarecursos_asignados(db, area_id=db_obj.id)
            if asignados > 0:
                logger.warning(f"Intento de desactivar el área ID {db_obj.id} con {asignados} guardarecurso(s) asignado(s).")
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=(
                        f"Esta área tiene {asignados} guardarecurso(s) asignado(s). "
                        "Reasigne o elimine los guardarecursos antes de desactivar el área."
                    ),
                )
        logger.info(f"Cambiando estado del área ID {db_obj.id} a '{estado.value}'.")
        return super().update(db, db_obj=db_obj, obj_in={"estado": estado.value})


area_service = AreaService(Area, "Área protegida")
