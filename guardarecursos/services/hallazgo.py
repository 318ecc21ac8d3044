import logging
from typing import List, Optional

from sqlalchemy.orm import Session
from sqlalchemy import select

from guardarecursos.core.tiempo import ahora
from guardarecursos.models.hallazgo import Hallazgo
from guardarecursos.models.usuario import Usuario
from guardarecursos.schemas.enums import EstadoHallazgoEnum, PrioridadHallazgoEnum
from guardarecursos.schemas.hallazgo import HallazgoCreate, HallazgoEnActividad

from .base_service import BaseService

logger = logging.getLogger(__name__)


class HallazgoService(BaseService[Hallazgo, HallazgoCreate, HallazgoCreate]):
    """
    Servicio para gestionar hallazgos, reportados de forma independiente
    o durante una actividad.
    """

    def listar(
        self,
        db: Session,
        *,
        estado: Optional[EstadoHallazgoEnum] = None,
        prioridad: Optional[PrioridadHallazgoEnum] = None,
        usuario_id: Optional[int] = None,
    ) -> List[Hallazgo]:
        """Lista los hallazgos, del más reciente al más antiguo."""
        statement = select(self.model).order_by(self.model.fecha.desc(), self.model.id.desc())
        if estado:
            statement = statement.where(self.model.estado == estado.value)
        if prioridad:
            statement = statement.where(self.model.prioridad == prioridad.value)
        if usuario_id is not None:
            statement = statement.where(self.model.usuario_id == usuario_id)
        return list(db.execute(statement).scalars().unique().all())

    def create(self, db: Session, *, obj_in: HallazgoCreate, usuario: Usuario) -> Hallazgo:
        """
        Registra un hallazgo independiente en estado Reportado.
        NO realiza db.commit().
        """
        db_obj = self.model(
            titulo=obj_in.titulo,
            descripcion=obj_in.descripcion,
            prioridad=obj_in.prioridad.value,
            latitud=obj_in.coordenadas.lat,
            longitud=obj_in.coordenadas.lng,
            estado=EstadoHallazgoEnum.REPORTADO.value,
            usuario_id=usuario.id,
            fecha=ahora(),
        )
        db.add(db_obj)
        logger.info(f"Hallazgo '{db_obj.titulo}' preparado para ser creado por '{usuario.email}'.")
        return db_obj

    def crear_en_actividad(
        self, db: Session, *, actividad_id: int, obj_in: HallazgoEnActividad, usuario: Usuario
    ) -> Hallazgo:
        """Hallazgo ligado a una actividad. NO realiza db.commit()."""
        db_obj = self.model(
            titulo=obj_in.titulo,
            descripcion=obj_in.descripcion,
            prioridad=obj_in.gravedad.value,
            latitud=obj_in.latitud,
            longitud=obj_in.longitud,
            estado=EstadoHallazgoEnum.REPORTADO.value,
            usuario_id=usuario.id,
            actividad_id=actividad_id,
            fecha=ahora(),
        )
        db.add(db_obj)
        logger.debug(f"Hallazgo '{db_obj.titulo}' preparado para la actividad ID {actividad_id}.")
        return db_obj

    def cambiar_estado(self, db: Session, *, db_obj: Hallazgo, estado: EstadoHallazgoEnum) -> Hallazgo:
        logger.info(f"Hallazgo ID {db_obj.id}: '{db_obj.estado}' -> '{estado.value}'.")
        return self.update(db, db_obj=db_obj, obj_in={"estado": estado.value})


hallazgo_service = HallazgoService(Hallazgo, "Hallazgo")
