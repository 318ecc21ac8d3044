import logging
from typing import List, Optional

from sqlalchemy.orm import Session
from sqlalchemy import select
from fastapi import HTTPException, status

from guardarecursos.core.tiempo import ahora
from guardarecursos.models.area import Area
from guardarecursos.models.incidente import Incidente
from guardarecursos.models.usuario import Usuario
from guardarecursos.schemas.enums import EstadoIncidenteEnum, GravedadIncidenteEnum
from guardarecursos.schemas.incidente import IncidenteCreate

from .base_service import BaseService

logger = logging.getLogger(__name__)


class IncidenteService(BaseService[Incidente, IncidenteCreate, IncidenteCreate]):
    """
    Servicio para gestionar incidentes con visitantes.
    """

    def listar(
        self,
        db: Session,
        *,
        estado: Optional[EstadoIncidenteEnum] = None,
        gravedad: Optional[GravedadIncidenteEnum] = None,
        usuario_id: Optional[int] = None,
    ) -> List[Incidente]:
        statement = select(self.model).order_by(self.model.fecha.desc(), self.model.id.desc())
        if estado:
            statement = statement.where(self.model.estado == estado.value)
        if gravedad:
            statement = statement.where(self.model.gravedad == gravedad.value)
        if usuario_id is not None:
            statement = statement.where(self.model.usuario_id == usuario_id)
        return list(db.execute(statement).scalars().unique().all())

    def create(self, db: Session, *, obj_in: IncidenteCreate, usuario: Usuario) -> Incidente:
        """
        Registra un incidente en estado Reportado. Si no se indica área se
        usa la del usuario que reporta.
        NO realiza db.commit().
        """
        area_id = obj_in.area_id if obj_in.area_id is not None else usuario.area_id
        if obj_in.area_id is not None and not db.get(Area, obj_in.area_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Área con ID {obj_in.area_id} no encontrada.",
            )

        db_obj = self.model(
            titulo=obj_in.titulo,
            descripcion=obj_in.descripcion,
            gravedad=obj_in.gravedad.value,
            estado=EstadoIncidenteEnum.REPORTADO.value,
            usuario_id=usuario.id,
            area_id=area_id,
            fecha=ahora(),
        )
        db.add(db_obj)
        logger.info(f"Incidente '{db_obj.titulo}' ({db_obj.gravedad}) preparado para ser creado por '{usuario.email}'.")
        return db_obj

    def cambiar_estado(self, db: Session, *, db_obj: Incidente, estado: EstadoIncidenteEnum) -> Incidente:
        logger.info(f"Incidente ID {db_obj.id}: '{db_obj.estado}' -> '{estado.value}'.")
        return self.update(db, db_obj=db_obj, obj_in={"estado": estado.value})


incidente_service = IncidenteService(Incidente, "Incidente")
