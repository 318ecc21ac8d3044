import logging
from typing import List, Optional

from sqlalchemy.orm import Session
from sqlalchemy import select
from fastapi import HTTPException, status

from guardarecursos.models.equipo import Equipo
from guardarecursos.schemas.enums import EstadoEquipoEnum
from guardarecursos.schemas.equipo import EquipoCreate, EquipoUpdate

from .base_service import BaseService
from .usuario import usuario_service

logger = logging.getLogger(__name__)


class EquipoService(BaseService[Equipo, EquipoCreate, EquipoUpdate]):
    """
    Servicio para gestionar el equipo de campo y su asignación a guardarecursos.
    """

    def get_by_codigo(self, db: Session, *, codigo: str) -> Optional[Equipo]:
        statement = select(self.model).where(self.model.codigo == codigo.strip())
        return db.execute(statement).scalar_one_or_none()

    def listar(self, db: Session, *, usuario_id: Optional[int] = None) -> List[Equipo]:
        statement = select(self.model).order_by(self.model.nombre)
        if usuario_id is not None:
            statement = statement.where(self.model.usuario_id == usuario_id)
        return list(db.execute(statement).scalars().all())

    def create(self, db: Session, *, obj_in: EquipoCreate) -> Equipo:
        """
        Registra un equipo en estado Operativo.
        NO realiza db.commit().
        """
        if self.get_by_codigo(db, codigo=obj_in.codigo):
            logger.warning(f"Intento de crear equipo con código duplicado: {obj_in.codigo}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Ya existe un equipo con este código de inventario",
            )
        if obj_in.usuario_id is not None:
            usuario_service.get_guardarecurso_or_404(db, id=obj_in.usuario_id)

        create_data = obj_in.model_dump()
        create_data["codigo"] = obj_in.codigo.strip()
        create_data["estado"] = EstadoEquipoEnum.OPERATIVO.value
        return super().create(db, obj_in=create_data)

    def update(self, db: Session, *, db_obj: Equipo, obj_in: EquipoUpdate) -> Equipo:
        """
        Actualiza observaciones y guardarecurso asignado.
        Un equipo en reparación no puede asignarse.
        NO realiza db.commit().
        """
        update_data = obj_in.model_dump(exclude_unset=True)
        nuevo_usuario = update_data.get("usuario_id")
        if nuevo_usuario is not None and nuevo_usuario != db_obj.usuario_id:
            if db_obj.estado == EstadoEquipoEnum.EN_REPARACION.value:
                logger.warning(f"Intento de asignar el equipo ID {db_obj.id} mientras está en reparación.")
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="No se puede asignar un equipo que está en reparación",
                )
            usuario_service.get_guardarecurso_or_404(db, id=nuevo_usuario)
        return super().update(db, db_obj=db_obj, obj_in=update_data)

    def cambiar_estado(self, db: Session, *, db_obj: Equipo, estado: EstadoEquipoEnum) -> Equipo:
        """
        Cambia el estado del equipo. Al pasar a 'En Reparación' se libera
        el guardarecurso asignado.
        NO realiza db.commit().
        """
        update_data = {"estado": estado.value}
        if estado == EstadoEquipoEnum.EN_REPARACION and db_obj.usuario_id is not None:
            logger.info(f"Equipo ID {db_obj.id} pasa a reparación; se desasigna del usuario ID {db_obj.usuario_id}.")
            update_data["usuario_id"] = None
        return super().update(db, db_obj=db_obj, obj_in=update_data)


equipo_service = EquipoService(Equipo, "Equipo")
