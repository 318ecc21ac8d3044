import logging

from sqlalchemy.orm import Session

from guardarecursos.core.tiempo import ahora
from guardarecursos.models.hallazgo import Hallazgo
from guardarecursos.models.incidente import Incidente
from guardarecursos.models.seguimiento import Seguimiento
from guardarecursos.models.usuario import Usuario
from guardarecursos.schemas.seguimiento import SeguimientoCreate

from .base_service import BaseService

logger = logging.getLogger(__name__)


class SeguimientoService(BaseService[Seguimiento, SeguimientoCreate, SeguimientoCreate]):
    """Notas de seguimiento de hallazgos e incidentes. Solo se agregan."""

    def crear_para_hallazgo(
        self, db: Session, *, hallazgo: Hallazgo, obj_in: SeguimientoCreate, usuario: Usuario
    ) -> Seguimiento:
        seguimiento = self.create(
            db, obj_in={**obj_in.model_dump(), "hallazgo_id": hallazgo.id, "usuario_id": usuario.id, "fecha": ahora()}
        )
        logger.info(f"Seguimiento agregado al hallazgo ID {hallazgo.id} por '{usuario.email}'.")
        return seguimiento

    def crear_para_incidente(
        self, db: Session, *, incidente: Incidente, obj_in: SeguimientoCreate, usuario: Usuario
    ) -> Seguimiento:
        seguimiento = self.create(
            db, obj_in={**obj_in.model_dump(), "incidente_id": incidente.id, "usuario_id": usuario.id, "fecha": ahora()}
        )
        logger.info(f"Seguimiento agregado al incidente ID {incidente.id} por '{usuario.email}'.")
        return seguimiento


seguimiento_service = SeguimientoService(Seguimiento, "Seguimiento")
