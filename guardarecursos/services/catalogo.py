import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session
from sqlalchemy import func, select

from guardarecursos.models.departamento import Departamento
from guardarecursos.models.ecosistema import Ecosistema
from guardarecursos.models.tipo_actividad import TipoActividad
from .base_service import BaseService

logger = logging.getLogger(__name__)


class CatalogoService(BaseService):
    """
    Servicio genérico para catálogos identificados por un nombre único
    (departamentos, ecosistemas, tipos de actividad).
    """

    def get_all_ordered(self, db: Session) -> List:
        statement = select(self.model).order_by(self.model.nombre)
        return list(db.execute(statement).scalars().all())

    def get_by_name(self, db: Session, *, nombre: str):
        """Búsqueda por nombre sin distinguir mayúsculas ni espacios extremos."""
        statement = select(self.model).where(func.lower(self.model.nombre) == nombre.strip().lower())
        return db.execute(statement).scalars().first()

    def get_or_create(self, db: Session, *, nombre: str) -> Tuple[object, bool]:
        """
        Devuelve el registro con ese nombre, creándolo si no existe.
        NO realiza db.commit(); hace flush para obtener el ID.
        """
        existente = self.get_by_name(db, nombre=nombre)
        if existente:
            return existente, False
        nuevo = self.model(nombre=nombre.strip())
        db.add(nuevo)
        db.flush()
        logger.info(f"{self.nombre_entidad} '{nombre}' creado en el catálogo (ID: {nuevo.id}).")
        return nuevo, True


class TipoActividadService(CatalogoService):

    def resolve(self, db: Session, *, valor: str) -> Optional[TipoActividad]:
        """Acepta el nombre del tipo o su ID numérico (útil en la carga CSV)."""
        valor = (valor or "").strip()
        if not valor:
            return None
        if valor.isdigit():
            por_id = self.get(db, id=int(valor))
            if por_id:
                return por_id
        return self.get_by_name(db, nombre=valor)


departamento_service = CatalogoService(Departamento, "Departamento")
ecosistema_service = CatalogoService(Ecosistema, "Ecosistema")
tipo_actividad_service = TipoActividadService(TipoActividad, "Tipo de actividad")
