from typing import Optional
import logging

from pydantic import BaseModel
from sqlalchemy.orm import Session
from sqlalchemy import select
from fastapi import HTTPException, status

from guardarecursos.models.rol import Rol
from .base_service import BaseService

logger = logging.getLogger(__name__)

class RolService(BaseService[Rol, BaseModel, BaseModel]):
    """
    Servicio de consulta de Roles. Los roles son fijos y se crean en la
    inicialización de datos base.
    """

    def get_by_name(self, db: Session, *, name: str) -> Optional[Rol]:
        statement = select(self.model).where(self.model.nombre == name)
        return db.execute(statement).scalar_one_or_none()

    def get_by_name_or_500(self, db: Session, *, name: str) -> Rol:
        """Los roles del sistema deben existir; su ausencia indica datos base sin inicializar."""
        rol = self.get_by_name(db, name=name)
        if not rol:
            logger.error(f"Rol de sistema '{name}' no encontrado. ¿Se ejecutó la inicialización de datos?")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Rol '{name}' no encontrado. Inicialice los datos base del sistema.",
            )
        return rol

rol_service = RolService(Rol, "Rol")
