from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import relationship, Mapped, mapped_column

from guardarecursos.db.base import Base

if TYPE_CHECKING:
    from .actividad import Actividad

class TipoActividad(Base):
    """Catálogo de categorías de actividad (patrullaje, mantenimiento, ...)."""
    __tablename__ = "tipos_actividad"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nombre: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    descripcion: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    actividades: Mapped[List["Actividad"]] = relationship("Actividad", back_populates="tipo")

    @property
    def es_patrullaje(self) -> bool:
        return "patrull" in (self.nombre or "").lower()

    def __repr__(self) -> str:
        return f"<TipoActividad(id={self.id}, nombre='{self.nombre}')>"
