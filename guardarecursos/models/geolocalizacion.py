from typing import TYPE_CHECKING, Optional
from datetime import datetime

from sqlalchemy import Integer, Float, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship, Mapped, mapped_column

from guardarecursos.db.base import Base

if TYPE_CHECKING:
    from .actividad import Actividad


class Geolocalizacion(Base):
    """Punto GPS registrado durante una actividad en progreso. Solo se insertan filas."""
    __tablename__ = "geolocalizaciones"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    actividad_id: Mapped[int] = mapped_column(Integer, ForeignKey("actividades.id", ondelete="CASCADE"), index=True)
    latitud: Mapped[float] = mapped_column(Float)
    longitud: Mapped[float] = mapped_column(Float)
    fecha: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
    descripcion: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    actividad: Mapped["Actividad"] = relationship("Actividad", back_populates="puntos")

    def __repr__(self) -> str:
        return f"<Geolocalizacion(id={self.id}, actividad_id={self.actividad_id}, lat={self.latitud}, lng={self.longitud})>"
