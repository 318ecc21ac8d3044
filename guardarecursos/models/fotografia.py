from typing import TYPE_CHECKING, Optional
from datetime import datetime

from sqlalchemy import Integer, String, Text, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship, Mapped, mapped_column

from guardarecursos.db.base import Base

if TYPE_CHECKING:
    from .actividad import Actividad
    from .usuario import Usuario


class Fotografia(Base):
    """Evidencia fotográfica adjuntada al finalizar una actividad."""
    __tablename__ = "fotografias"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    actividad_id: Mapped[int] = mapped_column(Integer, ForeignKey("actividades.id", ondelete="CASCADE"), index=True)
    url: Mapped[str] = mapped_column(String(500))
    descripcion: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    latitud: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitud: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    usuario_id: Mapped[int] = mapped_column(Integer, ForeignKey("usuarios.id", ondelete="RESTRICT"), index=True)
    fecha: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    actividad: Mapped["Actividad"] = relationship("Actividad", back_populates="evidencias")
    usuario: Mapped["Usuario"] = relationship("Usuario")

    def __repr__(self) -> str:
        return f"<Fotografia(id={self.id}, actividad_id={self.actividad_id})>"
