from typing import TYPE_CHECKING, List, Optional
from datetime import datetime

from sqlalchemy import Integer, String, Text, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship, Mapped, mapped_column

from guardarecursos.db.base import Base

if TYPE_CHECKING:
    from .usuario import Usuario
    from .actividad import Actividad
    from .seguimiento import Seguimiento


class Hallazgo(Base):
    """
    Observación reportada por un guardarecurso, independiente o ligada a una actividad.
    """
    __tablename__ = "hallazgos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    titulo: Mapped[str] = mapped_column(String(100))
    descripcion: Mapped[str] = mapped_column(Text)
    prioridad: Mapped[str] = mapped_column(String(20), default="Media", index=True)
    latitud: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitud: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    estado: Mapped[str] = mapped_column(String(30), default="Reportado", index=True)
    usuario_id: Mapped[int] = mapped_column(Integer, ForeignKey("usuarios.id", ondelete="RESTRICT"), index=True)
    actividad_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("actividades.id", ondelete="CASCADE"), nullable=True, index=True)
    fecha: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)

    usuario: Mapped["Usuario"] = relationship("Usuario", lazy="joined")
    actividad: Mapped[Optional["Actividad"]] = relationship("Actividad", back_populates="hallazgos")
    seguimientos: Mapped[List["Seguimiento"]] = relationship(
        "Seguimiento",
        back_populates="hallazgo",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="Seguimiento.id",
    )

    def __repr__(self) -> str:
        return f"<Hallazgo(id={self.id}, titulo='{self.titulo}', estado='{self.estado}')>"
