from typing import TYPE_CHECKING, List, Optional
from datetime import datetime

from sqlalchemy import Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship, Mapped, mapped_column

from guardarecursos.db.base import Base

if TYPE_CHECKING:
    from .usuario import Usuario
    from .area import Area
    from .seguimiento import Seguimiento


class Incidente(Base):
    """
    Incidente con visitantes. Su ciclo de vida es independiente del de los hallazgos.
    """
    __tablename__ = "incidentes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    titulo: Mapped[str] = mapped_column(String(100))
    descripcion: Mapped[str] = mapped_column(Text)
    gravedad: Mapped[str] = mapped_column(String(20), default="Leve", index=True)
    estado: Mapped[str] = mapped_column(String(30), default="Reportado", index=True)
    usuario_id: Mapped[int] = mapped_column(Integer, ForeignKey("usuarios.id", ondelete="RESTRICT"), index=True)
    area_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("areas.id", ondelete="SET NULL"), nullable=True, index=True)
    fecha: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)

    usuario: Mapped["Usuario"] = relationship("Usuario", lazy="joined")
    area: Mapped[Optional["Area"]] = relationship("Area", lazy="selectin")
    seguimientos: Mapped[List["Seguimiento"]] = relationship(
        "Seguimiento",
        back_populates="incidente",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="Seguimiento.id",
    )

    def __repr__(self) -> str:
        return f"<Incidente(id={self.id}, titulo='{self.titulo}', estado='{self.estado}')>"
