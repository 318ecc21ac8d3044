from typing import TYPE_CHECKING, Optional
from datetime import datetime

from sqlalchemy import Integer, String, Text, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship, Mapped, mapped_column

from guardarecursos.db.base import Base

if TYPE_CHECKING:
    from .usuario import Usuario
    from .hallazgo import Hallazgo
    from .incidente import Incidente


class Seguimiento(Base):
    """Nota de seguimiento con marca de tiempo, ligada a un hallazgo o a un incidente."""
    __tablename__ = "seguimientos"
    __table_args__ = (
        CheckConstraint(
            "(hallazgo_id IS NOT NULL) OR (incidente_id IS NOT NULL)",
            name="referencia_requerida",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    hallazgo_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("hallazgos.id", ondelete="CASCADE"), nullable=True, index=True)
    incidente_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("incidentes.id", ondelete="CASCADE"), nullable=True, index=True)
    accion: Mapped[str] = mapped_column(String(200))
    observaciones: Mapped[str] = mapped_column(Text)
    usuario_id: Mapped[int] = mapped_column(Integer, ForeignKey("usuarios.id", ondelete="RESTRICT"), index=True)
    fecha: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    usuario: Mapped["Usuario"] = relationship("Usuario", lazy="joined")
    hallazgo: Mapped[Optional["Hallazgo"]] = relationship("Hallazgo", back_populates="seguimientos")
    incidente: Mapped[Optional["Incidente"]] = relationship("Incidente", back_populates="seguimientos")

    def __repr__(self) -> str:
        return f"<Seguimiento(id={self.id}, hallazgo_id={self.hallazgo_id}, incidente_id={self.incidente_id})>"
