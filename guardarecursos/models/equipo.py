from typing import TYPE_CHECKING, Optional
from datetime import datetime

from sqlalchemy import Integer, String, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship, Mapped, mapped_column

from guardarecursos.db.base import Base

if TYPE_CHECKING:
    from .usuario import Usuario


class Equipo(Base):
    """
    Modelo ORM para la tabla 'equipos' (equipo de campo asignable a guardarecursos).
    """
    __tablename__ = "equipos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nombre: Mapped[str] = mapped_column(String(100))
    codigo: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    tipo: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    marca: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    modelo: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    observaciones: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    estado: Mapped[str] = mapped_column(String(30), default="Operativo", index=True)
    usuario_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("usuarios.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    guardarecurso: Mapped[Optional["Usuario"]] = relationship("Usuario", back_populates="equipos", lazy="selectin")

    def __repr__(self) -> str:
        return f"<Equipo(id={self.id}, codigo='{self.codigo}', estado='{self.estado}')>"
