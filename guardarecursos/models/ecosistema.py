from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import relationship, Mapped, mapped_column

from guardarecursos.db.base import Base

if TYPE_CHECKING:
    from .area import Area

class Ecosistema(Base):
    __tablename__ = "ecosistemas"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nombre: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    descripcion: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    areas: Mapped[List["Area"]] = relationship("Area", back_populates="ecosistema")

    def __repr__(self) -> str:
        return f"<Ecosistema(id={self.id}, nombre='{self.nombre}')>"
