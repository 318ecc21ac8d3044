from typing import TYPE_CHECKING, List

from sqlalchemy import Integer, String
from sqlalchemy.orm import relationship, Mapped, mapped_column

from guardarecursos.db.base import Base

if TYPE_CHECKING:
    from .area import Area

class Departamento(Base):
    __tablename__ = "departamentos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nombre: Mapped[str] = mapped_column(String(100), unique=True, index=True)

    areas: Mapped[List["Area"]] = relationship("Area", back_populates="departamento")

    def __repr__(self) -> str:
        return f"<Departamento(id={self.id}, nombre='{self.nombre}')>"
