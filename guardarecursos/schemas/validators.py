import re
from typing import Optional

DPI_REGEX = re.compile(r"^\d{13}$")
TELEFONO_REGEX = re.compile(r"^\d{8}$")
EMAIL_MAX_LENGTH = 100


def normalizar_email(v):
    if isinstance(v, str):
        v = v.strip().lower()
        if len(v) > EMAIL_MAX_LENGTH:
            raise ValueError(f"El correo no puede exceder {EMAIL_MAX_LENGTH} caracteres.")
    return v


def validar_dpi(v: Optional[str]) -> Optional[str]:
    if v is None or v == "":
        return None
    v = v.strip()
    if not DPI_REGEX.match(v):
        raise ValueError("El DPI debe tener exactamente 13 dígitos.")
    return v


def validar_telefono(v: Optional[str]) -> Optional[str]:
    if v is None or v == "":
        return None
    limpio = re.sub(r"[\s-]", "", v)
    if not TELEFONO_REGEX.match(limpio):
        raise ValueError("El teléfono debe tener 8 dígitos.")
    return limpio
