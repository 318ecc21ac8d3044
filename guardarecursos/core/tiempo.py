from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple

from guardarecursos.core.config import settings

# Desfase fijo (UTC-6 por defecto); la región no observa horario de verano.
ZONA_HORARIA = timezone(timedelta(hours=settings.TIMEZONE_OFFSET_HOURS))


def ahora() -> datetime:
    """Fecha y hora actual del servidor en la zona horaria de operación."""
    return datetime.now(ZONA_HORARIA)


def hoy() -> date:
    return ahora().date()


def combinar_fecha_hora(fecha: date, hora: Optional[time] = None) -> datetime:
    """Une fecha y hora programadas; sin hora se asume medianoche."""
    return datetime.combine(fecha, hora or time(0, 0), tzinfo=ZONA_HORARIA)


def rango_del_dia(fecha: date) -> Tuple[datetime, datetime]:
    """Límites [inicio, fin) de un día calendario en la zona de operación."""
    inicio = combinar_fecha_hora(fecha)
    return inicio, inicio + timedelta(days=1)
