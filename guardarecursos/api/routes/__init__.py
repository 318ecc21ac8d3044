from fastapi import APIRouter

# Importar los routers individuales de cada módulo
from . import auth, usuarios, guardarecursos, areas, equipos, actividades, rutas
from . import hallazgos, incidentes, dashboard, catalogos, permisos, init

# Crear el router principal de la API
api_router = APIRouter()

# Incluir cada router individual con su prefijo y etiquetas
api_router.include_router(auth.router, prefix="/auth", tags=["Auth"])
api_router.include_router(usuarios.router, prefix="/usuarios", tags=["Usuarios"])
api_router.include_router(guardarecursos.router, prefix="/guardarecursos", tags=["Guardarecursos"])
api_router.include_router(areas.router, prefix="/areas", tags=["Áreas Protegidas"])
api_router.include_router(equipos.router, prefix="/equipos", tags=["Equipos"])
api_router.include_router(actividades.router, prefix="/actividades", tags=["Actividades"])
api_router.include_router(rutas.router, prefix="/rutas", tags=["Geolocalización"])
api_router.include_router(hallazgos.router, prefix="/hallazgos", tags=["Hallazgos"])
api_router.include_router(incidentes.router, prefix="/incidentes", tags=["Incidentes"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
api_router.include_router(catalogos.router, prefix="/catalogos", tags=["Catálogos"])
api_router.include_router(permisos.router, prefix="/permisos", tags=["Permisos"])
api_router.include_router(init.router, prefix="/init", tags=["Inicialización"])
