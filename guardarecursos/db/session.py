from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from guardarecursos.core.config import settings

DATABASE_URL = str(settings.DATABASE_URI)

# SQLite (pruebas locales) necesita compartir la conexión entre hilos del threadpool
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

# pool_pre_ping habilita una comprobación de conexión antes de usarla del pool
engine = create_engine(DATABASE_URL, pool_pre_ping=True, connect_args=connect_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
