from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from nexus.infrastructure.db.settings import database_url

engine = create_engine(database_url(), pool_pre_ping=True, future=True)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
