from .database import Base, engine, SessionLocal, init_db, create_db_engine
