from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import declarative_base, sessionmaker
from config.settings import DATABASE_ECHO, DATABASE_URL
from infrastructure.database.enumeration import EnumerationMeta, EnumerationMixin

# Create engine
engine = create_async_engine(DATABASE_URL, echo=DATABASE_ECHO)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, class_=AsyncSession)

# Base for models; enum columns get is_<value>() predicates when a model is mapped
Base = declarative_base(cls=EnumerationMixin, metaclass=EnumerationMeta)

# Ensure all model modules register with Base metadata
from infrastructure.database import models as _models  # noqa: E402,F401

async def get_db():
    db = SessionLocal()
    try:
        yield db
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    finally:
        await db.close()

async def create_tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

async def drop_tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
