from sqlmodel import create_engine, Session
from ..core.config import settings

# Helper function to ensure URL format is correct
def get_db_url():
    url = settings.DATABASE_URL
    if not url:
        return "sqlite:///taskflow.db"
    # Migrations and the API share one sync driver
    url = url.replace("+aiosqlite", "").replace("+asyncpg", "")
    return url.replace("postgres://", "postgresql://")

db_url = get_db_url()

# --- CONFIGURATION FOR SQLITE ---
if db_url.startswith("sqlite"):
    sync_engine = create_engine(
        db_url,
        echo=settings.DB_ECHO,
        connect_args={"check_same_thread": False}
    )

# --- CONFIGURATION FOR POSTGRESQL ---
else:
    # Uses psycopg2-binary
    sync_engine = create_engine(
        db_url,
        echo=settings.DB_ECHO,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10
    )


# Dependency: one session per request
def get_session():
    with Session(sync_engine) as session:
        yield session
