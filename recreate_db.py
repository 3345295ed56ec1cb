"""
Script to drop and recreate every table (development only)
"""
from sqlalchemy import inspect
from foodhub.config import settings
from foodhub.database import Base, engine
import foodhub.models  # noqa: F401  registers every model on Base.metadata

if settings.ENVIRONMENT == "production":
    print("[ERROR] Refusing to recreate the database in production")
    raise SystemExit(1)

print("Dropping existing tables...")
Base.metadata.drop_all(bind=engine)

print("Creating database tables...")
Base.metadata.create_all(bind=engine)
print("Database created successfully!")

tables = inspect(engine).get_table_names()
print(f"Created tables: {', '.join(tables)}")
