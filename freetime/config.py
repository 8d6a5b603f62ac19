# freetime/config.py
import os
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))


def _database_url():
    database_url = os.getenv("DATABASE_URL", "sqlite:///" + os.path.join(BASE_DIR, "freetime.db"))
    if database_url.startswith("postgres://"):
        database_url = database_url.replace("postgres://", "postgresql://", 1)
    return database_url


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "your_secret_key_here")
    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # "sql" keeps windows/blocks in the database, "memory" in a per-app dict store
    INTERVAL_STORE = os.getenv("INTERVAL_STORE", "sql")
    LOG_FILE = os.getenv("LOG_FILE", os.path.join(BASE_DIR, "freetime.log"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
