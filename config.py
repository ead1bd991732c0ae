# config.py
"""
Application configuration loaded from the environment (.env supported).

All settings are module-level constants so they can be imported directly:

     from config import JWT_SECRET, DATABASE_URL
"""
import os
from urllib.parse import quote_plus

from dotenv import load_dotenv

# Load .env
load_dotenv()

# Database
DB_SERVER = os.getenv("DB_SERVER")
DB_PORT = os.getenv("DB_PORT", "1433")
DB_USER = os.getenv("DB_USER")
DB_PASS = os.getenv("DB_PASS")
DB_NAME = os.getenv("DB_NAME")


def build_database_url() -> str:
     """
     Return DATABASE_URL if set, otherwise build an MS SQL Server URL
     (pymssql driver) from the DB_* variables.
     """
     url = os.getenv("DATABASE_URL")
     if url:
          return url
     safe_user = quote_plus(DB_USER or "")
     safe_pass = quote_plus(DB_PASS or "")
     return f"mssql+pymssql://{safe_user}:{safe_pass}@{DB_SERVER}:{DB_PORT}/{DB_NAME}"


DATABASE_URL = build_database_url()
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"

# Auth
JWT_SECRET = os.getenv("JWT_SECRET", "CHANGE_ME")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

# HTTP
CORS_ORIGINS = [o for o in os.getenv("CORS_ORIGINS", "").split(",") if o]
PORT = int(os.getenv("PORT", "10000"))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "info")

# Analytics windows (months)
ANALYTICS_MONTHS_BACK = int(os.getenv("ANALYTICS_MONTHS_BACK", "12"))
OWNER_CHART_MONTHS = int(os.getenv("OWNER_CHART_MONTHS", "6"))
