# config.py
import os
from dotenv import load_dotenv

load_dotenv()

# --- CONFIGURACIÓN GENERAL ---
APP_NAME = "Tecsitel"
VERSION = "2.1.0"
CURRENCY = "PEN"
CURRENCY_SYMBOL = "S/"

# --- CONFIGURACIÓN DE FACTURACIÓN ---
# Tasa de IGV por defecto (porcentaje)
IGV_DEFAULT = 18
INVOICE_SERIES = "F001"
INVOICE_NUMBER_DIGITS = 8
# Días entre la fecha de emisión y la de vencimiento sugerida
DEFAULT_DUE_DAYS = 30
# Monto máximo de una factura, en soles
MAX_INVOICE_AMOUNT = "999999999999.99"

DEFAULT_USER = {"username": "Usuario", "avatar": "U"}

# --- CONFIGURACIÓN DE ALMACENAMIENTO ---
# Uno de: github, rest, local, sql
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "local")
STORAGE_TIMEOUT = float(os.getenv("STORAGE_TIMEOUT", "15"))
# Segundos entre guardados automáticos (0 lo desactiva)
AUTO_SAVE_INTERVAL = float(os.getenv("AUTO_SAVE_INTERVAL", "60"))

LOCAL_STORAGE_FILE = os.getenv("LOCAL_STORAGE_FILE", "database.json")
REST_API_URL = os.getenv("REST_API_URL", "")
REST_CACHE_FILE = os.getenv("REST_CACHE_FILE", ".tecsitel_cache.json")
GITHUB_DB_PATH = os.getenv("GITHUB_DB_PATH", "database.json")
GITHUB_API_URL = "https://api.github.com"
GITHUB_COMMIT_MESSAGE = "chore: update database [skip ci]"
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///tecsitel.db")

# --- CONFIGURACIÓN DEL SERVIDOR ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
    if origin.strip()
]
