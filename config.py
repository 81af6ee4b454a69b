# config.py

from __future__ import annotations

import os
from pathlib import Path
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent
ENV_FILE = BASE_DIR / ".env"

# Carrega .env se existir (não sobrescreve variáveis já definidas no ambiente)
if ENV_FILE.exists():
    load_dotenv(ENV_FILE)


def normalize_database_url(db_url: str, production: bool) -> str:
    """
    Ajusta a URL vinda do Render/Heroku:
    - 'postgres://' -> 'postgresql://'
    - em produção, exige 'sslmode=require'
    - remove 'channel_binding', que o psycopg2 não aceita
    """
    db_url = db_url.strip()
    if db_url.startswith("postgres://"):
        db_url = db_url.replace("postgres://", "postgresql://", 1)

    if production and "postgresql://" in db_url and "sslmode=" not in db_url:
        db_url = db_url + ("&" if "?" in db_url else "?") + "sslmode=require"

    if "channel_binding" in db_url:
        base_url, params = db_url.split("?", 1) if "?" in db_url else (db_url, "")
        params_list = [p for p in params.split("&") if p and not p.startswith("channel_binding=")]
        db_url = base_url + ("?" + "&".join(params_list) if params_list else "")

    return db_url


class Config:
    # Ambiente explícito (evite FLASK_ENV no Flask 3)
    APP_ENV: str = os.getenv("APP_ENV", "development").lower()
    TESTING: bool = False

    # Segurança
    SECRET_KEY: str = os.getenv("APP_SECRET_KEY") or os.getenv("SECRET_KEY") or "fallback-secret-key-mude-isto"

    # SQLAlchemy
    SQLALCHEMY_DATABASE_URI: str | None = None
    SQLALCHEMY_TRACK_MODIFICATIONS: bool = False

    # Diretório para SQLite local (dev)
    INSTANCE_DIR = BASE_DIR / "instance"

    # Cache (Redis) para o catálogo de serviços
    CACHE_TYPE: str = os.environ.get('CACHE_TYPE', 'RedisCache')
    CACHE_REDIS_HOST: str = os.environ.get('REDIS_HOST', 'localhost')
    CACHE_REDIS_PORT: int = int(os.environ.get('REDIS_PORT', 6379))
    CACHE_REDIS_PASSWORD: str | None = os.environ.get('REDIS_PASSWORD', None)
    CACHE_REDIS_DB: int = int(os.environ.get('REDIS_DB', 0))
    CACHE_DEFAULT_TIMEOUT: int = int(os.environ.get('CACHE_DEFAULT_TIMEOUT', 3600))
    # Sobrescreve host/porta acima quando definida (forma mais fácil no Render)
    CACHE_REDIS_URL: str | None = os.environ.get('CACHE_REDIS_URL', None)

    # Fuso usado para saber qual é o "hoje" da oficina
    WORKSHOP_TIMEZONE: str = os.getenv("WORKSHOP_TIMEZONE", "America/Sao_Paulo")

    # Capacidade diária em unidades de trabalho
    WORKLOAD_BASE_CAPACITY: int = int(os.getenv("WORKLOAD_BASE_CAPACITY", 10))
    WORKLOAD_HIGH_CAPACITY: int = int(os.getenv("WORKLOAD_HIGH_CAPACITY", 13))
    WORKLOAD_HIGH_CAPACITY_WEEKDAYS: str = os.getenv("WORKLOAD_HIGH_CAPACITY_WEEKDAYS", "thursday,friday")

    @classmethod
    def init_app(cls) -> None:
        """
        Define SQLALCHEMY_DATABASE_URI de forma consistente:
        - Em produção: exige DATABASE_URL
        - Em dev: usa DATABASE_URL se existir; senão, SQLite local
        """
        db_url = normalize_database_url(os.getenv("DATABASE_URL") or "", cls.APP_ENV == "production")

        if cls.APP_ENV == "production":
            if not db_url:
                raise RuntimeError(
                    "DATABASE_URL não definido em produção. "
                    "No Render, configure a variável de ambiente DATABASE_URL."
                )
            cls.SQLALCHEMY_DATABASE_URI = db_url
            return

        # development
        if not db_url:
            cls.INSTANCE_DIR.mkdir(exist_ok=True)
            db_url = f"sqlite:///{cls.INSTANCE_DIR / 'database.db'}"
        cls.SQLALCHEMY_DATABASE_URI = db_url


class TestingConfig(Config):
    APP_ENV = "testing"
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    CACHE_TYPE = "SimpleCache"
    WORKLOAD_BASE_CAPACITY = 10
    WORKLOAD_HIGH_CAPACITY = 13
    WORKLOAD_HIGH_CAPACITY_WEEKDAYS = "thursday,friday"

    @classmethod
    def init_app(cls) -> None:
        # Banco em memória definido acima; não lê DATABASE_URL
        return None
