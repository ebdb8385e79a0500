"""
Configuración de logging estructurado.
- Nivel INFO por defecto; DEBUG en desarrollo (LOG_LEVEL).
- Formato con timestamps y nombre del logger.
- Integra con Uvicorn (hereda handlers) para no duplicar.
"""
import logging
import os

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(level: str | None = None) -> None:
    log_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=log_level, format=LOG_FORMAT)
    logging.getLogger("asesoria").setLevel(log_level)
    # Ajusta loggers de uvicorn para no duplicar formato
    for uv_logger in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(uv_logger).setLevel(log_level)
    # httpx loguea cada request en INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
