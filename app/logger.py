'''
Logger centralisé du Laundromat Locator.

Loguru, avec une sortie console colorée et un fichier rotatif par famille
de niveaux (debug, info/warning, erreurs) dans `settings.LOG_DIR`.
'''

import os
import sys

from loguru import logger

from app.config import settings

os.makedirs(settings.LOG_DIR, exist_ok=True)

# Pas de doublons avec le handler par défaut
logger.remove()

LOG_FORMAT_CONSOLE = (
    "<white>{time:YYYY-MM-DD HH:mm:ss.SSS}</white> | "
    "<level>{level: <8}</level> | "
    "<light-black>{name}:{function}:{line}</light-black> - "
    "<level><b>{message}</b></level>"
)
LOG_FORMAT_FILE = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"

logger.add(
    sys.stderr,
    level=settings.LOG_LEVEL,
    format=LOG_FORMAT_CONSOLE,
    colorize=True,
    backtrace=True,
    diagnose=False
)

# (fichier, niveau minimal, niveaux retenus ; None = tout à partir du minimum)
LOG_FILES = [
    ("debug.log", "DEBUG", ("DEBUG",)),
    ("info.log", "INFO", ("INFO", "WARNING")),     # recherches, fallbacks, cache HIT/MISS
    ("error.log", "ERROR", None),                  # backend, géocodage, paiement
]

for filename, level, levels in LOG_FILES:
    logger.add(
        os.path.join(settings.LOG_DIR, filename),
        level=level,
        format=LOG_FORMAT_FILE,
        rotation="00:00",
        retention="30 days",
        compression="zip",
        encoding="utf-8",
        backtrace=level == "ERROR",
        diagnose=False,
        filter=(lambda record, keep=levels: record["level"].name in keep) if levels else None,
    )
