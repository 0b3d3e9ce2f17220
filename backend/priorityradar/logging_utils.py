"""Configuracion de logging para priorityradar.

El logger raiz del paquete se reconfigura en caliente cuando cambia el
`.env` del backend (comprobado como mucho cada medio segundo).
"""

from __future__ import annotations

import atexit
import logging
import time
from contextlib import suppress
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path
from queue import Queue
from threading import Lock
from typing import Any, Optional

from priorityradar.config import PRIORITYRADAR_ENV_PATH, REPO_ROOT, Settings

ROOT_LOGGER = "priorityradar"

_DISABLED_LEVEL = logging.CRITICAL + 10
_BASE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_DEBUG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(filename)s:%(lineno)d | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_CHECK_INTERVAL_SEC = 0.5

# (log_enabled, log_to_file, file_path, log_debug) de la ultima configuracion aplicada
_last_signature: Optional[tuple[bool, bool, str, bool]] = None
_last_mtime: Optional[float] = None
_last_check: Optional[float] = None
_listener: Optional[QueueListener] = None
_listener_handlers: list[logging.Handler] = []
_config_lock = Lock()
_atexit_registered = False


def _resolve_path(file_name: str | Path) -> Path:
    """Rutas relativas cuelgan de `<repo>/logs/`."""
    path = Path(str(file_name).strip() or "priorityradar.log")
    if path.is_absolute():
        return path
    return (REPO_ROOT / "logs" / path).resolve()


def _env_mtime() -> Optional[float]:
    try:
        return PRIORITYRADAR_ENV_PATH.stat().st_mtime
    except FileNotFoundError:
        return None


def _stop_listener() -> None:
    global _listener, _listener_handlers
    if _listener is None:
        return
    _listener.stop()
    for handler in _listener_handlers:
        with suppress(Exception):
            handler.close()
    _listener = None
    _listener_handlers = []


def _throttled() -> bool:
    """True si la ultima comprobacion fue hace menos de `_CHECK_INTERVAL_SEC`."""
    global _last_check
    now = time.monotonic()
    if _last_check is not None and (now - _last_check) < _CHECK_INTERVAL_SEC:
        return True
    _last_check = now
    return False


def _read_settings(force: bool) -> Optional[Any]:
    """Devuelve la config a aplicar, o None si nada ha cambiado."""
    global _last_signature, _last_mtime
    with _config_lock:
        mtime = _env_mtime()
        if not force and _last_signature is not None and _last_mtime == mtime:
            return None
        _last_mtime = mtime

        cfg = Settings()
        signature = (
            bool(cfg.log_enabled),
            bool(cfg.log_to_file),
            str(_resolve_path(cfg.log_file_name)) if cfg.log_to_file else "",
            bool(cfg.log_debug),
        )
        if not force and signature == _last_signature:
            return None
        _last_signature = signature
        return cfg


def _file_handlers(cfg: Any, level: int, formatter: logging.Formatter) -> list[logging.Handler]:
    """Escritura a fichero desacoplada via cola para no bloquear peticiones."""
    global _listener, _listener_handlers, _atexit_registered
    log_path = _resolve_path(cfg.log_file_name)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(log_path, encoding="utf-8", delay=True)
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)

    queue: Queue[logging.LogRecord] = Queue(-1)
    queue_handler = QueueHandler(queue)
    queue_handler.setLevel(level)

    _listener = QueueListener(queue, file_handler, respect_handler_level=True)
    _listener.start()
    _listener_handlers = [file_handler]
    if not _atexit_registered:
        atexit.register(_stop_listener)
        _atexit_registered = True
    return [queue_handler]


def configure_logging(force: bool = False) -> None:
    """Aplica LOG_ENABLED / LOG_TO_FILE / LOG_FILE_NAME / LOG_DEBUG al logger del paquete."""
    if not force and _last_signature is not None and _throttled():
        return
    cfg = _read_settings(force)
    if cfg is None:
        return

    logger = logging.getLogger(ROOT_LOGGER)
    _stop_listener()
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        with suppress(Exception):
            handler.close()
    logger.propagate = False

    if not cfg.log_enabled:
        logger.disabled = True
        logger.setLevel(_DISABLED_LEVEL)
        logger.addHandler(logging.NullHandler())
        return

    level = logging.DEBUG if cfg.log_debug else logging.INFO
    logger.disabled = False
    logger.setLevel(level)
    formatter = logging.Formatter(_DEBUG_FORMAT if cfg.log_debug else _BASE_FORMAT, _DATE_FORMAT)

    if cfg.log_to_file:
        handlers = _file_handlers(cfg, level, formatter)
    else:
        stream = logging.StreamHandler()
        stream.setLevel(level)
        stream.setFormatter(formatter)
        handlers = [stream]
    for handler in handlers:
        logger.addHandler(handler)


class _HotReloadingLoggerAdapter(logging.LoggerAdapter):
    """Revisa la configuracion antes de cada emision."""

    def isEnabledFor(self, level: int) -> bool:  # noqa: N802
        configure_logging()
        return self.logger.isEnabledFor(level)

    def log(self, level: int, msg: object, *args: Any, **kwargs: Any) -> None:
        configure_logging()
        super().log(level, msg, *args, **kwargs)


def get_logger(name: str | None = None) -> logging.LoggerAdapter[logging.Logger]:
    """Devuelve un logger configurado para el paquete."""
    configure_logging()
    return _HotReloadingLoggerAdapter(logging.getLogger(name or ROOT_LOGGER), {})
