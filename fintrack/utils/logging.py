"""structlog 기반 구조화 로깅 설정 모듈.

Structured logging configuration using structlog.
Development: console renderer. Production: one JSON object per line.
Keys that look like credentials are masked before rendering; the request
logging middleware masks request bodies with the same key pattern.
"""

import logging
import re
import sys
from typing import Any

import structlog

from fintrack.config import settings

# 마스킹 대상 키 패턴 — Key fragments treated as sensitive
SENSITIVE_KEY_PATTERN: re.Pattern[str] = re.compile(
    r"(password|passwd|secret|token|authorization|api_key|apikey|credential)",
    re.IGNORECASE,
)


def is_sensitive_key(key: Any) -> bool:
    return SENSITIVE_KEY_PATTERN.search(str(key)) is not None


def _redact_sensitive(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """민감 키 마스킹 프로세서 — Mask values of credential-like keys."""
    for key in list(event_dict.keys()):
        if is_sensitive_key(key):
            event_dict[key] = "***"
    return event_dict


def configure_logging(log_level: str | None = None, json_output: bool | None = None) -> None:
    """structlog 및 표준 logging을 구성합니다.

    Configure structlog processors and route stdlib logging through the
    same level. Safe to call more than once.

    Args:
        log_level: 로그 레벨, 기본값 settings.LOG_LEVEL (Log level name)
        json_output: JSON 출력 여부, 기본값 settings.LOG_JSON (Render JSON)
    """
    level_name: str = (log_level or settings.LOG_LEVEL).upper()
    level: int = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO
    use_json: bool = settings.LOG_JSON if json_output is None else json_output

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _redact_sensitive,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if use_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,
    )
    logging.basicConfig(level=level, format="%(message)s", stream=sys.stdout)
