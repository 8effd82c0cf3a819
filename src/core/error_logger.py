"""
Модуль для логирования ошибок в отдельные файлы.
Предоставляет структурированное логирование ошибок с детальной информацией.
"""

import logging
import json
import traceback
from typing import Any, Dict, Optional
from datetime import datetime


class ErrorReporter:
    """Класс для структурированного логирования ошибок"""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def log_error(
        self,
        error: Exception,
        context: Optional[Dict[str, Any]] = None,
        message: str = "",
        include_traceback: bool = True
    ) -> None:
        """
        Логирует ошибку с детальной информацией

        Args:
            error: Исключение для логирования
            context: Дополнительный контекст ошибки (link_id, chat_id, etc.)
            message: Дополнительное сообщение об ошибке
            include_traceback: Включать ли traceback в лог
        """
        error_info = {
            "error_type": type(error).__name__,
            "error_message": str(error),
            "timestamp": datetime.now().isoformat(),
            "context": context or {},
            "custom_message": message
        }

        if include_traceback:
            error_info["traceback"] = traceback.format_exc()

        log_message = f"Error: {error_info['error_type']} - {error_info['error_message']}"
        if message:
            log_message = f"{message} | {log_message}"
        if context:
            log_message += f" | Context: {json.dumps(context, ensure_ascii=False, default=str)}"

        self.logger.error(log_message, exc_info=include_traceback, extra={
            "error_info": error_info
        })

    def log_storage_error(
        self,
        error: Exception,
        operation: str,
        **params: Any
    ) -> None:
        """Логирует ошибки работы с хранилищем ссылок"""
        context = {"operation": operation, **params}
        self.log_error(error, context, f"Storage error in {operation}")

    def log_delivery_error(
        self,
        error: Exception,
        chat_id: Optional[int],
        method: str,
        status_code: Optional[int] = None,
        error_details: Optional[str] = None
    ) -> None:
        """Логирует ошибки отправки сообщений в Telegram"""
        context = {
            "chat_id": chat_id,
            "method": method,
            "status_code": status_code,
            "error_details": error_details
        }
        self.log_error(error, context, "Telegram delivery error")

    def log_update_processing_error(
        self,
        error: Exception,
        update_id: int,
        chat_id: Optional[int] = None,
        source: str = "webhook"
    ) -> None:
        """Логирует ошибки обработки входящих обновлений бота"""
        context = {
            "update_id": update_id,
            "chat_id": chat_id,
            "source": source
        }
        self.log_error(error, context, f"Update processing error ({source})")


# Глобальный экземпляр ErrorReporter (инициализируется в setup_logging)
error_reporter: Optional[ErrorReporter] = None


def get_error_reporter() -> ErrorReporter:
    """Получить глобальный экземпляр ErrorReporter.

    Если setup_error_reporting() еще не вызывался (например, в тестах),
    создается репортер поверх логгера error_reports без файловых обработчиков.
    """
    global error_reporter
    if error_reporter is None:
        error_reporter = ErrorReporter(logging.getLogger("error_reports"))
    return error_reporter


def setup_error_reporting(error_logger: logging.Logger) -> None:
    """Инициализировать глобальный ErrorReporter"""
    global error_reporter
    error_reporter = ErrorReporter(error_logger)
