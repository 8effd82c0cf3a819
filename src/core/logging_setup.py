import logging
import logging.handlers
from pathlib import Path

from core.error_logger import setup_error_reporting


def setup_logging(logs_dir: str | Path = "logs") -> logging.Logger:
	"""Настраивает логирование приложения и возвращает логгер error_reports"""
	logs_dir = Path(logs_dir)
	logs_dir.mkdir(parents=True, exist_ok=True)

	console_handler = logging.StreamHandler()
	console_handler.setLevel(logging.DEBUG)  # Консоль показывает DEBUG+

	file_handler = logging.handlers.RotatingFileHandler(
		logs_dir / "app.log",
		maxBytes=10*1024*1024,  # 10MB
		backupCount=5,
		encoding='utf-8'
	)
	file_handler.setLevel(logging.WARNING)  # Файлы пишут только WARNING+

	logging.basicConfig(
		level=logging.DEBUG,
		format="%(asctime)s %(levelname)s %(name)s: %(message)s",
		handlers=[
			console_handler,
			file_handler
		]
	)

	# Отдельный логгер для ошибок
	error_logger = logging.getLogger("error_reports")
	error_logger.setLevel(logging.ERROR)

	error_formatter = logging.Formatter(
		fmt="""%(asctime)s - ERROR REPORT
=====================================
Logger: %(name)s
Level: %(levelname)s
Message: %(message)s
Module: %(module)s
Function: %(funcName)s
Line: %(lineno)d
Process: %(process)d

--- END ERROR REPORT ---
""",
		datefmt="%Y-%m-%d %H:%M:%S"
	)

	# Ротация по дням, храним 30 дней
	error_file_handler = logging.handlers.TimedRotatingFileHandler(
		logs_dir / "errors.log",
		when="midnight",
		interval=1,
		backupCount=30,
		encoding='utf-8'
	)
	error_file_handler.setFormatter(error_formatter)
	error_file_handler.setLevel(logging.ERROR)

	json_error_formatter = logging.Formatter(
		'{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
		'"message": "%(message)s", "module": "%(module)s", "function": "%(funcName)s", '
		'"line": %(lineno)d}'
	)
	json_error_handler = logging.handlers.RotatingFileHandler(
		logs_dir / "errors.json",
		maxBytes=50*1024*1024,  # 50MB
		backupCount=10,
		encoding='utf-8'
	)
	json_error_handler.setFormatter(json_error_formatter)
	json_error_handler.setLevel(logging.ERROR)

	error_logger.addHandler(error_file_handler)
	error_logger.addHandler(json_error_handler)
	# Без propagation, чтобы избежать дублирования
	error_logger.propagate = False

	logging.getLogger("telegram").setLevel(logging.DEBUG)
	logging.getLogger("dialogue").setLevel(logging.DEBUG)
	logging.getLogger("redirect").setLevel(logging.INFO)
	logging.getLogger("links_repo").setLevel(logging.DEBUG)
	logging.getLogger("request_logger").setLevel(logging.INFO)
	logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
	logging.getLogger("httpx").setLevel(logging.WARNING)

	setup_error_reporting(error_logger)
	return error_logger
