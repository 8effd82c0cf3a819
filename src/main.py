from pathlib import Path
from core.config import settings
from core.logging_setup import setup_logging
from presentation.app import create_app
import uvicorn

setup_logging(settings.app.logs_dir)

print(f"Логирование настроено. Логи сохраняются в директорию: {Path(settings.app.logs_dir).absolute()}")

app = create_app()

if __name__ == "__main__":
	# Исключаем директорию logs из отслеживания изменений для предотвращения бесконечных перезапусков
	uvicorn.run(
		"main:app",
		host="0.0.0.0",
		port=8000,
		reload_excludes=["logs/*", "logs/**/*", "*.log"],
		log_level="info"
	)
