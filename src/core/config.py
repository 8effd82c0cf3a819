from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv, find_dotenv

# Ensure .env is loaded regardless of current working directory
load_dotenv(find_dotenv(), override=False)


class TelegramSettings(BaseSettings):
	model_config = SettingsConfigDict(env_prefix="TELEGRAM_")
	token: str = "your_telegram_bot_token"
	api_base_url: str = "https://api.telegram.org"
	webhook_secret: Optional[str] = None
	request_timeout: float = 10.0

	# Режим получения обновлений: вебхук (по умолчанию) или long polling
	use_polling: bool = False
	polling_timeout: int = 30


class DatabaseSettings(BaseSettings):
	model_config = SettingsConfigDict(env_prefix="APP_")
	url: str = "sqlite+aiosqlite:///data/app.db"
	use_sqlalchemy_repos: bool = True


class AppSettings(BaseSettings):
	model_config = SettingsConfigDict(env_prefix="APP_")
	public_base_url: str | None = None
	logs_dir: str = "logs"

	# Команды диалога
	shorten_command: str = "/shorten"
	cancel_command: str = "/cancel"
	dialogue_ttl_seconds: int = 86400  # 0 - без ограничения

	# Уведомления владельцу ссылки
	notify_include_headers: bool = False
	trust_forwarded_headers: bool = True


class Settings(BaseSettings):
	telegram: TelegramSettings = TelegramSettings()
	app: AppSettings = AppSettings()
	database: DatabaseSettings = DatabaseSettings()


settings = Settings()
