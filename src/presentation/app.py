import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI

from presentation.container import Container
from presentation.middleware.logging import log_request_middleware
from presentation.polling import TelegramPollingListener, stop_process_when_done
from presentation.routers.health import router as health_router
from presentation.routers.redirect import router as redirect_router
from presentation.routers.webhooks import router as webhooks_router
from presentation.updates import process_update


def create_app(container: Optional[Container] = None) -> FastAPI:
	container = container or Container()

	@asynccontextmanager
	async def lifespan(app: FastAPI):
		logger = logging.getLogger("startup")
		await container.startup()

		polling_task = None
		telegram = container.settings.telegram
		if telegram.use_polling and container.telegram_client is not None:
			async def handle(update):
				await process_update(container, update, source="polling")

			listener = TelegramPollingListener(
				client=container.telegram_client,
				handle_update=handle,
				timeout=telegram.polling_timeout,
			)
			polling_task = asyncio.create_task(listener.run(), name="telegram-polling")
			polling_task.add_done_callback(stop_process_when_done)
			logger.info("Бот работает в режиме long polling")

		yield

		if polling_task is not None:
			polling_task.cancel()
			try:
				await polling_task
			except asyncio.CancelledError:
				pass
		await container.shutdown()

	app = FastAPI(title="fwd-link-shortener", lifespan=lifespan)
	app.state.container = container

	app.middleware("http")(log_request_middleware)

	app.include_router(health_router)
	app.include_router(webhooks_router)
	# Последним: /{link_id}/{title} не должен перекрывать остальные маршруты
	app.include_router(redirect_router)
	return app
