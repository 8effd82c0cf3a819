import logging
import time
from fastapi import Request

logger = logging.getLogger("request_logger")


async def log_request_middleware(request: Request, call_next):
	started = time.perf_counter()

	if request.method == "POST" and request.url.path.startswith("/webhooks"):
		body = await request.body()
		if body:
			logger.debug(f"Request Body: {body.decode('utf-8', errors='ignore')}")

		async def receive():
			return {"type": "http.request", "body": body}

		request = Request(request.scope, receive)

	response = await call_next(request)
	elapsed_ms = (time.perf_counter() - started) * 1000
	logger.info(
		"%s %s -> %s (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms
	)
	return response
