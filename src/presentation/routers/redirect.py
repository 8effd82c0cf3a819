import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse

from core.error_logger import get_error_reporter
from domain.errors import InternalError, LinkNotFoundError
from presentation.container import Container, get_container

router = APIRouter()
logger = logging.getLogger("redirect")


def requester_address(request: Request, trust_forwarded: bool = True) -> str:
	"""Адрес клиента: X-Forwarded-For, X-Real-IP или адрес сокета"""
	if trust_forwarded:
		forwarded_for = request.headers.get("x-forwarded-for", "")
		first_hop = forwarded_for.split(",")[0].strip()
		if first_hop:
			return first_hop
		real_ip = request.headers.get("x-real-ip", "").strip()
		if real_ip:
			return real_ip
	if request.client and request.client.host:
		return request.client.host
	return "unknown"


@router.get("/{link_id:int}")
@router.get("/{link_id:int}/{title:path}")
async def redirect_link(
	link_id: int,
	request: Request,
	container: Container = Depends(get_container),
):
	"""Redirects a short link to its target; the title segment is ignored."""
	address = requester_address(request, container.settings.app.trust_forwarded_headers)
	try:
		target = await container.resolve_redirect_uc.execute(
			link_id=link_id,
			address=address,
			headers=dict(request.headers),
		)
	except LinkNotFoundError:
		raise HTTPException(status_code=404, detail="Link not found")
	except InternalError as e:
		logger.exception("Ошибка при переходе по ссылке id=%s с адреса %s", link_id, address)
		get_error_reporter().log_error(
			error=e,
			context={"link_id": link_id, "address": address, "path": request.url.path},
			message="Redirect failed",
		)
		raise HTTPException(status_code=500, detail="Internal server error")

	return RedirectResponse(url=target, status_code=302)
