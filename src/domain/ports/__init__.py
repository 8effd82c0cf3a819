from .messenger import ChatMessenger
from .link_repository import LinkRepository
from .dialogue_storage import DialogueStorage

__all__ = [
	"ChatMessenger",
	"LinkRepository",
	"DialogueStorage",
]
