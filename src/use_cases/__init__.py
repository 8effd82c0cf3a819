from .dialogue import DialogueEngine, DialogueCommands, decide, compose_short_link
from .resolve_redirect import ResolveRedirectUseCase, normalize_target

__all__ = [
	"DialogueEngine",
	"DialogueCommands",
	"decide",
	"compose_short_link",
	"ResolveRedirectUseCase",
	"normalize_target",
]
