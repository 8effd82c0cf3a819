from .link import NewLink, Link, Access
from .chat import IncomingChatMessage
from .dialogue import (
	AwaitingCommand,
	AwaitingTarget,
	AwaitingTitle,
	DialoguePhase,
	Reply,
	CommitLink,
	Transition,
)

__all__ = [
	"NewLink",
	"Link",
	"Access",
	"IncomingChatMessage",
	"AwaitingCommand",
	"AwaitingTarget",
	"AwaitingTitle",
	"DialoguePhase",
	"Reply",
	"CommitLink",
	"Transition",
]
