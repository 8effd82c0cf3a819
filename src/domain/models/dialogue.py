from __future__ import annotations
from typing import Annotated, Literal, Union
from pydantic import BaseModel, Field


class AwaitingCommand(BaseModel):
	kind: Literal["awaiting_command"] = "awaiting_command"


class AwaitingTarget(BaseModel):
	kind: Literal["awaiting_target"] = "awaiting_target"


class AwaitingTitle(BaseModel):
	kind: Literal["awaiting_title"] = "awaiting_title"
	target: str = Field(min_length=1)


DialoguePhase = Annotated[
	Union[AwaitingCommand, AwaitingTarget, AwaitingTitle],
	Field(discriminator="kind"),
]


class Reply(BaseModel):
	text: str
	html: bool = False


class CommitLink(BaseModel):
	target: str
	title: str


class Transition(BaseModel):
	phase: DialoguePhase
	effect: Union[Reply, CommitLink]
