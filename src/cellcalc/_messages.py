"""Command and reply messages with a JSON form."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from ._value import Error, ErrorKind, Number, Value


class MessageError(Exception):
    """A message could not be decoded."""


class _MessageModel(BaseModel):
    model_config = ConfigDict(frozen=True, ser_json_inf_nan="constants")


class NumberPayload(_MessageModel):
    """JSON form of a :class:`Number`."""

    type: Literal["number"] = "number"
    value: float

    def to_value(self) -> Number:
        return Number(self.value)


class ErrorPayload(_MessageModel):
    """JSON form of an :class:`Error`."""

    type: Literal["error"] = "error"
    kind: ErrorKind
    detail: str = ""

    def to_value(self) -> Error:
        return Error(self.kind, self.detail)


ValuePayload = Annotated[NumberPayload | ErrorPayload, Field(discriminator="type")]


def payload_from_value(value: Value) -> NumberPayload | ErrorPayload:
    """Convert an evaluation value into its JSON payload."""
    if isinstance(value, Number):
        return NumberPayload(value=value.value)
    return ErrorPayload(kind=value.kind, detail=value.detail)


class OkReply(_MessageModel):
    """The command succeeded and has nothing to report."""

    type: Literal["ok"] = "ok"


class ValueReply(_MessageModel):
    """The command produced a value (which may itself be an error value)."""

    type: Literal["value"] = "value"
    payload: ValuePayload

    @classmethod
    def of(cls, value: Value) -> ValueReply:
        return cls(payload=payload_from_value(value))

    @property
    def value(self) -> Value:
        return self.payload.to_value()


class ErrorReply(_MessageModel):
    """The command failed."""

    type: Literal["error"] = "error"
    message: str


Reply = Annotated[OkReply | ValueReply | ErrorReply, Field(discriminator="type")]


class Command(_MessageModel):
    """A textual command such as ``set A1 1 + 2``."""

    command: str


class Message(_MessageModel):
    """Envelope carrying either a command or a reply."""

    kind: Literal["command", "reply"]
    command: Command | None = None
    reply: Reply | None = None

    @classmethod
    def for_command(cls, command: str) -> Message:
        return cls(kind="command", command=Command(command=command))

    @classmethod
    def for_reply(cls, reply: OkReply | ValueReply | ErrorReply) -> Message:
        return cls(kind="reply", reply=reply)


_reply_adapter: TypeAdapter[OkReply | ValueReply | ErrorReply] = TypeAdapter(Reply)


def encode_message(message: Message) -> bytes:
    """Serialize a message to JSON bytes."""
    return message.model_dump_json(exclude_none=True).encode()


def decode_message(data: bytes | str) -> Message:
    """Parse JSON bytes into a message.

    Raises:
        MessageError: If the data is not a valid message.

    """
    try:
        message = Message.model_validate_json(data)
    except ValidationError as e:
        msg = f"Invalid message: {e}"
        raise MessageError(msg) from e

    if message.kind == "command" and message.command is None:
        msg = "Invalid message: command message without a command"
        raise MessageError(msg)
    if message.kind == "reply" and message.reply is None:
        msg = "Invalid message: reply message without a reply"
        raise MessageError(msg)
    return message


def decode_reply(data: bytes | str) -> OkReply | ValueReply | ErrorReply:
    """Parse a bare reply (not wrapped in a :class:`Message`)."""
    try:
        return _reply_adapter.validate_json(data)
    except ValidationError as e:
        msg = f"Invalid reply: {e}"
        raise MessageError(msg) from e
