"""Single binary-expression evaluator over a shared variable table."""

__all__ = [
    "Command",
    "Error",
    "ErrorKind",
    "ErrorReply",
    "ExpressionRunner",
    "Message",
    "MessageError",
    "Number",
    "OkReply",
    "Reply",
    "Sheet",
    "Value",
    "ValueReply",
    "VariableTable",
    "decode_message",
    "decode_reply",
    "encode_message",
    "is_error",
    "parse_number",
]

from ._messages import (
    Command,
    ErrorReply,
    Message,
    MessageError,
    OkReply,
    Reply,
    ValueReply,
    decode_message,
    decode_reply,
    encode_message,
)
from ._runner import ExpressionRunner, parse_number
from ._sheet import Sheet
from ._table import VariableTable
from ._value import Error, ErrorKind, Number, Value, is_error
