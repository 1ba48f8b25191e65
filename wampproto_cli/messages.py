"""WAMP message types emitted by the ``message`` commands.

Each message is an immutable record whose dataclass field order is the
order of its elements on the wire. ``to_list`` renders the list form
shared by the JSON, CBOR and MessagePack serializers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from .values import TypedValue, to_native

Options = dict[str, TypedValue]
Args = list[TypedValue] | None
KwArgs = dict[str, TypedValue] | None


def trailing_payload(args: Args, kwargs: KwArgs) -> list[Any]:
    if kwargs:
        return [to_native(args or []), to_native(kwargs)]
    if args:
        return [to_native(args)]
    return []


@dataclass(frozen=True)
class Message:
    TYPE: ClassVar[int]
    NAME: ClassVar[str]

    def to_list(self) -> list[Any]:
        raise NotImplementedError


@dataclass(frozen=True)
class Publish(Message):
    TYPE: ClassVar[int] = 16
    NAME: ClassVar[str] = "PUBLISH"

    request_id: int
    options: Options
    topic: str
    args: Args = None
    kwargs: KwArgs = None

    def to_list(self) -> list[Any]:
        return [self.TYPE, self.request_id, to_native(self.options), self.topic, *trailing_payload(self.args, self.kwargs)]


@dataclass(frozen=True)
class Subscribe(Message):
    TYPE: ClassVar[int] = 32
    NAME: ClassVar[str] = "SUBSCRIBE"

    request_id: int
    options: Options
    topic: str

    def to_list(self) -> list[Any]:
        return [self.TYPE, self.request_id, to_native(self.options), self.topic]


@dataclass(frozen=True)
class Subscribed(Message):
    TYPE: ClassVar[int] = 33
    NAME: ClassVar[str] = "SUBSCRIBED"

    request_id: int
    subscription_id: int

    def to_list(self) -> list[Any]:
        return [self.TYPE, self.request_id, self.subscription_id]


@dataclass(frozen=True)
class Call(Message):
    TYPE: ClassVar[int] = 48
    NAME: ClassVar[str] = "CALL"

    request_id: int
    options: Options
    procedure: str
    args: Args = None
    kwargs: KwArgs = None

    def to_list(self) -> list[Any]:
        return [self.TYPE, self.request_id, to_native(self.options), self.procedure, *trailing_payload(self.args, self.kwargs)]


@dataclass(frozen=True)
class Result(Message):
    TYPE: ClassVar[int] = 50
    NAME: ClassVar[str] = "RESULT"

    request_id: int
    details: Options
    args: Args = None
    kwargs: KwArgs = None

    def to_list(self) -> list[Any]:
        return [self.TYPE, self.request_id, to_native(self.details), *trailing_payload(self.args, self.kwargs)]


@dataclass(frozen=True)
class Register(Message):
    TYPE: ClassVar[int] = 64
    NAME: ClassVar[str] = "REGISTER"

    request_id: int
    options: Options
    procedure: str

    def to_list(self) -> list[Any]:
        return [self.TYPE, self.request_id, to_native(self.options), self.procedure]


@dataclass(frozen=True)
class Registered(Message):
    TYPE: ClassVar[int] = 65
    NAME: ClassVar[str] = "REGISTERED"

    request_id: int
    registration_id: int

    def to_list(self) -> list[Any]:
        return [self.TYPE, self.request_id, self.registration_id]


@dataclass(frozen=True)
class Unregister(Message):
    TYPE: ClassVar[int] = 66
    NAME: ClassVar[str] = "UNREGISTER"

    request_id: int
    registration_id: int

    def to_list(self) -> list[Any]:
        return [self.TYPE, self.request_id, self.registration_id]


@dataclass(frozen=True)
class Unregistered(Message):
    TYPE: ClassVar[int] = 67
    NAME: ClassVar[str] = "UNREGISTERED"

    request_id: int

    def to_list(self) -> list[Any]:
        return [self.TYPE, self.request_id]


@dataclass(frozen=True)
class Invocation(Message):
    TYPE: ClassVar[int] = 68
    NAME: ClassVar[str] = "INVOCATION"

    request_id: int
    registration_id: int
    details: Options
    args: Args = None
    kwargs: KwArgs = None

    def to_list(self) -> list[Any]:
        return [
            self.TYPE,
            self.request_id,
            self.registration_id,
            to_native(self.details),
            *trailing_payload(self.args, self.kwargs),
        ]


@dataclass(frozen=True)
class Yield(Message):
    TYPE: ClassVar[int] = 70
    NAME: ClassVar[str] = "YIELD"

    request_id: int
    options: Options
    args: Args = None
    kwargs: KwArgs = None

    def to_list(self) -> list[Any]:
        return [self.TYPE, self.request_id, to_native(self.options), *trailing_payload(self.args, self.kwargs)]


MESSAGE_TYPES: tuple[type[Message], ...] = (
    Publish,
    Subscribe,
    Subscribed,
    Call,
    Result,
    Register,
    Registered,
    Unregister,
    Unregistered,
    Invocation,
    Yield,
)
