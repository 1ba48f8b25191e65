"""Wire serializers for WAMP messages, looked up by name.

JSON, CBOR and MessagePack encode the message list form. Protobuf uses
schemas generated from the message dataclasses: one leading byte holds the
message type, followed by the protobuf encoding. In the protobuf form,
options/details and the trailing args/kwargs travel as CBOR-encoded bytes.
That protobuf layout is specific to this package; other WAMP libraries
cannot decode it.
"""

from __future__ import annotations

import dataclasses
import json
from typing import Any, Protocol

import cbor2
import msgpack
from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

from .cli_shared import CBOR_SERIALIZER, JSON_SERIALIZER, MSGPACK_SERIALIZER, PROTOBUF_SERIALIZER
from .messages import MESSAGE_TYPES, Message, trailing_payload
from .values import to_native


class Serializer(Protocol):
    name: str

    def serialize(self, message: Message) -> bytes: ...


class JSONSerializer:
    name = JSON_SERIALIZER

    def serialize(self, message: Message) -> bytes:
        return json.dumps(
            message.to_list(),
            separators=(",", ":"),
            sort_keys=True,
            ensure_ascii=False,
            allow_nan=False,
        ).encode("utf-8")


class CBORSerializer:
    name = CBOR_SERIALIZER

    def serialize(self, message: Message) -> bytes:
        return cbor2.dumps(message.to_list())


class MsgPackSerializer:
    name = MSGPACK_SERIALIZER

    def serialize(self, message: Message) -> bytes:
        return msgpack.packb(message.to_list(), use_bin_type=True)


_FieldProto = descriptor_pb2.FieldDescriptorProto

_PROTO_PACKAGE = "wampproto"
_PROTO_FILE = "wampproto_cli/messages.proto"

_PROTO_FIELD_TYPES = {
    "request_id": _FieldProto.TYPE_INT64,
    "registration_id": _FieldProto.TYPE_INT64,
    "subscription_id": _FieldProto.TYPE_INT64,
    "procedure": _FieldProto.TYPE_STRING,
    "topic": _FieldProto.TYPE_STRING,
    "options": _FieldProto.TYPE_BYTES,
    "details": _FieldProto.TYPE_BYTES,
}
_MAP_FIELDS = ("options", "details")
_PAYLOAD_FIELDS = ("args", "kwargs")
_PAYLOAD = "payload"


def _proto_layout(cls: type[Message]) -> list[tuple[str, int]]:
    layout: list[tuple[str, int]] = []
    for f in dataclasses.fields(cls):
        if f.name in _PAYLOAD_FIELDS:
            if (_PAYLOAD, _FieldProto.TYPE_BYTES) not in layout:
                layout.append((_PAYLOAD, _FieldProto.TYPE_BYTES))
            continue
        layout.append((f.name, _PROTO_FIELD_TYPES[f.name]))
    return layout


def _build_proto_classes() -> dict[type[Message], Any]:
    file_proto = descriptor_pb2.FileDescriptorProto(
        name=_PROTO_FILE,
        package=_PROTO_PACKAGE,
        syntax="proto3",
    )
    for cls in MESSAGE_TYPES:
        msg_proto = file_proto.message_type.add(name=cls.__name__)
        for number, (name, field_type) in enumerate(_proto_layout(cls), start=1):
            msg_proto.field.add(
                name=name,
                number=number,
                type=field_type,
                label=_FieldProto.LABEL_OPTIONAL,
            )

    pool = descriptor_pool.DescriptorPool()
    pool.AddSerializedFile(file_proto.SerializeToString())
    return {
        cls: message_factory.GetMessageClass(
            pool.FindMessageTypeByName(f"{_PROTO_PACKAGE}.{cls.__name__}")
        )
        for cls in MESSAGE_TYPES
    }


class ProtobufSerializer:
    name = PROTOBUF_SERIALIZER

    def __init__(self) -> None:
        self._classes = _build_proto_classes()

    def proto_class(self, cls: type[Message]) -> Any:
        return self._classes[cls]

    def serialize(self, message: Message) -> bytes:
        cls = type(message)
        values: dict[str, Any] = {}
        for f in dataclasses.fields(message):
            if f.name in _PAYLOAD_FIELDS:
                continue
            value = getattr(message, f.name)
            if f.name in _MAP_FIELDS:
                if value:
                    values[f.name] = cbor2.dumps(to_native(value))
                continue
            values[f.name] = value

        if any(f.name in _PAYLOAD_FIELDS for f in dataclasses.fields(message)):
            payload = trailing_payload(getattr(message, "args"), getattr(message, "kwargs"))
            if payload:
                values[_PAYLOAD] = cbor2.dumps(payload)

        body = self.proto_class(cls)(**values).SerializeToString(deterministic=True)
        return bytes([cls.TYPE]) + body


_SERIALIZERS: dict[str, type] = {
    JSON_SERIALIZER: JSONSerializer,
    CBOR_SERIALIZER: CBORSerializer,
    MSGPACK_SERIALIZER: MsgPackSerializer,
    PROTOBUF_SERIALIZER: ProtobufSerializer,
}

SERIALIZER_NAMES = tuple(_SERIALIZERS)


def serializer_by_name(name: str) -> Serializer:
    return _SERIALIZERS[name]()
