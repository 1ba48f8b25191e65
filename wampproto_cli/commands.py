from __future__ import annotations

from typing import Mapping, Sequence

from . import codec, cryptosign, messages, values
from .cli_shared import OpError, SerializationError, SignatureVerificationError, UsageError
from .serializers import serializer_by_name


def _decode_arg(raw: str, *, label: str) -> bytes:
    try:
        return codec.decode(raw)
    except codec.DecodeError as e:
        raise UsageError(f"invalid {label}: {e}") from e


def _private_key(raw: str) -> bytes:
    key = _decode_arg(raw, label="private-key")
    if len(key) not in (cryptosign.SEED_BYTES, cryptosign.EXPANDED_KEY_BYTES):
        raise UsageError("invalid private-key: must be of length 32 or 64")
    return key


def cmd_generate_challenge(*, output: str) -> str:
    return codec.encode(output, cryptosign.generate_challenge())


def cmd_sign_challenge(*, challenge: str, private_key: str, output: str) -> str:
    challenge_raw = _decode_arg(challenge, label="challenge")
    key = _private_key(private_key)
    if len(key) == cryptosign.SEED_BYTES:
        key = cryptosign.expand_seed(key)
    try:
        signed = cryptosign.sign_challenge(challenge_raw, key)
    except Exception as e:
        raise OpError(f"sign-challenge failed: {e}") from e
    return codec.encode(output, signed)


def cmd_verify_signature(*, signature: str, public_key: str) -> str:
    key = _decode_arg(public_key, label="public-key")
    if len(key) != cryptosign.PUBLIC_KEY_BYTES:
        raise UsageError("invalid public-key: must be of length 32")
    try:
        signed = codec.decode(signature)
    except codec.DecodeError as e:
        raise SignatureVerificationError() from e
    if not cryptosign.verify_signature(signed, key):
        raise SignatureVerificationError()
    return "Signature verified successfully"


def cmd_keygen(*, output: str) -> str:
    public_key, private_key = cryptosign.generate_keypair()
    return f"Public Key: {codec.encode(output, public_key)}\nPrivate Key: {codec.encode(output, private_key)}"


def cmd_get_pubkey(*, private_key: str, output: str) -> str:
    seed = _private_key(private_key)[: cryptosign.SEED_BYTES]
    return codec.encode(output, cryptosign.public_key_from_seed(seed))


def serialize_and_format(message: messages.Message, *, serializer: str, output: str) -> str:
    try:
        data = serializer_by_name(serializer).serialize(message)
    except Exception as e:
        raise SerializationError(f"{serializer} serialization of {message.NAME} failed: {e}") from e
    return codec.encode(output, data)


def _payload(
    args: Sequence[str] | None, kwargs: Mapping[str, str] | None
) -> tuple[messages.Args, messages.KwArgs]:
    return values.args_kwargs_or_none(values.convert_list(args), values.convert_map(kwargs))


def build_call(
    *,
    request_id: int,
    procedure: str,
    args: Sequence[str] | None = None,
    kwargs: Mapping[str, str] | None = None,
    options: Mapping[str, str] | None = None,
) -> messages.Call:
    arguments, keyword_arguments = _payload(args, kwargs)
    return messages.Call(request_id, values.convert_map(options), procedure, arguments, keyword_arguments)


def build_result(
    *,
    request_id: int,
    args: Sequence[str] | None = None,
    kwargs: Mapping[str, str] | None = None,
    details: Mapping[str, str] | None = None,
) -> messages.Result:
    arguments, keyword_arguments = _payload(args, kwargs)
    return messages.Result(request_id, values.convert_map(details), arguments, keyword_arguments)


def build_register(
    *, request_id: int, procedure: str, options: Mapping[str, str] | None = None
) -> messages.Register:
    return messages.Register(request_id, values.convert_map(options), procedure)


def build_registered(*, request_id: int, registration_id: int) -> messages.Registered:
    return messages.Registered(request_id, registration_id)


def build_invocation(
    *,
    request_id: int,
    registration_id: int,
    args: Sequence[str] | None = None,
    kwargs: Mapping[str, str] | None = None,
    details: Mapping[str, str] | None = None,
) -> messages.Invocation:
    arguments, keyword_arguments = _payload(args, kwargs)
    return messages.Invocation(
        request_id, registration_id, values.convert_map(details), arguments, keyword_arguments
    )


def build_yield(
    *,
    request_id: int,
    args: Sequence[str] | None = None,
    kwargs: Mapping[str, str] | None = None,
    options: Mapping[str, str] | None = None,
) -> messages.Yield:
    arguments, keyword_arguments = _payload(args, kwargs)
    return messages.Yield(request_id, values.convert_map(options), arguments, keyword_arguments)


def build_unregister(*, request_id: int, registration_id: int) -> messages.Unregister:
    return messages.Unregister(request_id, registration_id)


def build_unregistered(*, request_id: int) -> messages.Unregistered:
    return messages.Unregistered(request_id)


def build_subscribe(
    *, request_id: int, topic: str, options: Mapping[str, str] | None = None
) -> messages.Subscribe:
    return messages.Subscribe(request_id, values.convert_map(options), topic)


def build_subscribed(*, request_id: int, subscription_id: int) -> messages.Subscribed:
    return messages.Subscribed(request_id, subscription_id)


def build_publish(
    *,
    request_id: int,
    topic: str,
    args: Sequence[str] | None = None,
    kwargs: Mapping[str, str] | None = None,
    options: Mapping[str, str] | None = None,
) -> messages.Publish:
    arguments, keyword_arguments = _payload(args, kwargs)
    return messages.Publish(request_id, values.convert_map(options), topic, arguments, keyword_arguments)


MESSAGE_BUILDERS = {
    "call": build_call,
    "result": build_result,
    "register": build_register,
    "registered": build_registered,
    "invocation": build_invocation,
    "yield": build_yield,
    "unregister": build_unregister,
    "unregistered": build_unregistered,
    "subscribe": build_subscribe,
    "subscribed": build_subscribed,
    "publish": build_publish,
}


def cmd_message(kind: str, *, serializer: str, output: str, **fields) -> str:
    """Build one *kind* of message from CLI fields, serialize and encode it."""

    message = MESSAGE_BUILDERS[kind](**fields)
    return serialize_and_format(message, serializer=serializer, output=output)
