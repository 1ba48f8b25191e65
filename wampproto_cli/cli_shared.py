from __future__ import annotations

from dataclasses import dataclass

from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape


class WampprotoCliError(Exception):
    pass


class UsageError(WampprotoCliError):
    pass


class OpError(WampprotoCliError):
    pass


class SerializationError(OpError):
    pass


class SignatureVerificationError(OpError):
    def __init__(self, msg: str = "signature verification failed") -> None:
        super().__init__(msg)


WAMPPROTO_OUTPUT = "WAMPPROTO_OUTPUT"
WAMPPROTO_SERIALIZER = "WAMPPROTO_SERIALIZER"
WAMPPROTO_VERBOSE = "WAMPPROTO_VERBOSE"

HEX_FORMAT = "hex"
BASE64_FORMAT = "base64"

JSON_SERIALIZER = "json"
CBOR_SERIALIZER = "cbor"
MSGPACK_SERIALIZER = "msgpack"
PROTOBUF_SERIALIZER = "protobuf"


@dataclass(frozen=True)
class GlobalOpts:
    output: str = HEX_FORMAT
    verbose: bool = False


_ERROR_CONSOLE = Console(stderr=True)


def _rich_error(msg: str) -> None:
    _ERROR_CONSOLE.print(f"[bold red]error:[/bold red] {escape(msg)}")


def _trace(g: GlobalOpts, msg: str) -> None:
    if g.verbose:
        _ERROR_CONSOLE.print(f"[dim]{escape(msg)}[/dim]", highlight=False)


def _bootstrap_env() -> None:
    # Use python-dotenv package defaults: discover and load .env without
    # overriding already-exported process environment values.
    load_dotenv()
