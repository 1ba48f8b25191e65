from __future__ import annotations

import sys
from enum import Enum

import typer

from . import __version__
from .cli_shared import (
    BASE64_FORMAT,
    CBOR_SERIALIZER,
    HEX_FORMAT,
    JSON_SERIALIZER,
    MSGPACK_SERIALIZER,
    PROTOBUF_SERIALIZER,
    WAMPPROTO_OUTPUT,
    WAMPPROTO_SERIALIZER,
    WAMPPROTO_VERBOSE,
    GlobalOpts,
    OpError,
    UsageError,
    _bootstrap_env,
    _rich_error,
    _trace,
)
from .commands import (
    cmd_generate_challenge,
    cmd_get_pubkey,
    cmd_keygen,
    cmd_message,
    cmd_sign_challenge,
    cmd_verify_signature,
)
from .values import INT64_MAX, INT64_MIN, parse_key_values


class OutputFormat(str, Enum):
    hex = HEX_FORMAT
    base64 = BASE64_FORMAT


class SerializerName(str, Enum):
    json = JSON_SERIALIZER
    cbor = CBOR_SERIALIZER
    msgpack = MSGPACK_SERIALIZER
    protobuf = PROTOBUF_SERIALIZER


app = typer.Typer(
    name="wampproto",
    help="A tool for testing interoperability between different wampproto implementations.",
    no_args_is_help=True,
    add_completion=False,
)
auth_app = typer.Typer(help="Authentication commands.", no_args_is_help=True)
cryptosign_app = typer.Typer(help="Commands for cryptosign authentication.", no_args_is_help=True)
message_app = typer.Typer(help="Wampproto messages.", no_args_is_help=True)

app.add_typer(auth_app, name="auth")
auth_app.add_typer(cryptosign_app, name="cryptosign")
app.add_typer(message_app, name="message")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"wampproto {__version__}")
        raise typer.Exit(code=0)


def _ctx_obj(ctx: typer.Context) -> dict:
    root = ctx.find_root()
    if not isinstance(root.obj, dict):
        root.obj = {}
    return root.obj


def _ctx_global(ctx: typer.Context) -> GlobalOpts:
    g = _ctx_obj(ctx).get("g")
    if isinstance(g, GlobalOpts):
        return g
    return GlobalOpts()


def _output(ctx: typer.Context, override: OutputFormat | None) -> str:
    if override is not None:
        return override.value
    return _ctx_global(ctx).output


def _serializer(ctx: typer.Context, override: SerializerName | None) -> str:
    if override is not None:
        return override.value
    return str(_ctx_obj(ctx).get("serializer") or JSON_SERIALIZER)


def _output_option():
    return typer.Option(None, "--output", help="Format of the output (overrides the global flag).")


def _serializer_option():
    return typer.Option(
        None,
        "--serializer",
        help="Serializer to use (overrides the group flag). The protobuf form is only readable by this tool.",
    )


def _int64_argument(help_text: str):
    return typer.Argument(..., min=INT64_MIN, max=INT64_MAX, help=help_text)


@app.callback()
def app_callback(
    ctx: typer.Context,
    output: OutputFormat = typer.Option(
        OutputFormat.hex,
        "--output",
        envvar=WAMPPROTO_OUTPUT,
        help=f"Format of the output (env override: {WAMPPROTO_OUTPUT}).",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        envvar=WAMPPROTO_VERBOSE,
        help="Print diagnostics to stderr.",
    ),
    version: bool = typer.Option(False, "--version", "-v", callback=_version_callback, is_eager=True),
) -> None:
    del version
    _ctx_obj(ctx)["g"] = GlobalOpts(output=output.value, verbose=verbose)


@message_app.callback()
def message_callback(
    ctx: typer.Context,
    serializer: SerializerName = typer.Option(
        SerializerName.json,
        "--serializer",
        envvar=WAMPPROTO_SERIALIZER,
        help=(
            f"Serializer to use (env override: {WAMPPROTO_SERIALIZER}). "
            "The protobuf form is only readable by this tool."
        ),
    ),
) -> None:
    _ctx_obj(ctx)["serializer"] = serializer.value


@cryptosign_app.command("generate-challenge", help="Generate a cryptosign challenge.")
def generate_challenge(ctx: typer.Context, output: OutputFormat | None = _output_option()) -> None:
    typer.echo(cmd_generate_challenge(output=_output(ctx, output)))


@cryptosign_app.command("sign-challenge", help="Sign a cryptosign challenge.")
def sign_challenge(
    ctx: typer.Context,
    challenge: str = typer.Argument(..., help="Challenge to sign."),
    private_key: str = typer.Argument(..., help="Private key to sign challenge."),
    output: OutputFormat | None = _output_option(),
) -> None:
    typer.echo(cmd_sign_challenge(challenge=challenge, private_key=private_key, output=_output(ctx, output)))


@cryptosign_app.command("verify-signature", help="Verify a cryptosign challenge.")
def verify_signature(
    signature: str = typer.Argument(..., help="Signature to verify."),
    public_key: str = typer.Argument(..., help="Public key to verify signature."),
) -> None:
    typer.echo(cmd_verify_signature(signature=signature, public_key=public_key))


@cryptosign_app.command("keygen", help="Generate a WAMP cryptosign ed25519 keypair.")
def keygen(ctx: typer.Context, output: OutputFormat | None = _output_option()) -> None:
    typer.echo(cmd_keygen(output=_output(ctx, output)))


@cryptosign_app.command(
    "get-pubkey",
    help="Retrieve the ed25519 public key associated with the provided private key.",
)
def get_pubkey(
    ctx: typer.Context,
    private_key: str = typer.Argument(
        ..., help="The ed25519 private key to derive the corresponding public key."
    ),
    output: OutputFormat | None = _output_option(),
) -> None:
    typer.echo(cmd_get_pubkey(private_key=private_key, output=_output(ctx, output)))


def _message(
    ctx: typer.Context,
    kind: str,
    *,
    serializer: SerializerName | None,
    output: OutputFormat | None,
    **fields,
) -> None:
    g = _ctx_global(ctx)
    serializer_name = _serializer(ctx, serializer)
    output_format = _output(ctx, output)
    _trace(g, f"message {kind}: serializer={serializer_name} output={output_format} fields={fields}")
    typer.echo(cmd_message(kind, serializer=serializer_name, output=output_format, **fields))


@message_app.command("call", help="Call message.")
def call(
    ctx: typer.Context,
    request_id: int = _int64_argument("Call request ID."),
    procedure: str = typer.Argument(..., help="Procedure to call."),
    args: list[str] | None = typer.Argument(None, help="Arguments for the call."),
    kwargs: list[str] | None = typer.Option(None, "--kwargs", "-k", help="Keyword argument for the call (KEY=VALUE)."),
    option: list[str] | None = typer.Option(None, "--option", "-o", help="Call options (KEY=VALUE)."),
    serializer: SerializerName | None = _serializer_option(),
    output: OutputFormat | None = _output_option(),
) -> None:
    _message(
        ctx,
        "call",
        serializer=serializer,
        output=output,
        request_id=request_id,
        procedure=procedure,
        args=args,
        kwargs=parse_key_values(kwargs, flag="--kwargs"),
        options=parse_key_values(option, flag="--option"),
    )


@message_app.command("result", help="Result messages.")
def result(
    ctx: typer.Context,
    request_id: int = _int64_argument("Result request ID."),
    args: list[str] | None = typer.Argument(None, help="Result Arguments."),
    details: list[str] | None = typer.Option(None, "--details", "-d", help="Result details (KEY=VALUE)."),
    kwargs: list[str] | None = typer.Option(None, "--kwargs", "-k", help="Result KW Arguments (KEY=VALUE)."),
    serializer: SerializerName | None = _serializer_option(),
    output: OutputFormat | None = _output_option(),
) -> None:
    _message(
        ctx,
        "result",
        serializer=serializer,
        output=output,
        request_id=request_id,
        args=args,
        kwargs=parse_key_values(kwargs, flag="--kwargs"),
        details=parse_key_values(details, flag="--details"),
    )


@message_app.command("register", help="Register message.")
def register(
    ctx: typer.Context,
    request_id: int = _int64_argument("Register request ID."),
    procedure: str = typer.Argument(..., help="Procedure to register."),
    option: list[str] | None = typer.Option(None, "--option", "-o", help="Register options (KEY=VALUE)."),
    serializer: SerializerName | None = _serializer_option(),
    output: OutputFormat | None = _output_option(),
) -> None:
    _message(
        ctx,
        "register",
        serializer=serializer,
        output=output,
        request_id=request_id,
        procedure=procedure,
        options=parse_key_values(option, flag="--option"),
    )


@message_app.command("registered", help="Registered message.")
def registered(
    ctx: typer.Context,
    request_id: int = _int64_argument("Registered request ID."),
    registration_id: int = _int64_argument("Registration ID."),
    serializer: SerializerName | None = _serializer_option(),
    output: OutputFormat | None = _output_option(),
) -> None:
    _message(
        ctx,
        "registered",
        serializer=serializer,
        output=output,
        request_id=request_id,
        registration_id=registration_id,
    )


@message_app.command("invocation", help="Invocation message.")
def invocation(
    ctx: typer.Context,
    request_id: int = _int64_argument("Invocation request ID."),
    registration_id: int = _int64_argument("Invocation registration ID."),
    args: list[str] | None = typer.Argument(None, help="Invocation arguments."),
    details: list[str] | None = typer.Option(None, "--details", "-d", help="Invocation details (KEY=VALUE)."),
    kwargs: list[str] | None = typer.Option(None, "--kwargs", "-k", help="Invocation KW arguments (KEY=VALUE)."),
    serializer: SerializerName | None = _serializer_option(),
    output: OutputFormat | None = _output_option(),
) -> None:
    _message(
        ctx,
        "invocation",
        serializer=serializer,
        output=output,
        request_id=request_id,
        registration_id=registration_id,
        args=args,
        kwargs=parse_key_values(kwargs, flag="--kwargs"),
        details=parse_key_values(details, flag="--details"),
    )


@message_app.command("yield", help="Yield message.")
def yield_(
    ctx: typer.Context,
    request_id: int = _int64_argument("Yield request ID."),
    args: list[str] | None = typer.Argument(None, help="Yield arguments."),
    option: list[str] | None = typer.Option(None, "--option", "-o", help="Yield options (KEY=VALUE)."),
    kwargs: list[str] | None = typer.Option(None, "--kwargs", "-k", help="Yield KW arguments (KEY=VALUE)."),
    serializer: SerializerName | None = _serializer_option(),
    output: OutputFormat | None = _output_option(),
) -> None:
    _message(
        ctx,
        "yield",
        serializer=serializer,
        output=output,
        request_id=request_id,
        args=args,
        kwargs=parse_key_values(kwargs, flag="--kwargs"),
        options=parse_key_values(option, flag="--option"),
    )


@message_app.command("unregister", help="Unregister message.")
def unregister(
    ctx: typer.Context,
    request_id: int = _int64_argument("Unregister request ID."),
    registration_id: int = _int64_argument("Unregister registration ID."),
    serializer: SerializerName | None = _serializer_option(),
    output: OutputFormat | None = _output_option(),
) -> None:
    _message(
        ctx,
        "unregister",
        serializer=serializer,
        output=output,
        request_id=request_id,
        registration_id=registration_id,
    )


@message_app.command("unregistered", help="Unregistered message.")
def unregistered(
    ctx: typer.Context,
    request_id: int = _int64_argument("Unregistered request ID."),
    serializer: SerializerName | None = _serializer_option(),
    output: OutputFormat | None = _output_option(),
) -> None:
    _message(ctx, "unregistered", serializer=serializer, output=output, request_id=request_id)


@message_app.command("subscribe", help="Subscribe message.")
def subscribe(
    ctx: typer.Context,
    request_id: int = _int64_argument("Subscribe request ID."),
    topic: str = typer.Argument(..., help="Topic to subscribe."),
    option: list[str] | None = typer.Option(None, "--option", "-o", help="Subscribe options (KEY=VALUE)."),
    serializer: SerializerName | None = _serializer_option(),
    output: OutputFormat | None = _output_option(),
) -> None:
    _message(
        ctx,
        "subscribe",
        serializer=serializer,
        output=output,
        request_id=request_id,
        topic=topic,
        options=parse_key_values(option, flag="--option"),
    )


@message_app.command("subscribed", help="Subscribed message.")
def subscribed(
    ctx: typer.Context,
    request_id: int = _int64_argument("Subscribed request ID."),
    subscription_id: int = _int64_argument("Subscription ID."),
    serializer: SerializerName | None = _serializer_option(),
    output: OutputFormat | None = _output_option(),
) -> None:
    _message(
        ctx,
        "subscribed",
        serializer=serializer,
        output=output,
        request_id=request_id,
        subscription_id=subscription_id,
    )


@message_app.command("publish", help="Publish message.")
def publish(
    ctx: typer.Context,
    request_id: int = _int64_argument("Publish request ID."),
    topic: str = typer.Argument(..., help="Publish topic."),
    args: list[str] | None = typer.Argument(None, help="Publish arguments."),
    option: list[str] | None = typer.Option(None, "--option", "-o", help="Publish options (KEY=VALUE)."),
    kwargs: list[str] | None = typer.Option(None, "--kwargs", "-k", help="Publish Keyword arguments (KEY=VALUE)."),
    serializer: SerializerName | None = _serializer_option(),
    output: OutputFormat | None = _output_option(),
) -> None:
    _message(
        ctx,
        "publish",
        serializer=serializer,
        output=output,
        request_id=request_id,
        topic=topic,
        args=args,
        kwargs=parse_key_values(kwargs, flag="--kwargs"),
        options=parse_key_values(option, flag="--option"),
    )


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    try:
        _bootstrap_env()
        result = app(args=argv, prog_name="wampproto", standalone_mode=False)
        if result is None:
            return 0
        return int(result)
    except typer.Exit as e:
        return int(e.exit_code)
    except typer.TyperException as e:
        _rich_error(e.format_message())
        return int(e.exit_code)
    except UsageError as e:
        _rich_error(str(e))
        return 2
    except OpError as e:
        _rich_error(str(e))
        return 1


def cli() -> None:
    raise SystemExit(main())


if __name__ == "__main__":
    cli()
