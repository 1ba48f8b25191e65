"""Hex/base64 rendering of binary results and decoding of binary inputs."""

from __future__ import annotations

import base64
import binascii

from .cli_shared import BASE64_FORMAT, HEX_FORMAT

OUTPUT_FORMATS = (HEX_FORMAT, BASE64_FORMAT)


class DecodeError(ValueError):
    """Raised when an input is neither valid hex nor valid base64."""


def encode(output_format: str, data: bytes) -> str:
    if output_format == HEX_FORMAT:
        return data.hex()
    if output_format == BASE64_FORMAT:
        return base64.b64encode(data).decode("ascii")
    raise ValueError(f"unsupported output format: {output_format!r}")


def decode(token: str) -> bytes:
    """Decode *token* as hex, falling back to standard base64.

    A token that is valid in both alphabets decodes as hex.
    """

    try:
        return binascii.unhexlify(token)
    except (binascii.Error, ValueError):
        pass
    try:
        return base64.b64decode(token, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"{token!r} is neither valid hex nor base64") from e
