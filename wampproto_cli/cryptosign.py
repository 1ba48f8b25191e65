"""Ed25519 primitives for WAMP cryptosign authentication.

Uses PyNaCl's libsodium bindings so that 64-byte expanded keys are used
exactly as given, seed followed by public key.
"""

from __future__ import annotations

import secrets

from nacl.bindings import (
    crypto_sign,
    crypto_sign_BYTES,
    crypto_sign_keypair,
    crypto_sign_open,
    crypto_sign_seed_keypair,
)
from nacl.exceptions import BadSignatureError

CHALLENGE_BYTES = 32
SEED_BYTES = 32
EXPANDED_KEY_BYTES = 64
PUBLIC_KEY_BYTES = 32


def generate_challenge() -> bytes:
    return secrets.token_bytes(CHALLENGE_BYTES)


def keypair_from_seed(seed: bytes) -> tuple[bytes, bytes]:
    """Return ``(public_key, expanded_private_key)`` for a 32-byte seed."""

    if len(seed) != SEED_BYTES:
        raise ValueError(f"seed must be {SEED_BYTES} bytes, got {len(seed)}")
    return crypto_sign_seed_keypair(seed)


def expand_seed(seed: bytes) -> bytes:
    return keypair_from_seed(seed)[1]


def public_key_from_seed(seed: bytes) -> bytes:
    return keypair_from_seed(seed)[0]


def generate_keypair() -> tuple[bytes, bytes]:
    """Return ``(public_key, seed)``; the seed is the compact private key."""

    public_key, expanded = crypto_sign_keypair()
    return public_key, expanded[:SEED_BYTES]


def sign_challenge(challenge: bytes, expanded_key: bytes) -> bytes:
    """Sign *challenge*, returning the signature followed by the challenge."""

    if len(expanded_key) != EXPANDED_KEY_BYTES:
        raise ValueError(f"private key must be {EXPANDED_KEY_BYTES} bytes, got {len(expanded_key)}")
    return crypto_sign(challenge, expanded_key)


def verify_signature(signature: bytes, public_key: bytes) -> bool:
    if len(public_key) != PUBLIC_KEY_BYTES:
        raise ValueError(f"public key must be {PUBLIC_KEY_BYTES} bytes, got {len(public_key)}")
    if len(signature) < crypto_sign_BYTES:
        return False
    try:
        crypto_sign_open(signature, public_key)
    except BadSignatureError:
        return False
    return True
