import base64

import cbor2
import pytest

from wampproto_cli import commands, cryptosign, messages
from wampproto_cli.cli_shared import OpError, SerializationError, SignatureVerificationError, UsageError
from wampproto_cli.serializers import SERIALIZER_NAMES

SEED_HEX = "9d61b19deffd5a60ba844af492ec2cc44449c5697b326919703bac031cae7f60"
PUBLIC_KEY_HEX = "d75a980182b10ab7d54bfed3c964073a0ee172f3daa62325af021a68f707511a"


def test_sign_challenge_seed_and_expanded_key_agree():
    expanded_hex = cryptosign.expand_seed(bytes.fromhex(SEED_HEX)).hex()
    from_seed = commands.cmd_sign_challenge(challenge="abc123", private_key=SEED_HEX, output="hex")
    from_expanded = commands.cmd_sign_challenge(challenge="abc123", private_key=expanded_hex, output="hex")
    assert from_seed == from_expanded
    direct = cryptosign.sign_challenge(bytes.fromhex("abc123"), bytes.fromhex(expanded_hex))
    assert from_seed == direct.hex()


def test_sign_challenge_accepts_base64_key_and_output():
    key_b64 = base64.b64encode(bytes.fromhex(SEED_HEX)).decode("ascii")
    out = commands.cmd_sign_challenge(challenge="abc123", private_key=key_b64, output="base64")
    hex_out = commands.cmd_sign_challenge(challenge="abc123", private_key=SEED_HEX, output="hex")
    assert base64.b64decode(out).hex() == hex_out


def test_sign_challenge_rejects_bad_key_length():
    with pytest.raises(UsageError, match="invalid private-key: must be of length 32 or 64"):
        commands.cmd_sign_challenge(challenge="abc123", private_key="00" * 16, output="hex")


def test_sign_challenge_rejects_undecodable_inputs():
    with pytest.raises(UsageError, match="invalid private-key: "):
        commands.cmd_sign_challenge(challenge="abc123", private_key="not-a-key", output="hex")
    with pytest.raises(UsageError, match="invalid challenge: "):
        commands.cmd_sign_challenge(challenge="xyz", private_key=SEED_HEX, output="hex")


def test_verify_signature_round_trip():
    signed = commands.cmd_sign_challenge(challenge="abc123", private_key=SEED_HEX, output="hex")
    assert commands.cmd_verify_signature(signature=signed, public_key=PUBLIC_KEY_HEX) == (
        "Signature verified successfully"
    )


@pytest.mark.parametrize("signature", ["bad-signature", "00" * 96, "abcd"])
def test_verify_signature_failure_is_distinct_error(signature):
    with pytest.raises(SignatureVerificationError, match="^signature verification failed$"):
        commands.cmd_verify_signature(signature=signature, public_key=PUBLIC_KEY_HEX)


def test_verify_signature_rejects_bad_public_key_length():
    with pytest.raises(UsageError, match="invalid public-key: must be of length 32"):
        commands.cmd_verify_signature(signature="00" * 96, public_key="00" * 31)


def test_keygen_prints_labeled_pair():
    out = commands.cmd_keygen(output="hex")
    pub_line, priv_line = out.split("\n")
    assert pub_line.startswith("Public Key: ")
    assert priv_line.startswith("Private Key: ")
    pub = bytes.fromhex(pub_line.removeprefix("Public Key: "))
    seed = bytes.fromhex(priv_line.removeprefix("Private Key: "))
    assert cryptosign.public_key_from_seed(seed) == pub


def test_get_pubkey_from_seed_and_expanded_key():
    assert commands.cmd_get_pubkey(private_key=SEED_HEX, output="hex") == PUBLIC_KEY_HEX
    expanded_hex = SEED_HEX + PUBLIC_KEY_HEX
    assert commands.cmd_get_pubkey(private_key=expanded_hex, output="hex") == PUBLIC_KEY_HEX
    with pytest.raises(UsageError, match="must be of length 32 or 64"):
        commands.cmd_get_pubkey(private_key="00" * 10, output="hex")


def test_generate_challenge_respects_output_format():
    assert len(bytes.fromhex(commands.cmd_generate_challenge(output="hex"))) == 32
    assert len(base64.b64decode(commands.cmd_generate_challenge(output="base64"))) == 32


def test_call_scenario_json_hex():
    out = commands.cmd_message(
        "call",
        serializer="json",
        output="hex",
        request_id=1,
        procedure="my.proc",
        args=["arg1", "42"],
        kwargs={},
        options={},
    )
    assert bytes.fromhex(out) == b'[48,1,{},"my.proc",["arg1",42]]'


@pytest.mark.parametrize("serializer", SERIALIZER_NAMES)
def test_empty_args_kwargs_serialize_like_omitted(serializer):
    built = commands.build_call(request_id=1, procedure="p", args=[], kwargs={}, options={})
    omitted = messages.Call(1, {}, "p")
    assert commands.serialize_and_format(built, serializer=serializer, output="hex") == (
        commands.serialize_and_format(omitted, serializer=serializer, output="hex")
    )


def test_publish_applies_empty_defaulting():
    msg = commands.build_publish(request_id=3, topic="t", args=[], kwargs={})
    assert msg.args is None and msg.kwargs is None
    msg = commands.build_publish(request_id=3, topic="t", args=[], kwargs={"k": "1"})
    assert msg.to_list() == [16, 3, {}, "t", [], {"k": 1}]


def test_unregister_uses_its_own_request_id():
    msg = commands.build_unregister(request_id=11, registration_id=22)
    assert msg.to_list() == [66, 11, 22]


def test_every_kind_has_a_builder():
    assert set(commands.MESSAGE_BUILDERS) == {
        "call",
        "result",
        "register",
        "registered",
        "invocation",
        "yield",
        "unregister",
        "unregistered",
        "subscribe",
        "subscribed",
        "publish",
    }


def test_invocation_cbor_base64():
    out = commands.cmd_message(
        "invocation",
        serializer="cbor",
        output="base64",
        request_id=5,
        registration_id=6,
        args=["x"],
        kwargs={"flag": "false"},
        details={"caller": "7"},
    )
    assert cbor2.loads(base64.b64decode(out)) == [68, 5, 6, {"caller": 7}, ["x"], {"flag": False}]


def test_serialization_failure_is_wrapped():
    with pytest.raises(SerializationError, match="protobuf serialization of UNREGISTERED failed") as exc:
        commands.serialize_and_format(messages.Unregistered(2**64), serializer="protobuf", output="hex")
    assert isinstance(exc.value, OpError)
