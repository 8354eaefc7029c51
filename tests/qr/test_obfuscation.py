import base64

import pytest

from src.skyhr_attendance.skyhr_attendance.core.exceptions import DecodeError
from src.skyhr_attendance.skyhr_attendance.qr.obfuscation import (
    decode_secret,
    deobfuscate_json_payload,
    deobfuscate_payload,
    obfuscate_json_payload,
    obfuscate_payload,
)


def test_json_payload_round_trip():
    payload = {"organization_id": "org1", "location_id": "geo1"}
    token = obfuscate_json_payload(payload, "s3cret")

    assert deobfuscate_json_payload(token, "s3cret") == payload


def test_token_is_hex_of_payload_plus_secret():
    assert obfuscate_payload("ab", "xy") == "abxy".encode("utf-8").hex()


def test_wrong_secret_is_rejected():
    token = obfuscate_json_payload({"a": 1}, "right")

    with pytest.raises(DecodeError, match="secret mismatch"):
        deobfuscate_json_payload(token, "wrong")


def test_tampered_token_is_rejected():
    token = obfuscate_payload('{"a":1}', "secret")
    tampered = "7b" + token[2:-2] + "00"

    with pytest.raises(DecodeError):
        deobfuscate_payload(tampered, "secret")


@pytest.mark.parametrize("token", ["zz-not-hex", "abc", ""])
def test_malformed_hex_is_rejected(token):
    with pytest.raises(DecodeError):
        deobfuscate_payload(token, "secret")


def test_non_json_prefix_is_rejected():
    token = obfuscate_payload("not json", "secret")

    with pytest.raises(DecodeError, match="not JSON"):
        deobfuscate_json_payload(token, "secret")


def test_empty_secret_is_a_programming_error():
    with pytest.raises(ValueError):
        obfuscate_payload("x", "")


def test_decode_secret_reads_base64_and_falls_back_to_raw():
    assert decode_secret(base64.b64encode(b"shared").decode()) == "shared"
    assert decode_secret("not base64!") == "not base64!"
