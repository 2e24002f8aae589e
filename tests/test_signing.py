"""
Test suite for request canonicalization and HMAC signing

This module tests the header set, the canonical string-to-sign, the
HMAC-SHA256 signer and the signing utilities.
"""

import base64
import hashlib
import hmac
from collections import OrderedDict
from datetime import datetime, timedelta, timezone

import pytest

from zerokit_admin_sdk.exceptions import InvalidConfigError
from zerokit_admin_sdk.signing import (
    # Types
    HttpMethod,
    HeaderSet,
    RequestDescriptor,
    EMPTY_CONTENT_SHA256,
    HMAC_HEADERS_VALUE,
    # Canonicalization
    canonicalize_call,
    canonical_path,
    # Signing
    HmacSigner,
    sign_string,
    # Utilities
    parse_method,
    calculate_content_sha256,
    format_tresorit_date,
    encode_payload,
)

from conftest import ADMIN_KEY

KEY_BYTES = bytes.fromhex(ADMIN_KEY)


def signed_headers():
    return HeaderSet([
        ("UserId", "admin@abcdefgh.tresorit.io"),
        ("TresoritDate", "2017-05-04T10:20:30Z"),
        ("Content-Type", "application/json"),
        ("Content-SHA256", EMPTY_CONTENT_SHA256),
        ("HMACHeaders", HMAC_HEADERS_VALUE),
    ])


class TestHeaderSet:
    """Test the ordered header collection"""

    def test_preserves_insertion_order(self):
        headers = HeaderSet()
        headers.add("Zeta", "1")
        headers.add("Alpha", "2")
        headers.add("Mid", "3")

        assert headers.names() == ["Zeta", "Alpha", "Mid"]
        assert headers.render_lines() == ["Zeta:1", "Alpha:2", "Mid:3"]

    def test_values_rendered_as_strings(self):
        headers = HeaderSet([("Content-length", 42), ("Content-Type", None)])
        assert headers.items() == [("Content-length", "42"), ("Content-Type", "")]
        assert headers.get("Content-length") == "42"
        assert headers.get("Missing") is None

    def test_rejects_non_string_names(self):
        with pytest.raises(InvalidConfigError) as exc_info:
            HeaderSet([(1, "value")])
        assert exc_info.value.field == "headers"

    def test_from_mapping_keeps_order(self):
        headers = HeaderSet.from_headers(OrderedDict([("B", "2"), ("A", "1")]))
        assert headers.names() == ["B", "A"]

    @pytest.mark.parametrize("headers", [None, "UserId:x", [("only-one",)], [1, 2]])
    def test_from_headers_rejects_malformed_input(self, headers):
        with pytest.raises(InvalidConfigError):
            HeaderSet.from_headers(headers)

    def test_equality(self):
        assert signed_headers() == signed_headers()
        assert len(signed_headers()) == 5


class TestSigningUtilities:
    """Test utility functions"""

    def test_empty_content_sha256(self):
        assert calculate_content_sha256(None) == EMPTY_CONTENT_SHA256
        assert calculate_content_sha256(b"") == EMPTY_CONTENT_SHA256
        assert EMPTY_CONTENT_SHA256 == hashlib.sha256(b"").hexdigest()

    def test_content_sha256(self):
        payload = b"body { background-color: red; }"
        digest = calculate_content_sha256(payload)
        assert digest == hashlib.sha256(payload).hexdigest()
        assert digest == digest.lower()

    def test_parse_method(self):
        for name in ("GET", "HEAD", "POST", "PUT", "DELETE", "OPTIONS"):
            assert parse_method(name) is HttpMethod(name)
        assert parse_method(HttpMethod.PUT) is HttpMethod.PUT

    @pytest.mark.parametrize("method", ["PATCH", "get", "TRACE", "", None, 1])
    def test_parse_method_rejects_unknown(self, method):
        with pytest.raises(InvalidConfigError) as exc_info:
            parse_method(method)
        assert exc_info.value.field == "method"

    def test_format_tresorit_date(self):
        moment = datetime(2017, 5, 4, 10, 20, 30, 123456, tzinfo=timezone.utc)
        assert format_tresorit_date(moment) == "2017-05-04T10:20:30Z"

    def test_format_tresorit_date_converts_to_utc(self):
        cet = timezone(timedelta(hours=2))
        moment = datetime(2017, 5, 4, 12, 20, 30, tzinfo=cet)
        assert format_tresorit_date(moment) == "2017-05-04T10:20:30Z"

    def test_format_tresorit_date_now(self):
        value = format_tresorit_date()
        assert len(value) == 20
        assert value.endswith("Z")
        datetime.strptime(value, "%Y-%m-%dT%H:%M:%SZ")

    def test_encode_payload(self):
        assert encode_payload(None) is None
        assert encode_payload(b"raw") == b"raw"
        assert encode_payload("héllo") == "héllo".encode("utf-8")
        with pytest.raises(InvalidConfigError):
            encode_payload(123)


class TestRequestDescriptor:
    """Test request descriptor validation"""

    def test_content_length(self):
        assert RequestDescriptor(HttpMethod.GET, "/x").content_length == 0
        assert RequestDescriptor(HttpMethod.PUT, "/x", b"12345").content_length == 5

    def test_payload_requires_content_type(self):
        with pytest.raises(InvalidConfigError) as exc_info:
            RequestDescriptor(HttpMethod.POST, "/x", b"{}", None)
        assert exc_info.value.field == "contentType"

    def test_no_payload_without_content_type(self):
        descriptor = RequestDescriptor(HttpMethod.GET, "/x", None, None)
        assert descriptor.content_type is None


class TestCanonicalization:
    """Test canonical string-to-sign construction"""

    def test_canonical_string_layout(self):
        canonical = canonicalize_call(
            "POST",
            "https://abcdefgh.api.tresorit.io/api/v4/admin/user/init-user-registration",
            signed_headers(),
        )

        assert canonical == "\n".join([
            "POST",
            "api/v4/admin/user/init-user-registration",
            "UserId:admin@abcdefgh.tresorit.io",
            "TresoritDate:2017-05-04T10:20:30Z",
            "Content-Type:application/json",
            "Content-SHA256:" + EMPTY_CONTENT_SHA256,
            "HMACHeaders:UserId,TresoritDate,Content-Type,Content-SHA256,HMACHeaders",
        ])

    def test_query_appended_raw(self):
        url = "https://abcdefgh.api.tresorit.io/api/v4/admin/tenant/upload-custom-content?fileName=css/login.css&a=%20b"
        assert canonical_path(url) == "api/v4/admin/tenant/upload-custom-content?fileName=css/login.css&a=%20b"

    def test_empty_query_dropped(self):
        assert canonical_path("https://host.example/api/x?") == "api/x"

    def test_root_path(self):
        assert canonical_path("https://host.example/") == ""

    def test_hosted_path_prefix_kept(self):
        url = "https://host-1.example/tenant-abcdefgh/api/v4/admin/user/init-user-registration"
        assert canonical_path(url) == "tenant-abcdefgh/api/v4/admin/user/init-user-registration"

    @pytest.mark.parametrize("url", ["https://host.example", None, "https://[::1/x"])
    def test_rejects_url_without_path(self, url):
        with pytest.raises(InvalidConfigError) as exc_info:
            canonicalize_call("GET", url, signed_headers())
        assert exc_info.value.field == "url"

    def test_rejects_unknown_method(self):
        with pytest.raises(InvalidConfigError) as exc_info:
            canonicalize_call("PATCH", "https://host.example/x", signed_headers())
        assert exc_info.value.field == "method"

    def test_rejects_non_string_header_names(self):
        with pytest.raises(InvalidConfigError):
            canonicalize_call("GET", "https://host.example/x", {1: "a"})

    def test_accepts_plain_dict(self):
        canonical = canonicalize_call("GET", "https://host.example/x", {"A": "1", "B": "2"})
        assert canonical == "GET\nx\nA:1\nB:2"

    def test_header_order_matters(self):
        first = canonicalize_call("GET", "https://host.example/x", [("A", "1"), ("B", "2")])
        second = canonicalize_call("GET", "https://host.example/x", [("B", "2"), ("A", "1")])
        assert first != second

    def test_deterministic(self):
        url = "https://host.example/api/x?y=1"
        assert canonicalize_call("PUT", url, signed_headers()) == canonicalize_call("PUT", url, signed_headers())


class TestHmacSigner:
    """Test HMAC-SHA256 signing"""

    def test_matches_reference_hmac(self):
        message = canonicalize_call("GET", "https://host.example/api/x", signed_headers())
        expected = base64.b64encode(
            hmac.new(KEY_BYTES, message.encode("utf-8"), hashlib.sha256).digest()
        ).decode("ascii")

        assert HmacSigner(KEY_BYTES).sign_string(message) == expected
        assert sign_string(KEY_BYTES, message) == expected

    def test_signature_is_base64_of_32_bytes(self):
        signature = HmacSigner(KEY_BYTES).sign_string("GET\nx")
        assert len(base64.b64decode(signature)) == 32

    def test_deterministic(self):
        signer = HmacSigner(KEY_BYTES)
        assert signer.sign_string("POST\napi/x") == signer.sign_string("POST\napi/x")

    def test_message_change_changes_signature(self):
        signer = HmacSigner(KEY_BYTES)
        assert signer.sign_string("POST\napi/x") != signer.sign_string("POST\napi/y")

    def test_key_change_changes_signature(self):
        other_key = bytes([KEY_BYTES[0] ^ 1]) + KEY_BYTES[1:]
        assert HmacSigner(KEY_BYTES).sign_string("GET\nx") != HmacSigner(other_key).sign_string("GET\nx")

    def test_empty_string_can_be_signed(self):
        assert HmacSigner(KEY_BYTES).sign_string("")

    @pytest.mark.parametrize("value", [None, b"GET\nx", 42])
    def test_rejects_non_string_input(self, value):
        with pytest.raises(InvalidConfigError):
            HmacSigner(KEY_BYTES).sign_string(value)

    @pytest.mark.parametrize("key", [b"short", KEY_BYTES + b"\x00", ADMIN_KEY])
    def test_rejects_bad_keys(self, key):
        with pytest.raises(InvalidConfigError):
            HmacSigner(key)

    def test_key_not_in_repr(self):
        assert ADMIN_KEY not in repr(HmacSigner(KEY_BYTES))
