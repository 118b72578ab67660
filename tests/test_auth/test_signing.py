"""
Tests for the hash capability and the botocore signer.
"""

import hashlib
import hmac

import pytest
from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.credentials import ReadOnlyCredentials

from appsync_client.auth import BotocoreSigner, Sha256Hash, SigningRequest
from appsync_client.auth.signing import _PluggableHashSigV4Auth

CREDENTIALS = ReadOnlyCredentials("AKIDEXAMPLE", "wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY", None)
URL = "https://abc.appsync-api.eu-west-1.amazonaws.com/graphql"


class TestSha256Hash:
    """Test the production hash implementation."""

    def test_plain_digest(self):
        hasher = Sha256Hash()
        hasher.update(b"hello ")
        hasher.update(b"world")

        assert hasher.digest() == hashlib.sha256(b"hello world").digest()
        assert hasher.hexdigest() == hashlib.sha256(b"hello world").hexdigest()

    def test_hmac_digest(self):
        hasher = Sha256Hash(secret=b"key")
        hasher.update(b"message")

        assert hasher.digest() == hmac.new(b"key", b"message", hashlib.sha256).digest()

    def test_text_is_utf8_encoded(self):
        hasher = Sha256Hash()
        hasher.update("café")

        assert hasher.digest() == hashlib.sha256("café".encode("utf-8")).digest()

    def test_empty_digest(self):
        assert Sha256Hash().hexdigest() == hashlib.sha256(b"").hexdigest()


class TestBotocoreSigner:
    """Test SigV4 signing."""

    def test_payload_matches_botocore(self):
        """The pluggable payload hash agrees with botocore's own."""
        request = AWSRequest(method="POST", url=URL, data=b'{"query":"{ a }"}')
        pluggable = _PluggableHashSigV4Auth(CREDENTIALS, "appsync", "eu-west-1", Sha256Hash)

        assert pluggable.payload(request) == hashlib.sha256(b'{"query":"{ a }"}').hexdigest()
        assert pluggable.payload(request) == SigV4Auth(
            CREDENTIALS, "appsync", "eu-west-1"
        ).payload(request)

    def test_empty_body(self):
        request = AWSRequest(method="POST", url=URL, data=b"")
        pluggable = _PluggableHashSigV4Auth(CREDENTIALS, "appsync", "eu-west-1", Sha256Hash)

        assert pluggable.payload(request) == hashlib.sha256(b"").hexdigest()

    def test_sign_returns_full_header_set(self):
        headers = BotocoreSigner().sign(
            SigningRequest(
                method="POST",
                url=URL,
                headers={
                    "Content-Type": "application/json",
                    "Host": "abc.appsync-api.eu-west-1.amazonaws.com",
                },
                body=b"{}",
            ),
            CREDENTIALS,
            "eu-west-1",
            "appsync",
            Sha256Hash,
        )

        assert headers["Content-Type"] == "application/json"
        assert headers["Host"] == "abc.appsync-api.eu-west-1.amazonaws.com"
        assert "X-Amz-Date" in headers
        assert "X-Amz-Security-Token" not in headers
        authorization = headers["Authorization"]
        assert authorization.startswith("AWS4-HMAC-SHA256 Credential=AKIDEXAMPLE/")
        assert "/eu-west-1/appsync/aws4_request" in authorization
        assert "SignedHeaders=content-type;host;x-amz-date" in authorization

    @pytest.mark.parametrize("body", [b"{}", b'{"query":"query { a }"}'])
    def test_signature_depends_on_body(self, body):
        request = SigningRequest(method="POST", url=URL, headers={"Host": "h"}, body=body)
        other = SigningRequest(method="POST", url=URL, headers={"Host": "h"}, body=body + b" ")

        first = BotocoreSigner().sign(request, CREDENTIALS, "eu-west-1", "appsync")
        second = BotocoreSigner().sign(other, CREDENTIALS, "eu-west-1", "appsync")

        signature = first["Authorization"].split("Signature=")[1]
        other_signature = second["Authorization"].split("Signature=")[1]
        assert signature != other_signature
