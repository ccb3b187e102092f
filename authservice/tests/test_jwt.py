import jwt
import pytest

from authservice.auth.jwt import JWTTokenIssuer

def test_issue_embeds_subject_and_claims(issuer, decode_token):
    token = issuer.issue("alice", {"role": "ROLE_USER"})
    claims = decode_token(token)
    assert claims["sub"] == "alice"
    assert claims["role"] == "ROLE_USER"

def test_issue_sets_expiry(issuer, decode_token):
    claims = decode_token(issuer.issue("alice", {"role": "ROLE_USER"}))
    assert claims["exp"] - claims["iat"] == 30 * 60

def test_token_is_signed(issuer):
    token = issuer.issue("alice", {"role": "ROLE_USER"})
    with pytest.raises(jwt.InvalidSignatureError):
        jwt.decode(token, "another-secret-key-with-at-least-32-bytes", algorithms=["HS256"])

def test_empty_secret_rejected():
    with pytest.raises(ValueError):
        JWTTokenIssuer("")
