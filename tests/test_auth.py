"""
Authentication Tests

Tests for password hashing, JWT handling, the split-token scheme, request
identity resolution and the author account service.
"""

from datetime import timedelta

import pytest
from fastapi import HTTPException
from jose import jwt
from sqlalchemy.orm import Session

from inkwell.exceptions import AuthenticationError, ValidationError
from inkwell.graphql.context import Identity, resolve_identity
from inkwell.models import Author
from inkwell.services.authors import authenticate, create_author, update_author
from inkwell.services.security import (
    MalformedTokenError,
    assemble_token,
    create_access_token,
    decode_token,
    hash_password,
    parse_authorization_header,
    split_token,
    verify_password,
)


class TestPasswordHashing:
    """Tests for bcrypt password hashing."""

    def test_hash_and_verify(self):
        hashed = hash_password("secret123")

        assert hashed != "secret123"
        assert verify_password("secret123", hashed)
        assert not verify_password("wrong", hashed)


class TestTokens:
    """Tests for JWT creation and the split-token helpers."""

    def test_token_carries_author_id(self):
        token = create_access_token("author-1", claims={"author": {"id": "author-1"}})
        payload = decode_token(token)

        assert payload["sub"] == "author-1"
        assert payload["type"] == "access"
        assert payload["author"] == {"id": "author-1"}

    def test_expired_token_is_rejected(self):
        token = create_access_token("author-1", expires_delta=timedelta(minutes=-1))

        assert decode_token(token) is None

    def test_split_and_reassemble(self):
        token = create_access_token("author-1")
        header_payload, signature = split_token(token)

        assert header_payload.count(".") == 1
        assert assemble_token(header_payload, signature) == token

    def test_full_token_ignores_cookie(self):
        token = create_access_token("author-1")

        assert assemble_token(token, "unrelated") == token

    def test_split_token_without_cookie_is_malformed(self):
        header_payload, _ = split_token(create_access_token("author-1"))

        with pytest.raises(MalformedTokenError):
            assemble_token(header_payload, None)

    def test_wrong_segment_count_is_malformed(self):
        with pytest.raises(MalformedTokenError):
            assemble_token("just-one-segment", "sig")

    def test_parse_authorization_header(self):
        assert parse_authorization_header("Bearer abc.def") == "abc.def"

        for header in ("abc.def", "Basic abc", "Bearer", "Bearer a b"):
            with pytest.raises(MalformedTokenError):
                parse_authorization_header(header)


class TestResolveIdentity:
    """Tests for building the request identity."""

    def test_no_header_is_anonymous(self):
        assert resolve_identity(None, None) == Identity.anonymous()

    def test_full_token(self):
        token = create_access_token("author-1")

        assert resolve_identity(f"Bearer {token}", None) == Identity.author("author-1")

    def test_split_token_matches_full_token(self):
        token = create_access_token("author-1")
        header_payload, signature = split_token(token)

        split = resolve_identity(f"Bearer {header_payload}", signature)

        assert split == resolve_identity(f"Bearer {token}", None)
        assert split.logged_in is True

    def test_tampered_signature_is_unauthorized(self):
        header_payload, _ = split_token(create_access_token("author-1"))

        with pytest.raises(HTTPException) as exc_info:
            resolve_identity(f"Bearer {header_payload}", "forged-signature")

        assert exc_info.value.status_code == 401

    def test_token_signed_with_another_key_is_unauthorized(self):
        other = jwt.encode({"sub": "author-1", "type": "access"}, "x" * 40, algorithm="HS256")

        with pytest.raises(HTTPException) as exc_info:
            resolve_identity(f"Bearer {other}", None)

        assert exc_info.value.status_code == 401

    def test_malformed_header_is_bad_request(self):
        with pytest.raises(HTTPException) as exc_info:
            resolve_identity("Token abc", None)

        assert exc_info.value.status_code == 400


class TestAuthorService:
    """Tests for account creation, updates and authentication."""

    def test_create_author(self, db_session: Session):
        author = create_author(db_session, name="Alice", username="alice", password="secret123")

        assert author.id
        assert author.username == "alice"
        assert author.password_hash != "secret123"

    def test_username_is_unique_ignoring_case(self, db_session: Session, alice: Author):
        with pytest.raises(ValidationError):
            create_author(db_session, name="Other", username="ALICE", password="pw123456")

    def test_blank_fields_are_rejected(self, db_session: Session):
        with pytest.raises(ValidationError):
            create_author(db_session, name=" ", username="carol", password="pw123456")

    def test_authenticate(self, db_session: Session, alice: Author):
        author, token = authenticate(db_session, "Alice", "secret123")

        assert author.id == alice.id
        assert decode_token(token)["sub"] == alice.id

    def test_authenticate_wrong_password(self, db_session: Session, alice: Author):
        with pytest.raises(AuthenticationError):
            authenticate(db_session, "alice", "wrong")

    def test_authenticate_unknown_user(self, db_session: Session):
        with pytest.raises(AuthenticationError):
            authenticate(db_session, "nobody", "secret123")

    def test_update_requires_current_password(self, db_session: Session, alice: Author):
        with pytest.raises(AuthenticationError):
            update_author(db_session, alice, password="wrong", name="Alicia")

    def test_update_author(self, db_session: Session, alice: Author):
        update_author(
            db_session, alice, password="secret123", name="Alicia", new_password="newpass99"
        )

        assert alice.name == "Alicia"
        author, _ = authenticate(db_session, "alice", "newpass99")
        assert author.id == alice.id
