"""Identity provider: sign-up, sign-in, sign-out, token resolution."""

from __future__ import annotations

from dataclasses import replace

import pytest

from academy.auth.jwt import create_access_token
from academy.auth.password import PasswordStrengthError, hash_password, validate_password_strength, verify_password
from academy.auth.service import public_profile, require_principal
from academy.errors import AuthenticationError, MissingFieldsError, NotAuthenticatedError, SignUpError
from academy.store.base import SESSIONS, USERS


class TestPasswords:
    def test_hash_and_verify(self):
        hashed = hash_password("secret123")
        assert hashed.startswith("$argon2id$")
        assert verify_password("secret123", hashed)
        assert not verify_password("wrong", hashed)

    def test_garbage_hash_does_not_raise(self):
        assert verify_password("secret123", "not-a-hash") is False

    @pytest.mark.parametrize("password", ["", "     ", "abc", "x" * 129])
    def test_weak_passwords(self, password):
        with pytest.raises(PasswordStrengthError):
            validate_password_strength(password)


class TestSignUp:
    async def test_creates_profile(self, identity, store):
        principal = await identity.sign_up("Ada@Example.com", "secret123", "Ada Lovelace")
        profile = await store.read(USERS, principal.user_id)
        assert profile["email"] == "ada@example.com"
        assert profile["name"] == "Ada Lovelace"
        assert profile["enrolledChallenges"] == []
        assert profile["publishedEssays"] == []
        assert profile["likedEssays"] == []
        assert profile["passwordHash"] != "secret123"
        assert "passwordHash" not in public_profile(profile)

    @pytest.mark.parametrize(("email", "password", "name"), [
        ("", "secret123", "Ada"),
        ("ada@example.com", "", "Ada"),
        ("ada@example.com", "secret123", "  "),
    ])
    async def test_missing_fields(self, identity, store, email, password, name):
        with pytest.raises(MissingFieldsError):
            await identity.sign_up(email, password, name)
        assert await store.query(USERS) == []

    async def test_weak_password_is_signup_error(self, identity):
        with pytest.raises(SignUpError, match="Signup error"):
            await identity.sign_up("ada@example.com", "abc", "Ada")

    async def test_duplicate_email(self, identity, principal):
        with pytest.raises(SignUpError, match="already in use"):
            await identity.sign_up("ADA@example.com", "another123", "Impostor")


class TestSignIn:
    async def test_sign_in(self, identity, principal):
        again = await identity.sign_in("ada@example.com", "secret123")
        assert again.user_id == principal.user_id
        assert again.session_id != principal.session_id

    async def test_wrong_password(self, identity, principal):
        with pytest.raises(AuthenticationError, match="Invalid email or password"):
            await identity.sign_in("ada@example.com", "wrong-password")

    async def test_unknown_email(self, identity):
        with pytest.raises(AuthenticationError):
            await identity.sign_in("nobody@example.com", "secret123")

    async def test_missing_fields(self, identity):
        with pytest.raises(MissingFieldsError):
            await identity.sign_in("", "")


class TestSessions:
    async def test_resolve_token(self, identity, principal):
        resolved = await identity.resolve(principal.token)
        assert resolved is not None
        assert resolved.user_id == principal.user_id
        assert resolved.name == "Ada Lovelace"

    async def test_resolve_garbage(self, identity):
        assert await identity.resolve("not.a.token") is None

    async def test_token_for_unknown_session(self, identity, principal):
        token = create_access_token(principal.user_id, "no-such-session")
        assert await identity.resolve(token) is None

    async def test_sign_out_revokes(self, identity, store, principal):
        await identity.sign_out(principal)
        assert (await store.read(SESSIONS, principal.session_id))["revoked"] is True
        assert await identity.resolve(principal.token) is None

    async def test_sign_out_requires_principal(self, identity):
        with pytest.raises(NotAuthenticatedError):
            await identity.sign_out(None)

    def test_require_principal(self):
        with pytest.raises(NotAuthenticatedError, match="Authentication required"):
            require_principal(None)


class TestAuthStateListeners:
    async def test_listener_sees_sign_in_and_out(self, identity):
        seen = []
        identity.on_change(seen.append)
        principal = await identity.sign_up("ada@example.com", "secret123", "Ada")
        await identity.sign_out(principal)
        assert seen == [replace(principal, token=""), None]

    async def test_listeners_never_see_tokens(self, identity):
        seen = []
        identity.on_change(seen.append)
        principal = await identity.sign_up("ada@example.com", "secret123", "Ada")
        assert principal.token
        assert seen[0].token == ""

    async def test_listener_scoped_to_one_user(self, identity):
        ada = await identity.sign_up("ada@example.com", "secret123", "Ada")
        seen = []
        identity.on_change(seen.append, user_id=ada.user_id)

        grace = await identity.sign_up("grace@example.com", "secret123", "Grace")
        await identity.sign_out(grace)
        assert seen == []

        again = await identity.sign_in("ada@example.com", "secret123")
        await identity.sign_out(again)
        assert [p.user_id if p else None for p in seen] == [ada.user_id, None]

    async def test_scoped_unsubscribe(self, identity):
        ada = await identity.sign_up("ada@example.com", "secret123", "Ada")
        seen = []
        unsubscribe = identity.on_change(seen.append, user_id=ada.user_id)
        unsubscribe()
        await identity.sign_out(ada)
        assert seen == []

    async def test_unsubscribe(self, identity):
        seen = []
        unsubscribe = identity.on_change(seen.append)
        unsubscribe()
        await identity.sign_up("ada@example.com", "secret123", "Ada")
        assert seen == []

    async def test_failing_listener_does_not_break_sign_in(self, identity):
        def boom(_principal):
            raise RuntimeError("listener bug")

        identity.on_change(boom)
        principal = await identity.sign_up("ada@example.com", "secret123", "Ada")
        assert principal.user_id


class TestUpdateProfile:
    async def test_rename(self, identity, store, principal):
        updated = await identity.update_profile(principal, "  Countess of Lovelace ")
        assert updated.name == "Countess of Lovelace"
        assert updated.session_id == principal.session_id
        profile = await store.read(USERS, principal.user_id)
        assert profile["name"] == "Countess of Lovelace"
        assert profile["email"] == "ada@example.com"
        assert (await identity.resolve(principal.token)).name == "Countess of Lovelace"

    async def test_blank_name(self, identity, store, principal):
        with pytest.raises(MissingFieldsError):
            await identity.update_profile(principal, "   ")
        assert (await store.read(USERS, principal.user_id))["name"] == "Ada Lovelace"

    async def test_requires_principal(self, identity):
        with pytest.raises(NotAuthenticatedError):
            await identity.update_profile(None, "Ada")

    async def test_listeners_hear_rename(self, identity, principal):
        seen = []
        identity.on_change(seen.append, user_id=principal.user_id)
        await identity.update_profile(principal, "Ada King")
        assert [p.name for p in seen] == ["Ada King"]
