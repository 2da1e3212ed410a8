#!/usr/bin/env python3
"""
Unit tests for the in-memory token holder and credential model
"""

import pytest
import threading
from datetime import datetime, timedelta, timezone

from pydantic import ValidationError

from auth import Credential, TokenStorage


class TestCredential:
    """Test the immutable credential record"""

    def test_credential_is_frozen(self, fresh_credential):
        """Test that a stored snapshot cannot be mutated"""
        with pytest.raises(ValidationError):
            fresh_credential.access_token = "tampered"

    def test_naive_expiry_is_treated_as_utc(self):
        """Test that google-auth style naive expiries become UTC-aware"""
        naive = datetime(2030, 1, 1, 12, 0, 0)
        credential = Credential(access_token="token", expires_at=naive)
        assert credential.expires_at.tzinfo is timezone.utc
        assert credential.expires_at.hour == 12

    def test_expiry_checks(self, fresh_credential, expired_credential):
        """Test expiry and look-ahead window checks"""
        assert not fresh_credential.is_expired()
        assert expired_credential.is_expired()
        assert fresh_credential.expires_within(2 * 60 * 60)
        assert not fresh_credential.expires_within(30 * 60)

    def test_credential_without_expiry_never_expires(self):
        """Test that a missing expiry means no expiry"""
        credential = Credential(access_token="token")
        assert not credential.is_expired()
        assert not credential.expires_within(10 ** 6)

    def test_tokens_hidden_from_repr(self, fresh_credential):
        """Test that secrets never leak into logs via repr/str"""
        assert "fresh-access-token" not in repr(fresh_credential)
        assert "refresh-token" not in str(fresh_credential)


class TestTokenStorage:
    """Test the reader-writer protected token slot"""

    def test_starts_empty(self, token_storage):
        """Test that a new holder has no credential"""
        assert token_storage.get() is None
        assert not token_storage.exists()

    def test_set_then_get_returns_same_value(self, token_storage, fresh_credential):
        """Test set/get equality"""
        token_storage.set(fresh_credential)
        assert token_storage.get() == fresh_credential
        assert token_storage.exists()

    def test_set_replaces_whole_value(self, token_storage, fresh_credential, expired_credential):
        """Test that a later set fully replaces the previous credential"""
        token_storage.set(expired_credential)
        token_storage.set(fresh_credential)
        assert token_storage.get() is fresh_credential

    def test_clear(self, fresh_credential):
        """Test clearing the holder"""
        storage = TokenStorage(fresh_credential)
        storage.clear()
        assert storage.get() is None

    def test_replace_if_current(self, token_storage, fresh_credential, expired_credential):
        """Test conditional replacement when the holder is unchanged"""
        token_storage.set(expired_credential)
        assert token_storage.replace_if(expired_credential, fresh_credential) is True
        assert token_storage.get() is fresh_credential

        assert token_storage.replace_if(fresh_credential, None) is True
        assert token_storage.get() is None

    def test_replace_if_stale(self, token_storage, fresh_credential, expired_credential):
        """Test that a stale expectation leaves a newer credential in place"""
        token_storage.set(fresh_credential)

        assert token_storage.replace_if(expired_credential, None) is False
        assert token_storage.replace_if(expired_credential, expired_credential) is False
        assert token_storage.get() is fresh_credential

    def test_set_rejects_other_types(self, token_storage):
        """Test that only Credential values are stored"""
        with pytest.raises(TypeError):
            token_storage.set({"access_token": "token"})

    def test_concurrent_readers_and_writers(self, token_storage):
        """Test that readers always observe a complete credential"""
        credentials = [
            Credential(
                access_token=f"token-{i}",
                refresh_token=f"refresh-{i}",
                expires_at=datetime.now(timezone.utc) + timedelta(minutes=i)
            )
            for i in range(20)
        ]
        token_storage.set(credentials[0])
        errors = []

        def writer():
            for credential in credentials:
                token_storage.set(credential)

        def reader():
            for _ in range(200):
                snapshot = token_storage.get()
                suffix = snapshot.access_token.split("-")[1]
                if snapshot.refresh_token != f"refresh-{suffix}":
                    errors.append(snapshot)

        threads = [threading.Thread(target=writer) for _ in range(3)]
        threads += [threading.Thread(target=reader) for _ in range(5)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        assert errors == []
        assert token_storage.get() in credentials
