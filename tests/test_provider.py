"""
Unit tests for the MSAL-backed MS Teams session store.

The MSAL client is mocked so no identity endpoints are contacted.
"""

import os

import pytest
from unittest.mock import Mock, patch

from mstmeetings.core.config import GraphAPIConfig
from mstmeetings.core.exceptions import ProviderDisconnectError
from mstmeetings.provider.msteams import MSTeamsProvider


ACCOUNT = {
    "home_account_id": "uid.utid",
    "environment": "login.microsoftonline.com",
    "username": "jane@example.com",
    "local_account_id": "uid",
}


@pytest.fixture
def graph_config(tmp_path):
    return GraphAPIConfig(
        client_id="cid",
        client_secret="secret",
        tenant_id="tenant-1234",
        token_cache_path=str(tmp_path / "msal_cache.json"),
    )


@pytest.fixture
def msal_app_cls():
    with patch("mstmeetings.provider.msteams.ConfidentialClientApplication") as mock_cls:
        yield mock_cls


@pytest.fixture
def msal_client(msal_app_cls):
    client = msal_app_cls.return_value
    client.get_accounts = Mock(return_value=[ACCOUNT])
    client.remove_account = Mock()
    return client


@pytest.fixture
def provider(graph_config, msal_client):
    return MSTeamsProvider(graph_config)


class TestDisconnect:
    def test_removes_every_account(self, provider, msal_client):
        second = dict(ACCOUNT, home_account_id="uid2.utid")
        msal_client.get_accounts.return_value = [ACCOUNT, second]

        provider.disconnect("jane@example.com")

        msal_client.get_accounts.assert_called_once_with(username="jane@example.com")
        assert msal_client.remove_account.call_count == 2

    def test_not_connected(self, provider, msal_client):
        msal_client.get_accounts.return_value = []

        with pytest.raises(ProviderDisconnectError, match="not connected"):
            provider.disconnect("jane@example.com")
        msal_client.remove_account.assert_not_called()

    def test_missing_email(self, provider, msal_client):
        with pytest.raises(ProviderDisconnectError):
            provider.disconnect("")
        msal_client.get_accounts.assert_not_called()

    def test_msal_failure_is_wrapped(self, provider, msal_client):
        msal_client.remove_account.side_effect = KeyError("home_account_id")

        with pytest.raises(ProviderDisconnectError, match="could not remove session"):
            provider.disconnect("jane@example.com")

    def test_saves_changed_cache(self, provider, msal_client, graph_config):
        def remove_account(account):
            provider.token_cache.has_state_changed = True

        msal_client.remove_account.side_effect = remove_account

        provider.disconnect("jane@example.com")

        with open(graph_config.token_cache_path, encoding="utf-8") as f:
            assert f.read() == provider.token_cache.serialize()

    def test_unchanged_cache_is_not_written(self, provider, graph_config):
        provider.disconnect("jane@example.com")

        assert not os.path.exists(graph_config.token_cache_path)


class TestConnection:
    def test_msal_client_shares_provider_cache(self, provider, msal_app_cls, graph_config):
        kwargs = msal_app_cls.call_args.kwargs
        assert kwargs["token_cache"] is provider.token_cache
        assert kwargs["client_id"] == "cid"
        assert kwargs["authority"] == graph_config.authority

    def test_is_connected(self, provider, msal_client):
        assert provider.is_connected("jane@example.com")

        msal_client.get_accounts.return_value = []
        assert not provider.is_connected("jane@example.com")

    def test_loads_existing_cache(self, graph_config, msal_client):
        with open(graph_config.token_cache_path, "w", encoding="utf-8") as f:
            f.write("{}")

        provider = MSTeamsProvider(graph_config)

        assert provider.token_cache.has_state_changed is False
