"""
Test client construction, configuration validation and query building.
"""

import logging
from dataclasses import FrozenInstanceError
from unittest.mock import Mock

import pytest

from helpers import ok, make_session, sent_params, sent_url

from dmm_client import ClientConfig, ConfigError, DmmApiClient, DEFAULT_BASE_URL, ErrorCode

CREDENTIALS = {"api_id": "test-api-id", "affiliate_id": "test-affiliate-id"}


class TestConfigDefaults:

    def test_defaults(self):
        """Test the documented defaults."""
        config = ClientConfig(**CREDENTIALS)

        assert config.base_url == DEFAULT_BASE_URL == "https://api.dmm.com/affiliate/v3"
        assert config.timeout == 10000
        assert config.max_retries == 3
        assert config.retry_delay == 1000
        assert config.site == "DMM.com"
        assert config.debug is False

    def test_config_is_immutable(self):
        """Test a configuration cannot be changed after construction."""
        config = ClientConfig(**CREDENTIALS)

        with pytest.raises(FrozenInstanceError):
            config.timeout = 1

    def test_client_accepts_config_object(self):
        """Test a ClientConfig can be passed instead of options."""
        config = ClientConfig(**CREDENTIALS, site="FANZA")
        client = DmmApiClient(config, session=Mock())

        assert client.config is config
        assert client.base_url == DEFAULT_BASE_URL

    def test_config_and_options_are_exclusive(self):
        """Test mixing a ClientConfig with keyword options is rejected."""
        with pytest.raises(ConfigError):
            DmmApiClient(ClientConfig(**CREDENTIALS), timeout=5)

    def test_unknown_option_is_config_error(self):
        """Test an unknown keyword option surfaces as ConfigError."""
        with pytest.raises(ConfigError, match="Invalid client options"):
            DmmApiClient(**CREDENTIALS, retries=5)


class TestConfigValidation:

    @pytest.mark.parametrize("options", [
        {},
        {"api_id": "id"},
        {"affiliate_id": "aff"},
        {"api_id": "", "affiliate_id": "aff"},
        {"api_id": "id", "affiliate_id": ""},
    ])
    def test_missing_credentials(self, options):
        """Test both credentials are required."""
        with pytest.raises(ConfigError) as exc_info:
            DmmApiClient(**options)

        assert str(exc_info.value) == "API ID and Affiliate ID are required."
        assert exc_info.value.code == ErrorCode.INVALID_CONFIG

    @pytest.mark.parametrize("base_url", ["", "   ", "not a url", "ftp://api.example.com", "https://", 42])
    def test_invalid_base_url(self, base_url):
        """Test malformed or non-http base URLs are rejected at construction."""
        session = Mock()

        with pytest.raises(ConfigError) as exc_info:
            DmmApiClient(**CREDENTIALS, base_url=base_url, session=session)

        assert exc_info.value.code == ErrorCode.INVALID_URL
        session.get.assert_not_called()

    def test_none_base_url_uses_default(self):
        """Test base_url=None falls back to the default."""
        assert ClientConfig(**CREDENTIALS, base_url=None).base_url == DEFAULT_BASE_URL

    def test_trailing_slash_is_stripped(self):
        """Test a trailing slash does not produce a double slash."""
        session = make_session(ok({}))
        client = DmmApiClient(**CREDENTIALS, base_url="http://localhost:8080/v3/", session=session)

        client.get_floor_list()

        assert client.base_url == "http://localhost:8080/v3"
        assert sent_url(session) == "http://localhost:8080/v3/FloorList"

    @pytest.mark.parametrize("options", [
        {"timeout": 0},
        {"timeout": -1},
        {"timeout": "1000"},
        {"max_retries": -1},
        {"max_retries": 1.5},
        {"max_retries": True},
        {"retry_delay": 0},
        {"retry_delay": None},
        {"site": "dmm.co.jp"},
    ])
    def test_invalid_numeric_and_site_options(self, options):
        """Test out-of-range options are rejected."""
        with pytest.raises(ConfigError):
            ClientConfig(**CREDENTIALS, **options)

    def test_zero_retries_is_valid(self):
        """Test max_retries=0 disables retries without being an error."""
        assert ClientConfig(**CREDENTIALS, max_retries=0).max_retries == 0


class TestFromEnv:

    def test_reads_environment(self):
        """Test every DMM_* variable is honored."""
        config = ClientConfig.from_env({
            "DMM_API_ID": "env-id",
            "DMM_AFFILIATE_ID": "env-aff",
            "DMM_BASE_URL": "https://proxy.example.com/v3",
            "DMM_TIMEOUT": "2000",
            "DMM_MAX_RETRIES": "1",
            "DMM_RETRY_DELAY": "250",
            "DMM_SITE": "FANZA",
        })

        assert config.api_id == "env-id"
        assert config.affiliate_id == "env-aff"
        assert config.base_url == "https://proxy.example.com/v3"
        assert config.timeout == 2000
        assert config.max_retries == 1
        assert config.retry_delay == 250
        assert config.site == "FANZA"

    def test_overrides_win(self):
        """Test keyword overrides take precedence over the environment."""
        config = ClientConfig.from_env({"DMM_API_ID": "env-id", "DMM_AFFILIATE_ID": "env-aff"},
                                       api_id="explicit", timeout=3000)

        assert config.api_id == "explicit"
        assert config.affiliate_id == "env-aff"
        assert config.timeout == 3000

    def test_missing_credentials(self):
        """Test an empty environment yields the missing credentials error."""
        with pytest.raises(ConfigError, match="required"):
            ClientConfig.from_env({})

    def test_non_integer_value(self):
        """Test a non-numeric DMM_TIMEOUT is reported."""
        with pytest.raises(ConfigError, match="DMM_TIMEOUT") as exc_info:
            ClientConfig.from_env({"DMM_API_ID": "a", "DMM_AFFILIATE_ID": "b", "DMM_TIMEOUT": "soon"})

        assert isinstance(exc_info.value.cause, ValueError)

    def test_reads_os_environ_by_default(self, monkeypatch):
        """Test os.environ is used when no mapping is given."""
        monkeypatch.setenv("DMM_API_ID", "os-id")
        monkeypatch.setenv("DMM_AFFILIATE_ID", "os-aff")

        assert ClientConfig.from_env().api_id == "os-id"


class TestQueryBuilding:

    def test_credentials_cannot_be_overridden(self, make_client):
        """Test caller supplied credential keys are ignored."""
        session = make_session(ok({}))
        client = make_client(session)

        client._request("/ItemList", {"api_id": "evil", "affiliate_id": "evil", "keyword": "k"})

        params = sent_params(session)
        assert params["api_id"] == "test-api-id"
        assert params["affiliate_id"] == "test-affiliate-id"
        assert params["keyword"] == "k"

    def test_none_values_dropped_and_values_stringified(self, make_client):
        """Test None is omitted and other values are sent as strings."""
        session = make_session(ok({}))
        client = make_client(session)

        client._request("/ItemList", {"keyword": None, "hits": 10, "ratio": 1.5, "flag": True, "off": False})

        assert sent_params(session) == {
            "api_id": "test-api-id",
            "affiliate_id": "test-affiliate-id",
            "hits": "10",
            "ratio": "1.5",
            "flag": "true",
            "off": "false",
        }

    def test_configured_site_sent_with_item_list(self, make_client):
        """Test item searches carry the configured site unless the call names one."""
        session = make_session(ok({}), ok({}))
        client = make_client(session, site="FANZA")

        client.get_item_list(keyword="k")
        client.get_item_list(keyword="k", site="DMM.com")

        assert sent_params(session, 0)["site"] == "FANZA"
        assert sent_params(session, 1)["site"] == "DMM.com"

    @pytest.mark.parametrize("method, args", [
        ("get_floor_list", ()),
        ("search_actress", ({"keyword": "k"},)),
        ("search_genre", ({"floor_id": 43},)),
    ])
    def test_site_not_sent_to_other_endpoints(self, make_client, method, args):
        """Test only the item search receives the site parameter."""
        session = make_session(ok({}))
        client = make_client(session, site="FANZA")

        getattr(client, method)(*args)

        assert "site" not in sent_params(session)

    def test_headers_sent(self, make_client):
        """Test the JSON accept header and user agent are sent."""
        session = make_session(ok({}))
        client = make_client(session, user_agent="my-app/2.0")

        client._request("/ItemList")

        headers = session.get.call_args.kwargs["headers"]
        assert headers["Accept"] == "application/json"
        assert headers["User-Agent"] == "my-app/2.0"


class TestSessionLifecycle:

    def test_context_manager_closes_owned_session(self, monkeypatch):
        """Test a client-created session is closed on exit."""
        created = Mock()
        monkeypatch.setattr("dmm_client.api_client.requests.Session", lambda: created)

        with DmmApiClient(**CREDENTIALS) as client:
            assert client._session is created

        created.close.assert_called_once()

    def test_injected_session_is_not_closed(self):
        """Test a caller supplied session is left open."""
        session = Mock()

        with DmmApiClient(**CREDENTIALS, session=session):
            pass

        session.close.assert_not_called()


class TestDebugLogging:

    def test_debug_does_not_leak_to_other_clients(self, monkeypatch):
        """Test debug=True raises only that client's log level."""
        module_logger = logging.getLogger("dmm_client.api_client")
        monkeypatch.setattr(module_logger, "level", logging.NOTSET)

        debug_client = DmmApiClient(**CREDENTIALS, debug=True, session=Mock())
        plain_client = DmmApiClient(**CREDENTIALS, session=Mock())

        assert debug_client.logger.level == logging.DEBUG
        assert debug_client.logger.name.startswith("dmm_client.api_client.")
        assert plain_client.logger is module_logger
        assert module_logger.level == logging.NOTSET
