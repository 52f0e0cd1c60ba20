"""Unit tests for configuration loading and validation."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from spinshelf.common.config import (
    ClientConfig,
    Config,
    FileLoggingConfig,
    HTTPConfig,
    LoggingConfig,
    QueueConfig,
    StackConfig,
)


class TestClientConfig:
    """Tests for ClientConfig model."""

    def test_default_values(self):
        config = ClientConfig()
        assert config.host == "api.discogs.com"
        assert config.port == 443
        assert config.api_version == "v2"
        assert config.output_format == "discogs"
        assert config.request_limit == 25
        assert config.request_limit_auth == 60
        assert config.request_limit_interval == 60000
        assert config.exponential_backoff_max_retries == 2
        assert config.exponential_backoff_interval_ms == 2000
        assert config.exponential_backoff_rate == 2.7
        assert config.user_agent.startswith("spinshelf/")

    def test_base_url(self):
        assert ClientConfig().base_url == "https://api.discogs.com"
        assert ClientConfig(host="localhost", port=8443).base_url == "https://localhost:8443"

    def test_accept_header(self):
        config = ClientConfig(output_format="PlainText")
        assert config.output_format == "plaintext"
        assert config.accept_header == "application/vnd.discogs.v2.plaintext+json"

    def test_invalid_output_format(self):
        with pytest.raises(ValidationError):
            ClientConfig(output_format="xml")

    def test_validation_constraints(self):
        with pytest.raises(ValidationError):
            ClientConfig(request_limit=0)

        with pytest.raises(ValidationError):
            ClientConfig(exponential_backoff_max_retries=-1)

        with pytest.raises(ValidationError):
            ClientConfig(exponential_backoff_rate=0.5)


class TestQueueConfig:
    """Tests for QueueConfig model."""

    def test_default_values(self):
        config = QueueConfig()
        assert config.max_stack == 20
        assert config.max_calls == 60
        assert config.interval == 60000

    def test_zero_stack_allowed(self):
        assert QueueConfig(max_stack=0).max_stack == 0


class TestLoggingConfig:
    """Tests for LoggingConfig model."""

    def test_default_values(self):
        config = LoggingConfig()
        assert config.level == "INFO"
        assert config.format == "json"
        assert config.handlers == ["console"]
        assert config.file is None

    def test_level_validation(self):
        assert LoggingConfig(level="debug").level == "DEBUG"

        with pytest.raises(ValidationError):
            LoggingConfig(level="INVALID")

    def test_format_validation(self):
        assert LoggingConfig(format="TEXT").format == "text"

        with pytest.raises(ValidationError):
            LoggingConfig(format="xml")

    def test_handler_validation(self):
        with pytest.raises(ValidationError):
            LoggingConfig(handlers=["syslog"])

    def test_file_logging(self):
        config = LoggingConfig(handlers=["file"], file=FileLoggingConfig(path="logs/a.log"))
        assert config.file.backup_count == 5


class TestConfig:
    """Tests for the root Config model."""

    def test_defaults(self):
        config = Config()
        assert isinstance(config.client, ClientConfig)
        assert isinstance(config.queue, StackConfig)
        assert isinstance(config.http, HTTPConfig)
        assert config.auth is None

    def test_from_yaml_string(self):
        config = Config.from_yaml_string(
            """
client:
  request_limit: 10
  output_format: html
queue:
  max_stack: 5
http:
  timeout: 15
auth:
  user_token: abc
"""
        )
        assert config.client.request_limit == 10
        assert config.client.output_format == "html"
        assert config.queue.max_stack == 5
        assert config.http.timeout == 15
        assert config.auth == {"user_token": "abc"}

    def test_queue_section_rejects_call_budget(self):
        # The budget and window come from the client section
        with pytest.raises(ValidationError):
            Config.from_yaml_string("queue:\n  max_stack: 5\n  max_calls: 30\n")
        with pytest.raises(ValidationError):
            Config(queue={"interval": 1000})

    def test_empty_yaml(self):
        assert Config.from_yaml_string("") == Config.from_yaml_string("{}")

    def test_yaml_round_trip(self, tmp_path: Path):
        path = tmp_path / "nested" / "config.yaml"
        original = Config(
            client=ClientConfig(user_agent="MyCollection/1.0", request_limit_interval=30000),
            queue=StackConfig(max_stack=7),
        )

        original.to_yaml(path)
        loaded = Config.from_yaml(path)

        assert loaded.client.user_agent == "MyCollection/1.0"
        assert loaded.client.request_limit_interval == 30000
        assert loaded.queue.max_stack == 7
        assert loaded.auth is None

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            Config.from_yaml(tmp_path / "missing.yaml")

    def test_invalid_values(self):
        with pytest.raises(ValidationError):
            Config.from_yaml_string("client:\n  port: 0\n")
