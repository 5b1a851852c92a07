"""Unit tests for CLI interface."""

import json

import pytest
from unittest.mock import Mock, patch
from click.testing import CliRunner

from livestatus_api.cli import cli
from livestatus_api.config import AppConfig, LivestatusConfig
from livestatus_api.errors import NotFoundError, QueryFailedError
from livestatus_api.models import Contact, Status


@pytest.fixture
def runner():
    """Create Click test runner."""
    return CliRunner()


@pytest.fixture
def mock_config():
    """Create configuration pointing at a test socket."""
    return AppConfig(
        livestatus=LivestatusConfig(socket_path="unix:/tmp/test-live", timeout=2),
    )


@pytest.fixture(autouse=True)
def quiet_logging():
    """Keep the CLI from reconfiguring root logging during tests."""
    with patch('livestatus_api.cli.setup_logging') as mock_setup:
        yield mock_setup


@pytest.fixture
def alice():
    return Contact(
        id=5,
        name="alice",
        alias="Alice A.",
        email="a@x.com",
        pager="555",
        host_notification_period="24x7",
        host_notifications_enabled=True,
        service_notification_period="24x7",
        service_notifications_enabled=False,
    )


class TestCLIInitialization:
    """Test CLI initialization and setup."""

    @patch('livestatus_api.cli.load_config')
    def test_config_error(self, mock_load_config, runner):
        """Test CLI initialization with configuration error."""
        mock_load_config.side_effect = Exception("Config error")

        result = runner.invoke(cli, ['test'])

        assert result.exit_code == 1
        assert "Config error" in result.output

    @patch('livestatus_api.cli.load_config')
    @patch('livestatus_api.cli.ResourceGateway')
    def test_log_level_override(self, mock_gateway, mock_load_config, runner, mock_config, quiet_logging):
        mock_load_config.return_value = mock_config
        mock_gateway.return_value.check_connection.return_value = Status(
            program_version="2.4.0", livestatus_version="1.5.0"
        )

        result = runner.invoke(cli, ['--log-level', 'debug', 'test'])

        assert result.exit_code == 0
        quiet_logging.assert_called_once_with("DEBUG")

    @patch('livestatus_api.cli.load_config')
    def test_config_file_option(self, mock_load_config, runner, mock_config):
        mock_load_config.return_value = mock_config

        runner.invoke(cli, ['--config', 'settings.yaml', 'get', 'hosts', '--help'])

        mock_load_config.assert_called_once_with(config_file='settings.yaml')


class TestTestCommand:
    """Test the connection test command."""

    @patch('livestatus_api.cli.load_config')
    @patch('livestatus_api.cli.LivestatusClient')
    @patch('livestatus_api.cli.ResourceGateway')
    def test_success(self, mock_gateway, mock_client, mock_load_config, runner, mock_config):
        mock_load_config.return_value = mock_config
        mock_gateway.return_value.check_connection.return_value = Status(
            program_version="2.4.0p12", livestatus_version="2.4.0p12"
        )

        result = runner.invoke(cli, ['test'])

        assert result.exit_code == 0
        assert "Successfully connected" in result.output
        assert "unix:/tmp/test-live" in result.output
        assert "2.4.0p12" in result.output
        mock_client.assert_called_once_with(mock_config.livestatus)

    @patch('livestatus_api.cli.load_config')
    @patch('livestatus_api.cli.ResourceGateway')
    def test_failure(self, mock_gateway, mock_load_config, runner, mock_config):
        mock_load_config.return_value = mock_config
        mock_gateway.return_value.check_connection.side_effect = QueryFailedError(
            "Cannot query 'unix:/tmp/test-live': [Errno 2] No such file or directory"
        )

        result = runner.invoke(cli, ['test'])

        assert result.exit_code == 1
        assert "Connection test failed" in result.output
        assert "No such file or directory" in result.output

    @patch('livestatus_api.cli.load_config')
    @patch('livestatus_api.cli.ResourceGateway')
    def test_no_status_row(self, mock_gateway, mock_load_config, runner, mock_config):
        mock_load_config.return_value = mock_config
        mock_gateway.return_value.check_connection.return_value = None

        result = runner.invoke(cli, ['test'])

        assert result.exit_code == 1
        assert "no status row" in result.output


class TestGetCommand:
    """Test the get command."""

    @patch('livestatus_api.cli.load_config')
    @patch('livestatus_api.cli.ResourceGateway')
    def test_list(self, mock_gateway, mock_load_config, runner, mock_config, alice):
        mock_load_config.return_value = mock_config
        mock_gateway.return_value.list.return_value = [alice]

        result = runner.invoke(cli, ['get', 'contacts'])

        assert result.exit_code == 0
        assert json.loads(result.output) == [alice.model_dump()]
        mock_gateway.return_value.list.assert_called_once_with('contacts')

    @patch('livestatus_api.cli.load_config')
    @patch('livestatus_api.cli.ResourceGateway')
    def test_single_item(self, mock_gateway, mock_load_config, runner, mock_config, alice):
        mock_load_config.return_value = mock_config
        mock_gateway.return_value.get.return_value = alice

        result = runner.invoke(cli, ['get', 'contacts', 'alice'])

        assert result.exit_code == 0
        assert json.loads(result.output)["email"] == "a@x.com"
        mock_gateway.return_value.get.assert_called_once_with('contacts', {'name': 'alice'})

    @patch('livestatus_api.cli.load_config')
    @patch('livestatus_api.cli.ResourceGateway')
    def test_service_key(self, mock_gateway, mock_load_config, runner, mock_config):
        mock_load_config.return_value = mock_config
        mock_gateway.return_value.get.return_value = Mock(model_dump=Mock(return_value={}))

        result = runner.invoke(cli, ['get', 'services', 'web01', 'CPU load'])

        assert result.exit_code == 0
        mock_gateway.return_value.get.assert_called_once_with(
            'services', {'host_name': 'web01', 'name': 'CPU load'}
        )

    @patch('livestatus_api.cli.load_config')
    @patch('livestatus_api.cli.ResourceGateway')
    def test_wrong_key_count(self, mock_gateway, mock_load_config, runner, mock_config):
        mock_load_config.return_value = mock_config

        result = runner.invoke(cli, ['get', 'services', 'web01'])

        assert result.exit_code == 2
        assert "HOST_NAME NAME" in result.output
        mock_gateway.return_value.get.assert_not_called()

    @patch('livestatus_api.cli.load_config')
    @patch('livestatus_api.cli.ResourceGateway')
    def test_not_found(self, mock_gateway, mock_load_config, runner, mock_config):
        mock_load_config.return_value = mock_config
        mock_gateway.return_value.get.side_effect = NotFoundError("Host")

        result = runner.invoke(cli, ['get', 'hosts', 'ghost'])

        assert result.exit_code == 1
        assert '{"code": 404, "message": "Host not found"}' in result.output

    @patch('livestatus_api.cli.load_config')
    def test_unknown_resource(self, mock_load_config, runner, mock_config):
        mock_load_config.return_value = mock_config

        result = runner.invoke(cli, ['get', 'hostgroups'])

        assert result.exit_code == 2


class TestServeCommand:
    """Test the serve command."""

    @patch('livestatus_api.cli.load_config')
    @patch('uvicorn.run')
    def test_serve_defaults(self, mock_run, mock_load_config, runner, mock_config):
        mock_load_config.return_value = mock_config

        result = runner.invoke(cli, ['serve'])

        assert result.exit_code == 0
        args, kwargs = mock_run.call_args
        app = args[0]
        assert app.state.config.livestatus.socket_path == "unix:/tmp/test-live"
        assert kwargs["host"] == "0.0.0.0"
        assert kwargs["port"] == 7654
        assert kwargs["log_level"] == "info"

    @patch('livestatus_api.cli.load_config')
    @patch('uvicorn.run')
    def test_serve_options(self, mock_run, mock_load_config, runner, mock_config):
        mock_load_config.return_value = mock_config

        result = runner.invoke(cli, [
            'serve',
            '--listen-address', '127.0.0.1:8080',
            '--socket-path', 'tcp:monitor:6557',
            '--timeout', '1500ms',
        ])

        assert result.exit_code == 0
        args, kwargs = mock_run.call_args
        config = args[0].state.config
        assert config.livestatus.socket_path == "tcp:monitor:6557"
        assert config.livestatus.timeout == 1.5
        assert (kwargs["host"], kwargs["port"]) == ("127.0.0.1", 8080)

    @patch('livestatus_api.cli.load_config')
    @patch('uvicorn.run')
    def test_serve_invalid_option(self, mock_run, mock_load_config, runner, mock_config):
        mock_load_config.return_value = mock_config

        result = runner.invoke(cli, ['serve', '--listen-address', 'nowhere'])

        assert result.exit_code == 1
        assert "Invalid option" in result.output
        mock_run.assert_not_called()
