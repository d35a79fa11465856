# mypy: disallow-untyped-defs=False, check-untyped-defs=False

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from cdt_express import main as main_module
from cdt_express.config import ApiConfig, ServerConfig, Settings
from cdt_express.core.exceptions import ConfigurationError
from common.utils.config_errors import MissingEnvironmentVariableError


@pytest.fixture
def settings() -> Settings:
    return Settings(api=ApiConfig(api_key="test-key"))


def test_parse_args():
    args = main_module.parse_args(["--env", "dev", "--api-key", "k", "--config", "custom.yaml"])

    assert args.env == "dev"
    assert args.api_key == "k"
    assert args.config == "custom.yaml"


def test_parse_args_defaults():
    args = main_module.parse_args([])

    assert args.env is None
    assert args.api_key is None
    assert args.config is None


def test_config_error_exits_with_2(capsys):
    error = MissingEnvironmentVariableError("CDT_API_KEY", "root.api.api_key")

    with patch.object(main_module, "load_settings", side_effect=error):
        assert main_module.main([]) == 2

    assert "Configuration error: Missing env var 'CDT_API_KEY'" in capsys.readouterr().err


def test_main_serves_with_loaded_settings(settings):
    with (
        patch.object(main_module, "load_settings", return_value=settings) as load,
        patch.object(main_module, "configure_logging") as configure,
        patch.object(main_module, "serve", new=AsyncMock()) as serve,
    ):
        assert main_module.main(["--env", "dev", "--api-key", "k"]) == 0

    load.assert_called_once_with(env="dev", config_path=None, api_key="k")
    assert configure.call_args.args == ("cdt-express-mcp", "INFO")
    serve.assert_awaited_once_with(settings)


def test_startup_configuration_error_exits_with_2(settings):
    with (
        patch.object(main_module, "load_settings", return_value=settings),
        patch.object(main_module, "configure_logging"),
        patch.object(main_module, "serve", new=AsyncMock(side_effect=ConfigurationError("bad template"))),
    ):
        assert main_module.main([]) == 2


def test_keyboard_interrupt_is_a_clean_exit(settings):
    with (
        patch.object(main_module, "load_settings", return_value=settings),
        patch.object(main_module, "configure_logging"),
        patch.object(main_module, "serve", new=AsyncMock(side_effect=KeyboardInterrupt)),
    ):
        assert main_module.main([]) == 0


@pytest.mark.asyncio
async def test_serve_stdio(settings):
    server = MagicMock()
    server.run_async = AsyncMock()

    with patch.object(main_module, "create_mcp_server", return_value=server) as create:
        await main_module.serve(settings)

    registry = create.call_args.args[0]
    assert len(registry) == 30
    assert server.add_middleware.call_count == 2
    server.run_async.assert_awaited_once_with(transport="stdio", show_banner=False)


@pytest.mark.asyncio
async def test_serve_http(settings):
    http_settings = settings.model_copy(update={"server": ServerConfig(transport="http", port=9000)})
    server = MagicMock()
    server.run_async = AsyncMock()

    with patch.object(main_module, "create_mcp_server", return_value=server):
        await main_module.serve(http_settings)

    server.run_async.assert_awaited_once_with(transport="http", host="127.0.0.1", port=9000)
