import click
from pathlib import Path
import os
from datetime import datetime

from .config import ServerConfig, load_environment_variables
from .logging_config import configure_logging
from .server import serve


@click.command()
@click.option("--repository", "-r", type=Path, help="Git repository path")
@click.option("-v", "--verbose", count=True)
@click.option(
    "--enable-file-logging",
    is_flag=True,
    help="Enable logging to file in logs/ directory",
)
@click.option(
    "--test-mode",
    is_flag=True,
    help="Run in test mode for CI (stays alive without immediate stdio)",
)
def main(
    repository: Path | None, verbose: int, enable_file_logging: bool, test_mode: bool
) -> None:
    """MCP Git Remote Server - git remote operations for MCP"""
    import asyncio

    load_environment_variables(repository)

    overrides = {}
    if verbose == 1:
        overrides["log_level"] = "INFO"
    elif verbose >= 2:
        overrides["log_level"] = "DEBUG"

    if enable_file_logging:
        logs_dir = (repository if repository else Path.cwd()) / "logs"
        session_id = os.environ.get(
            "MCP_SESSION_ID", datetime.now().strftime("%Y%m%d_%H%M%S")
        )
        overrides["log_file"] = logs_dir / f"mcp_git_remote-{session_id}.log"

    try:
        config = ServerConfig.from_env(**overrides)
    except ValueError as e:
        raise click.UsageError(str(e)) from e

    configure_logging(config.log_level, config.log_file)
    if config.log_file:
        click.echo(f"📝 Debug logging enabled: {config.log_file}", err=True)

    asyncio.run(serve(repository, config, test_mode=test_mode))


if __name__ == "__main__":
    main()
