"""CLI interface for campaign retry"""

import json
import logging
from pathlib import Path
from typing import Optional, Tuple

import click

from campaign_retry.application.retry_service import CampaignRetryService
from campaign_retry.domain.errors import CampaignRetryError, ValidationError
from campaign_retry.domain.models.retry_result import RetryResult
from campaign_retry.domain.validators.retry_request_validator import (
    describe_issues,
    validate_retry_request,
)
from campaign_retry.infrastructure.config.config_manager import ConfigManager, ConfigurationError
from campaign_retry.infrastructure.credentials import CredentialSourceFactory
from campaign_retry.infrastructure.voice_campaigns.client import VoiceCampaignClient

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration"""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    logging.getLogger().setLevel(level)


def _die(message: str, verbose: bool = False, exc: Optional[Exception] = None) -> None:
    """Exit with a user-friendly error message"""
    if exc is not None:
        logger.error(message, exc_info=verbose)
    else:
        logger.error(message)
    raise click.ClickException(message)


def _create_client(
    config_manager: ConfigManager,
    base_url: Optional[str],
    token: Optional[str],
    timeout: Optional[float],
) -> VoiceCampaignClient:
    """Create voice campaigns client from config and CLI overrides

    Args:
        config_manager: Configuration manager
        base_url: Optional base URL override
        token: Optional static token override
        timeout: Optional timeout override in seconds

    Returns:
        VoiceCampaignClient instance
    """
    api_config = config_manager.get_api_config()
    auth_config = config_manager.get_auth_config()

    credentials = CredentialSourceFactory.from_settings(
        token=token,
        token_env=auth_config.token_env,
        session_file=auth_config.session_file,
    )
    return VoiceCampaignClient(
        base_url=base_url or api_config.base_url,
        credentials=credentials,
        timeout=timeout if timeout is not None else api_config.timeout,
    )


def _output_result(result: RetryResult, as_json: bool = False) -> None:
    """Output retry result to console"""
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    click.echo(f"Retry complete: {result.retried} call(s) retried")
    if not result.is_degraded:
        return
    if result.failures:
        click.echo(f"Permanent failures: {result.failures}", err=True)
    if result.error:
        click.echo(f"Warning: {result.error}", err=True)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to .campaign-retry.yml config file",
)
@click.pass_context
def cli(ctx, verbose: bool, config: Path):
    """Campaign Retry - resubmit failed voice campaign calls"""
    ctx.ensure_object(dict)
    setup_logging(verbose)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose


@cli.command()
@click.argument("campaign_ids", nargs=-1, required=True)
@click.option("--max-attempts", type=int, help="Attempts per failed call (1-5). Overrides config.")
@click.option("--delay-ms", type=int, help="Delay between attempts in ms (>= 1000). Overrides config.")
@click.option("--base-url", type=str, help="API base URL. Overrides config and CAMPAIGN_RETRY_API_BASE.")
@click.option("--token", type=str, help="Bearer token. Overrides the configured token source.")
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    help="Request timeout in seconds. Overrides config.",
)
@click.option(
    "--repeat",
    type=click.IntRange(1, 10),
    help="Call the retry endpoint up to N times on transient errors. Overrides config.",
)
@click.option("--dry-run", is_flag=True, help="Validate and print the request without sending it")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.pass_context
def retry(
    ctx,
    campaign_ids: Tuple[str, ...],
    max_attempts: Optional[int],
    delay_ms: Optional[int],
    base_url: Optional[str],
    token: Optional[str],
    timeout: Optional[float],
    repeat: Optional[int],
    dry_run: bool,
    as_json: bool,
):
    """Retry failed calls for one or more campaigns.

    CAMPAIGN_IDS: One or more campaign UUIDs
    """
    verbose = ctx.obj.get("verbose", False)

    try:
        config_manager = ConfigManager(config_path=ctx.obj.get("config_path"))
        defaults = config_manager.get_request_defaults()
        raw_request = {
            "campaignIds": list(campaign_ids),
            "maxAttempts": max_attempts if max_attempts is not None else defaults.max_attempts,
            "delayMs": delay_ms if delay_ms is not None else defaults.delay_ms,
        }

        retry_config = config_manager.get_retry_config()
        if repeat is not None:
            retry_config = retry_config.model_copy(update={"max_attempts": repeat})

        if dry_run:
            request = validate_retry_request(raw_request)
            click.echo(json.dumps(request.to_payload(), indent=2))
            return

        try:
            client = _create_client(config_manager, base_url, token, timeout)
        except ValueError as e:
            _die(str(e), verbose=verbose, exc=e)

        service = CampaignRetryService(client, retry_config=retry_config)
        result = service.retry_failed_calls(raw_request)
        _output_result(result, as_json=as_json)

    except click.ClickException:
        raise
    except ValidationError as e:
        _die(f"Invalid retry request:\n{describe_issues(e.issues)}", verbose=verbose, exc=e)
    except ConfigurationError as e:
        _die(str(e), verbose=verbose, exc=e)
    except CampaignRetryError as e:
        _die(f"Retry failed: {e}", verbose=verbose, exc=e)


def main():
    """Main entry point"""
    cli(obj={})


if __name__ == "__main__":
    main()
