"""Main CLI entry point for moodledeploy.

This module provides the command-line interface for moodledeploy, which
provisions a Moodle site on a fresh Debian/Ubuntu host: packages, nginx,
MariaDB, PHP-FPM, a Let's Encrypt certificate, Moodle's CLI installer,
cron jobs, backups and basic hardening.

The CLI is built using Click.
"""

from typing import Optional

import click

from moodledeploy import __version__
from moodledeploy.utils.errors import ErrorHandler
from moodledeploy.utils.logging import setup_logging

INSTALL_USAGE = "Usage: moodledeploy install <domain>"
INSTALL_DESCRIPTION = "Installs Moodle on the specified domain using Nginx, MariaDB, PHP, and Certbot."


@click.group(
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option(
    "--dry-run", is_flag=True, help="Show what would be done without executing"
)
@click.option("--log-file", help="Log to file in addition to console")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    help="YAML file overriding the default deployment settings",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    dry_run: bool,
    log_file: Optional[str],
    config_path: Optional[str],
) -> None:
    """moodledeploy - provision a Moodle site on nginx, MariaDB and PHP-FPM.

    Args:
        ctx: Click context object containing shared state
        verbose: Enable verbose output for detailed logging
        dry_run: Show what would be done without executing commands
        log_file: Optional path to log file for additional logging
        config_path: Optional YAML configuration overrides
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["dry_run"] = dry_run
    ctx.obj["log_file"] = log_file
    ctx.obj["config_path"] = config_path
    ctx.obj["error_handler"] = ErrorHandler(verbose=verbose)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(1)

    setup_logging(verbose=verbose, log_file=log_file)


def _load_config(ctx: click.Context):
    """Return the configuration manager and effective configuration."""
    from moodledeploy.config import ConfigManager

    config_manager = ConfigManager()
    config = config_manager.load_config(ctx.obj.get("config_path"))
    return config_manager, config


@cli.command()
@click.argument("domain", required=False)
@click.pass_context
def install(ctx: click.Context, domain: Optional[str]) -> None:
    """Provision Moodle for DOMAIN on this host.

    Runs every step in order and stops at the first failure. Generated
    passwords are written to moodlePasswords.txt in the invoking user's
    home directory.

    Args:
        ctx: Click context object
        domain: Public domain name of the site
    """
    if not domain:
        click.echo(INSTALL_USAGE)
        click.echo(INSTALL_DESCRIPTION)
        ctx.exit(1)

    try:
        from moodledeploy.provisioning import MoodleProvisioner

        config_manager, config = _load_config(ctx)
        provisioner = MoodleProvisioner(
            domain, config_manager, config, dry_run=ctx.obj["dry_run"]
        )

        if ctx.obj["dry_run"]:
            click.echo(f"DRY RUN: Would provision Moodle for {domain}")
            for index, step in enumerate(provisioner.plan(), 1):
                click.echo(f"DRY RUN: {index:2d}. {step.name:<12} {step.message}")

        result = provisioner.provision()

        if ctx.obj["dry_run"]:
            click.echo("DRY RUN: No changes were made")
            return

        click.echo(f"✓ Moodle provisioned for https://{domain}")
        certificate = result.get("certificate")
        if certificate:
            click.echo(f"Certificate: {certificate['cert_path']}")
        click.echo(
            f"Admin user: {config['moodle']['admin_user']}, "
            f"passwords stored in {result['credentials_file']}."
        )

    except Exception as e:
        ctx.obj["error_handler"].exit_with_error(e, "Moodle provisioning")


@cli.command()
@click.argument("domain")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write to file instead of stdout")
@click.pass_context
def render(ctx: click.Context, domain: str, output: Optional[str]) -> None:
    """Render the nginx virtual host for DOMAIN without touching the system."""
    try:
        from moodledeploy.config.validator import ConfigValidator
        from moodledeploy.utils.errors import ValidationError
        from moodledeploy.webserver import NginxSite

        errors = ConfigValidator().validate_domain(domain)
        if errors:
            raise ValidationError(errors[0])

        config_manager, config = _load_config(ctx)
        site = NginxSite(config_manager, config)
        content = site.render(domain)

        if output:
            with open(output, "w", encoding="utf-8") as f:
                f.write(content)
            click.echo(f"✓ Wrote virtual host to {output}")
        else:
            click.echo(content, nl=False)

    except Exception as e:
        ctx.obj["error_handler"].exit_with_error(e, "Rendering nginx configuration")


@cli.command()
@click.pass_context
def steps(ctx: click.Context) -> None:
    """List the provisioning steps in execution order."""
    try:
        from moodledeploy.provisioning import MoodleProvisioner

        config_manager, config = _load_config(ctx)
        provisioner = MoodleProvisioner("example.com", config_manager, config, dry_run=True)

        for index, step in enumerate(provisioner.plan(), 1):
            click.echo(f"{index:2d}. {step.name:<12} {step.message}")

    except Exception as e:
        ctx.obj["error_handler"].exit_with_error(e, "Listing steps")


@cli.group(context_settings={"help_option_names": ["-h", "--help"]})
def config() -> None:
    """Inspect deployment configuration."""
    pass


@config.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Print the effective configuration as YAML."""
    try:
        config_manager, effective = _load_config(ctx)
        click.echo(config_manager.dump_config(effective), nl=False)
    except Exception as e:
        ctx.obj["error_handler"].exit_with_error(e, "Loading configuration")


@config.command("validate")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def config_validate(ctx: click.Context, path: str) -> None:
    """Validate a YAML configuration file."""
    from moodledeploy.config import ConfigManager
    from moodledeploy.config.validator import ConfigValidationError
    from moodledeploy.utils.errors import format_validation_errors

    try:
        ConfigManager().load_config(path)
        click.echo(f"✓ {path} is valid")
    except ConfigValidationError as e:
        click.echo(f"✗ {format_validation_errors(e.errors)}", err=True)
        ctx.exit(1)


if __name__ == "__main__":
    cli()
