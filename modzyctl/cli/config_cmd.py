"""Config commands for modzyctl."""

from __future__ import annotations

from typing import Optional

import click

from modzyctl.core.config import CONFIG_FILE, DEFAULT_URL, Config
from modzyctl.core.exceptions import ModzyError
from modzyctl.core.output import OutputFormat, print_error, print_key_value, print_output, print_success
from modzyctl.core.validation import validate_server_url


def _mask(api_key: Optional[str]) -> str:
    if not api_key:
        return "-"
    return f"{api_key[:4]}****" if len(api_key) > 8 else "****"


@click.group()
def config() -> None:
    """Manage modzyctl configuration."""
    pass


@config.command("init")
@click.option("--url", default=DEFAULT_URL, show_default=True, help="API base URL")
@click.option("--api-key", prompt="API key", hide_input=True, help="API key (<id>.<secret>)")
@click.option("--profile", default="default", help="Profile name")
@click.option("--force", is_flag=True, help="Overwrite existing profile")
def config_init(url: str, api_key: str, profile: str, force: bool) -> None:
    """Create configuration file with a new profile.

    Example:
        modzyctl config init --url https://app.modzy.com/api
    """
    try:
        url = validate_server_url(url)
    except ModzyError as e:
        print_error(str(e))
        raise SystemExit(1)

    if CONFIG_FILE.exists():
        cfg = Config.load()
        if cfg.has_profile(profile) and not force:
            print_error(f"Profile '{profile}' already exists. Use --force to overwrite.")
            raise SystemExit(1)
    else:
        cfg = Config()

    cfg.add_profile(name=profile, url=url, api_key=api_key)

    if len(cfg.profiles) == 1:
        cfg.default_profile = profile

    cfg.save()

    print_success(f"Configuration saved to {CONFIG_FILE}")
    print_key_value({"profile": profile, "url": url, "api_key": _mask(api_key)})


@config.command("show")
@click.option("--output", "-o", type=click.Choice(["json", "table"]), default="table")
def config_show(output: str) -> None:
    """Show current configuration (API keys are masked)."""
    try:
        cfg = Config.load()
    except ModzyError as e:
        print_error(str(e))
        raise SystemExit(1)

    if not cfg.profiles:
        print_error("No configuration found. Run 'modzyctl config init' first.")
        raise SystemExit(1)

    data = {
        "config_file": str(CONFIG_FILE),
        "default_profile": cfg.default_profile,
        "output_format": cfg.output_format,
        "profiles": list(cfg.profiles.keys()),
    }

    if output == "json":
        data["profile_details"] = {
            name: {**p.to_dict(), "api_key": _mask(p.api_key)} for name, p in cfg.profiles.items()
        }
        print_output(data, format=OutputFormat.JSON)
        return

    print_key_value(data, title="Configuration")
    click.echo()
    for name, profile in cfg.profiles.items():
        marker = " (default)" if name == cfg.default_profile else ""
        click.echo(f"Profile: {name}{marker}")
        print_key_value(
            {
                "url": profile.url,
                "api_key": _mask(profile.api_key),
                "verify_ssl": profile.verify_ssl,
                "timeout": f"{profile.timeout}s",
            }
        )
        click.echo()


@config.command("use-context")
@click.argument("profile")
def config_use_context(profile: str) -> None:
    """Switch the active profile.

    Example:
        modzyctl config use-context production
    """
    cfg = Config.load()

    if not cfg.has_profile(profile):
        print_error(f"Profile '{profile}' not found.")
        click.echo(f"Available profiles: {', '.join(cfg.profiles.keys())}")
        raise SystemExit(1)

    cfg.set_default_profile(profile)
    cfg.save()

    print_success(f"Switched to profile '{profile}'")


@config.command("current-context")
def config_current_context() -> None:
    """Show the current active profile."""
    cfg = Config.load()

    if not cfg.profiles:
        print_error("No configuration found.")
        raise SystemExit(1)

    click.echo(cfg.default_profile)


@config.command("add-profile")
@click.argument("name")
@click.option("--url", required=True, help="API base URL")
@click.option("--api-key", default=None, help="API key (or set MODZY_API_KEY)")
@click.option("--timeout", type=int, default=30, help="Request timeout in seconds")
@click.option("--no-verify-ssl", is_flag=True, help="Disable SSL verification")
def config_add_profile(
    name: str,
    url: str,
    api_key: Optional[str],
    timeout: int,
    no_verify_ssl: bool,
) -> None:
    """Add a new profile.

    Example:
        modzyctl config add-profile dev --url https://modzy-dev.example.com/api
    """
    try:
        url = validate_server_url(url)
    except ModzyError as e:
        print_error(str(e))
        raise SystemExit(1)

    cfg = Config.load()

    if cfg.has_profile(name):
        print_error(f"Profile '{name}' already exists.")
        raise SystemExit(1)

    cfg.add_profile(
        name=name,
        url=url,
        api_key=api_key,
        timeout=timeout,
        verify_ssl=not no_verify_ssl,
    )
    cfg.save()

    print_success(f"Profile '{name}' added")


@config.command("remove-profile")
@click.argument("name")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
def config_remove_profile(name: str, yes: bool) -> None:
    """Remove a profile.

    Example:
        modzyctl config remove-profile dev
    """
    cfg = Config.load()

    if not cfg.has_profile(name):
        print_error(f"Profile '{name}' not found.")
        raise SystemExit(1)

    if name == cfg.default_profile:
        print_error("Cannot remove the default profile. Switch to another profile first.")
        raise SystemExit(1)

    if not yes:
        click.confirm(f"Remove profile '{name}'?", abort=True)

    cfg.remove_profile(name)
    cfg.save()

    print_success(f"Profile '{name}' removed")
