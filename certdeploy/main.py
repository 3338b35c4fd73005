#!/usr/bin/env python3
"""certdeploy CLI - Main entry point"""

import functools
import os
import sys

import rich_click as click
from click.exceptions import Abort, ClickException, MissingParameter, UsageError
from rich.console import Console

from certdeploy import __version__
from certdeploy.commands.deploy import deploy
from certdeploy.commands.hosts import hosts_list, keys_forget
from certdeploy.constants import EXIT_CONFIG_ERROR, EXIT_INTERRUPTED

click.rich_click.USE_RICH_MARKUP = True
click.rich_click.MAX_WIDTH = 100
click.rich_click.STYLE_OPTION = "bold magenta"
click.rich_click.STYLE_SWITCH = "bold green"
click.rich_click.STYLE_REQUIRED_LONG = "bold red"
click.rich_click.OPTION_ENVVAR_FIRST = True
click.rich_click.SHOW_METAVARS_COLUMN = False

console = Console()


def handle_cli_errors(func):
    """Decorator to handle CLI errors gracefully."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except MissingParameter as e:
            console.print(f"\n[bold red]✗ Error:[/bold red] {e.format_message()}\n")
            if e.ctx and e.ctx.command:
                console.print(
                    f"[dim]Run[/dim] [cyan]certdeploy {e.ctx.command.name} --help[/cyan] "
                    "[dim]for usage information[/dim]\n"
                )
            sys.exit(EXIT_CONFIG_ERROR)
        except UsageError as e:
            console.print(f"\n[bold red]✗ Error:[/bold red] {e.format_message()}\n")
            sys.exit(EXIT_CONFIG_ERROR)
        except ClickException as e:
            e.show()
            sys.exit(e.exit_code)
        except (KeyboardInterrupt, Abort):
            console.print("\n\n[yellow]⚠️  Operation cancelled by user[/yellow]")
            sys.exit(EXIT_INTERRUPTED)
        except Exception as e:
            console.print(f"\n[bold red]✗ Unexpected error:[/bold red] {e}\n")

            if os.environ.get("DEBUG") or os.environ.get("VERBOSE"):
                import traceback

                console.print("[dim]Traceback:[/dim]")
                traceback.print_exc()
            sys.exit(EXIT_CONFIG_ERROR)

    return wrapper


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """
    certdeploy - Deploy TLS certificates to network appliances.

    \b
    Quick Start:
      certdeploy deploy --cert fullchain.pem --key site.key \\
          -H "fw1.example.com, fw2.example.com" -u acme -p secret
      certdeploy deploy --cert fullchain.pem --key site.key   # reuse saved hosts/keys
      certdeploy hosts:list --name fullchain                  # inspect saved state
      certdeploy keys:forget --name fullchain -H fw1.example.com
    """


cli.add_command(deploy)
cli.add_command(hosts_list)
cli.add_command(keys_forget)


@handle_cli_errors
def main():
    """Main entry point with error handling."""
    cli(standalone_mode=False)


if __name__ == "__main__":
    main()
