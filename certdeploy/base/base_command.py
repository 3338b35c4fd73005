"""
Base Command Class

Abstract base for all certdeploy CLI commands.
Provides common functionality and structure.
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.markup import escape

from certdeploy.constants import EXIT_CONFIG_ERROR, EXIT_INTERRUPTED
from certdeploy.exceptions import CertDeployError
from certdeploy.logger import DeployLogger
from certdeploy.ui_components import show_header
from certdeploy.utils import get_log_dir, get_state_dir


class BaseCommand(ABC):
    """
    Abstract base command class.

    Provides:
    - Logger initialization
    - Header display
    - Error handling
    - JSON output support
    """

    def __init__(
        self,
        state_dir: Optional[str] = None,
        verbose: bool = False,
        json_output: bool = False,
    ):
        self.verbose = verbose
        self.json_output = json_output
        self.console = Console()
        self.state_dir: Path = get_state_dir(state_dir)
        self.logger: Optional[DeployLogger] = None

    def init_logger(self, certificate_name: str, command_name: str) -> DeployLogger:
        """
        Initialize command logger.

        In JSON mode the log file is still written but console output goes to
        stderr so stdout stays machine readable.

        Args:
            certificate_name: Certificate the command acts on
            command_name: Command name

        Returns:
            DeployLogger instance
        """
        console = Console(stderr=True, quiet=True) if self.json_output else self.console
        self.logger = DeployLogger(
            certificate_name,
            command_name,
            get_log_dir(self.state_dir),
            verbose=self.verbose,
            console_output=console,
        )
        return self.logger

    def output_json(self, data: Dict[str, Any], exit_code: int = 0) -> None:
        """
        Output data as JSON and exit.

        Args:
            data: Data to output as JSON
            exit_code: Exit code (0 for success, non-zero for error)
        """
        print(json.dumps(data, indent=2))
        if exit_code != 0:
            raise SystemExit(exit_code)

    def output_json_error(
        self,
        error: str,
        details: Optional[Dict[str, Any]] = None,
        exit_code: int = EXIT_CONFIG_ERROR,
    ) -> None:
        """
        Output error as JSON and exit.

        Args:
            error: Error message
            details: Optional error details
            exit_code: Exit code
        """
        error_data: Dict[str, Any] = {"error": error}
        if details:
            error_data["details"] = details
        self.output_json(error_data, exit_code=exit_code)

    def show_header(
        self,
        title: str,
        certificate: Optional[str] = None,
        details: Optional[dict] = None,
    ) -> None:
        """Show command header (skip in JSON or verbose mode)."""
        if not self.verbose and not self.json_output:
            show_header(
                title=title,
                certificate=certificate,
                details=details,
                console=self.console,
            )

    def print_success(self, message: str) -> None:
        """Print success message (skip in JSON mode)."""
        if not self.json_output:
            self.console.print(f"[green]✓ {escape(message)}[/green]")

    def print_warning(self, message: str) -> None:
        """Print warning message (skip in JSON mode)."""
        if not self.json_output:
            self.console.print(f"[yellow]⚠ {escape(message)}[/yellow]")

    def print_dim(self, message: str) -> None:
        """Print dim message (skip in JSON mode)."""
        if not self.json_output:
            self.console.print(f"[dim]{escape(message)}[/dim]")

    def print_log_location(self) -> None:
        if self.logger and not self.json_output:
            self.console.print(f"\n[dim]Logs saved to:[/dim] {self.logger.log_path}\n")

    @abstractmethod
    def execute(self, **kwargs) -> None:
        """
        Execute command logic.

        Must be implemented by subclasses.
        """
        pass

    def run(self, **kwargs) -> None:
        """
        Run command with error handling.

        Args:
            **kwargs: Command arguments
        """
        try:
            self.execute(**kwargs)
        except KeyboardInterrupt:
            self.print_warning("Operation cancelled by user")
            self.print_log_location()
            raise SystemExit(EXIT_INTERRUPTED)
        except SystemExit:
            raise
        except CertDeployError as e:
            if self.logger:
                self.logger.log_error(e.message, context=e.context)
            if self.json_output:
                self.output_json_error(e.message, {"context": e.context} if e.context else None)
            self.console.print(f"\n[bold red]✗ Error:[/bold red] {escape(e.message)}")
            if e.context:
                self.print_dim(e.context)
            self.print_log_location()
            raise SystemExit(EXIT_CONFIG_ERROR)
        except (FileNotFoundError, PermissionError) as e:
            error_type = type(e).__name__
            if self.logger:
                self.logger.log_error(f"{error_type}: {e}")
            if self.json_output:
                self.output_json_error(f"{error_type}: {e}")
            self.console.print(f"\n[bold red]✗ {error_type}:[/bold red] {escape(str(e))}\n")
            self.print_log_location()
            raise SystemExit(EXIT_CONFIG_ERROR)
        finally:
            if self.logger:
                self.logger.close()
