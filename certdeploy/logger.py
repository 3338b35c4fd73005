"""
Logging system for certdeploy
Provides real-time logging to files with clean console output
"""

import re
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional, TextIO

from rich.console import Console
from rich.markup import escape

from certdeploy.constants import LOG_DATE_FORMAT, LOG_TIME_FORMAT, SENSITIVE_KEYWORDS

console = Console()

_SENSITIVE_PAIR = re.compile(
    r"(?P<name>[\w-]*(?:%s)[\w-]*)(?P<sep>\s*[=:]\s*)(?P<value>[^&\s<]+)"
    % "|".join(SENSITIVE_KEYWORDS),
    re.IGNORECASE,
)
_KEY_ELEMENT = re.compile(r"(<key>\s*)([^<\s]+)(\s*</key>)")


def mask_secret(value: Optional[str], visible: int = 4) -> str:
    """Mask a secret, keeping only a short prefix for correlation."""
    if not value:
        return ""
    if len(value) <= visible:
        return "*" * len(value)
    return value[:visible] + "*" * 8


def scrub(text: str, secrets: Iterable[Optional[str]] = ()) -> str:
    """
    Remove secrets from a line before it is logged.

    Masks ``name=value`` pairs whose name looks sensitive (password, key...),
    ``<key>`` elements of keygen responses, and any literal occurrence of the
    given secret values.
    """
    for secret in secrets:
        if secret:
            text = text.replace(secret, mask_secret(secret))
    text = _KEY_ELEMENT.sub(
        lambda m: f"{m.group(1)}{mask_secret(m.group(2))}{m.group(3)}", text
    )
    return _SENSITIVE_PAIR.sub(
        lambda m: f"{m.group('name')}{m.group('sep')}{mask_secret(m.group('value'))}",
        text,
    )


class DeployLogger:
    """
    Manages logging for deployment operations
    - Writes all output to log files in real-time
    - Shows clean progress UI in console (unless verbose)
    - Captures errors with context
    """

    def __init__(
        self,
        certificate_name: str,
        operation: str,
        log_dir: Path,
        verbose: bool = False,
        console_output: Optional[Console] = None,
    ):
        """
        Initialize logger

        Args:
            certificate_name: Certificate being deployed (log directory name)
            operation: Operation name (e.g., 'deploy')
            log_dir: Root directory for log files
            verbose: If True, show debug output in console
            console_output: Console to print to (defaults to module console)
        """
        self.certificate_name = certificate_name
        self.operation = operation
        self.verbose = verbose
        self.console = console_output or console
        self.log_file: Optional[TextIO] = None
        self.log_path: Optional[Path] = None
        self.current_step = ""
        self.has_errors = False

        # Structure: logs/{name}/{date}/{time}_{operation}.log
        now = datetime.now()
        name_logs_dir = Path(log_dir) / certificate_name / now.strftime(LOG_DATE_FORMAT)
        name_logs_dir.mkdir(parents=True, exist_ok=True)

        self.log_path = name_logs_dir / f"{now.strftime(LOG_TIME_FORMAT)}_{operation}.log"

        # Line buffered for real-time tailing
        self.log_file = open(self.log_path, "a", buffering=1)

        self._write_log_header()

    def _write_log_header(self):
        """Write log file header"""
        header = f"""
{"=" * 80}
certdeploy Deployment Log
{"=" * 80}
Certificate: {self.certificate_name}
Operation: {self.operation}
Started: {datetime.now().isoformat()}
{"=" * 80}

"""
        self.log_file.write(header)
        self.log_file.flush()

    def log(self, message: str, level: str = "INFO"):
        """
        Log a message to file and optionally console

        Args:
            message: Message to log
            level: Log level (INFO, WARNING, ERROR, DEBUG)
        """
        timestamp = datetime.now().strftime("%H:%M:%S")
        message = scrub(message)

        if self.log_file:
            self.log_file.write(f"[{timestamp}] [{level}] {message}\n")
            self.log_file.flush()

        if self.verbose:
            if level == "ERROR":
                self.console.print(f"[red]{escape(message)}[/red]")
            elif level == "WARNING":
                self.console.print(f"[yellow]{escape(message)}[/yellow]")
            elif level == "DEBUG":
                self.console.print(f"[dim]{escape(message)}[/dim]")
            else:
                self.console.print(escape(message))

    def debug(self, message: str):
        """Log a debug message (console only when verbose)"""
        self.log(message, "DEBUG")

    def log_error(self, error: str, context: Optional[str] = None):
        """
        Log an error with context

        Args:
            error: Error message
            context: Additional context (e.g., appliance message)
        """
        self.has_errors = True
        error = scrub(error)

        error_block = f"""
{"!" * 80}
ERROR OCCURRED
{"!" * 80}
{error}
"""
        if context:
            error_block += f"\nContext: {scrub(context)}\n"

        error_block += f"{'!' * 80}\n\n"

        if self.log_file:
            self.log_file.write(error_block)
            self.log_file.flush()

        self.console.print(f"  [bold red]✗ {escape(error)}[/bold red]")
        if context:
            self.console.print(f"    [color(208)]{escape(scrub(context))}[/color(208)]")

    def step(self, step_name: str):
        """
        Start a new step

        Args:
            step_name: Name of the step
        """
        if self.current_step and not self.verbose:
            self.console.print()

        self.current_step = step_name
        self.log(f"Step: {step_name}", "INFO")

        if not self.verbose:
            self.console.print(
                f"[color(214)]▶[/color(214)] [white]{escape(step_name)}[/white]"
            )

    def success(self, message: str):
        """Log a success message"""
        self.log(message, "INFO")

        if not self.verbose:
            self.console.print(f"  [dim]✓ {escape(scrub(message))}[/dim]")

    def warning(self, message: str):
        """Log a warning message"""
        self.log(message, "WARNING")

        if not self.verbose:
            self.console.print(
                f"  [yellow]⚠[/yellow] [dim]{escape(scrub(message))}[/dim]"
            )

    def close(self):
        """Close log file"""
        if self.log_file:
            footer = f"""
{"=" * 80}
Completed: {datetime.now().isoformat()}
Status: {"FAILED" if self.has_errors else "SUCCESS"}
{"=" * 80}
"""
            self.log_file.write(footer)
            self.log_file.close()
            self.log_file = None

    def __enter__(self):
        """Context manager entry"""
        return self

    def __exit__(self, exc_type, exc_val, _exc_tb):
        """Context manager exit"""
        if exc_type is not None and exc_type not in (SystemExit, KeyboardInterrupt):
            self.log_error(
                str(exc_val) if exc_val else "Operation failed",
                context=f"{exc_type.__name__}",
            )
        self.close()
        return False
