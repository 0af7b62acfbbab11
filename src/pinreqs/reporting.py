"""
Console output for requirements generation.

Progress and results go to stdout; warnings go to stderr.
"""

from typing import Optional

from rich.console import Console
from rich.markup import escape

from .requirement import GenerationResult


class GenerationReporter:
    """Formats and displays generation progress and results."""

    def __init__(
        self,
        console: Optional[Console] = None,
        error_console: Optional[Console] = None,
        quiet: bool = False,
        show_contents: bool = True,
    ):
        self.console = console or Console(highlight=False)
        self.error_console = error_console or Console(stderr=True, highlight=False)
        self.quiet = quiet
        self.show_contents = show_contents

    def print_stage(self, stage: str, info: dict) -> None:
        """Print the progress line announcing a pipeline stage."""
        if self.quiet:
            return

        if stage == "scanning":
            message = (
                f"Scanning directory '{escape(info['target_dir'])}' for Python files..."
            )
        elif stage == "listing":
            message = f"Reading installed packages with '{escape(info['command'])}'..."
        elif stage == "matching":
            message = (
                f"Matching {info['modules']} modules against "
                f"{info['installed']} installed packages..."
            )
        elif stage == "writing":
            message = f"Writing '{escape(info['output_file'])}'..."
        else:
            message = f"{escape(stage)}..."

        self.console.print(f"🔍 {message}", style="blue")

    def print_results(self, result: GenerationResult) -> None:
        """Print the generated requirements or the no-match summary."""
        if result.unreadable_files:
            self.error_console.print(
                f"⚠️  Skipped {len(result.unreadable_files)} unreadable file(s)",
                style="yellow",
            )

        if self.quiet:
            return

        output_file = escape(result.output_file)
        if result.has_requirements:
            self.console.print(
                f"✅ Successfully generated '{output_file}' with detected "
                "Python modules and their versions.",
                style="green",
            )
            if self.show_contents:
                self.console.print(f"Contents of '{output_file}':", style="bold")
                for requirement in result.requirements:
                    self.console.print(requirement, markup=False)
            return

        self.console.print(
            "ℹ️  No external Python modules with installed versions were found.",
            style="yellow",
        )
        if result.found_modules:
            self.console.print(
                f"{len(result.found_modules)} module(s) detected in "
                f"{result.files_scanned} file(s), none matched an installed package.",
                style="dim",
            )
        else:
            self.console.print(
                f"No import statements detected in {result.files_scanned} file(s).",
                style="dim",
            )
