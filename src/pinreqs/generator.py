"""
Requirements generation pipeline.

Runs the stages strictly in order: scan the source tree, list installed
packages, match, and write. Any fatal error stops the run at the stage where
it happened; the output file is only opened once every earlier stage has
succeeded.
"""

import time
import uuid
from typing import Callable, Optional, Sequence

from .cli_config import GeneratorConfig, get_config
from .extractor import ImportExtractor, RegexImportExtractor, scan_files
from .matcher import match_requirements
from .package_lister import get_installed_packages
from .requirement import GenerationResult
from .structured_logging import (
    log_generation_complete,
    log_generation_start,
    log_packages_listed,
    log_requirements_matched,
    log_stage_complete,
)
from .walker import find_source_files
from .writer import write_requirements

ProgressCallback = Callable[[str, dict], None]


class RequirementsGenerator:
    """Scans a source tree and writes a pinned requirements file."""

    def __init__(
        self,
        target_dir: str = ".",
        output_file: Optional[str] = None,
        config: Optional[GeneratorConfig] = None,
        extractor: Optional[ImportExtractor] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        self.config = config or get_config()
        self.target_dir = target_dir
        self.output_file = output_file or self.config.output.output_file
        self.extractor = extractor or RegexImportExtractor()
        self.progress_callback = progress_callback

    @property
    def package_manager_command(self) -> Sequence[str]:
        return self.config.package_manager.command

    def _progress(self, stage: str, **info) -> None:
        if self.progress_callback:
            self.progress_callback(stage, info)

    def run(self) -> GenerationResult:
        """
        Execute the full pipeline.

        Raises:
            RequirementsGenerationError: On any fatal stage failure
        """
        start_time = time.time()
        log_generation_start(
            f"run_{uuid.uuid4().hex[:8]}", self.target_dir, self.output_file
        )

        self._progress("scanning", target_dir=self.target_dir)
        source_files = find_source_files(
            self.target_dir,
            suffix=self.config.scan.source_suffix,
            exclude_dirs=self.config.scan.exclude_dirs,
        )
        outcome = scan_files(source_files, self.extractor, self.config.scan.encoding)
        log_stage_complete(
            "scanning",
            files_scanned=outcome.files_scanned,
            unreadable_files=len(outcome.unreadable_files),
            modules_found=len(outcome.modules),
        )

        command = " ".join(self.package_manager_command)
        self._progress("listing", command=command)
        installed = get_installed_packages(self.package_manager_command)
        log_packages_listed(command, len(installed))
        log_stage_complete("listing", installed_packages=len(installed))

        self._progress(
            "matching", modules=len(outcome.modules), installed=len(installed)
        )
        requirements = match_requirements(outcome.modules, installed)
        log_requirements_matched(requirements, len(outcome.modules))
        log_stage_complete("matching", requirements=len(requirements))

        self._progress("writing", output_file=self.output_file)
        write_requirements(self.output_file, requirements)
        log_stage_complete("writing", output_file=self.output_file)

        duration_ms = int((time.time() - start_time) * 1000)
        log_generation_complete(duration_ms, len(requirements), len(outcome.modules))

        return GenerationResult(
            target_dir=self.target_dir,
            output_file=self.output_file,
            files_scanned=outcome.files_scanned,
            found_modules=frozenset(outcome.modules),
            installed_count=len(installed),
            requirements=requirements,
            unreadable_files=list(outcome.unreadable_files),
            duration_ms=duration_ms,
        )


def generate_requirements(
    target_dir: str = ".",
    output_file: Optional[str] = None,
    config: Optional[GeneratorConfig] = None,
) -> GenerationResult:
    """Convenience wrapper running one generation with default wiring."""
    return RequirementsGenerator(target_dir, output_file, config).run()
