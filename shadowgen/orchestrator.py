"""Pipeline orchestration: discover, index, build, render, and write per file."""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .config import ShadowConfig
from .logging import get_logger
from .markers import MarkerDecision, MarkerScanner
from .models import ErrorCode, FileReport, FileStatus
from .render import ShadowRenderer
from .scanner import discover_files
from .structure import (
    Indexer,
    IndexerError,
    SourceKittenIndexer,
    StructureError,
    build_generation_unit,
)
from .writer import OutputError, OutputWriter


@dataclass
class RunSummary:
    """Result of one generation run over a scan root."""

    root: Path
    reports: List[FileReport] = field(default_factory=list)
    elapsed: float = 0.0

    def with_status(self, status: FileStatus) -> List[FileReport]:
        return [report for report in self.reports if report.status is status]

    @property
    def processed(self) -> List[FileReport]:
        """Reports for files that carried the opt-in marker."""
        skipped = {FileStatus.NOT_MARKED, FileStatus.FORCE_IGNORED}
        return [report for report in self.reports if report.status not in skipped]

    @property
    def failed(self) -> List[FileReport]:
        return self.with_status(FileStatus.FAILED)


class Orchestrator:
    """Coordinates shadow generation for every marked file under a root."""

    def __init__(
        self,
        config: ShadowConfig,
        *,
        indexer: Indexer | None = None,
        renderer: ShadowRenderer | None = None,
        writer: OutputWriter | None = None,
        marker_scanner: MarkerScanner | None = None,
    ) -> None:
        self.config = config
        self.indexer = indexer or SourceKittenIndexer(
            config.indexer.executable, timeout=config.indexer.timeout
        )
        self.renderer = renderer or ShadowRenderer(config.generation)
        self.writer = writer or OutputWriter(config.output_path)
        self.marker_scanner = marker_scanner or MarkerScanner(config.markers)
        self.logger = get_logger("orchestrator")

    def run(self, *, dry_run: bool = False) -> RunSummary:
        """Process every candidate file in enumeration order."""
        started = time.perf_counter()
        files = self.discover()
        self.logger.debug("Discovered %d candidate file(s) under %s", len(files), self.config.root)

        jobs = max(1, self.config.indexer.jobs)
        if jobs > 1 and len(files) > 1:
            with ThreadPoolExecutor(max_workers=jobs) as pool:
                reports = list(pool.map(lambda path: self.process_file(path, dry_run=dry_run), files))
        else:
            reports = [self.process_file(path, dry_run=dry_run) for path in files]

        summary = RunSummary(
            root=self.config.root,
            reports=reports,
            elapsed=time.perf_counter() - started,
        )
        if not summary.processed:
            self.logger.info(
                "No files marked with %s in the first %d line(s)",
                self.config.markers.opt_in.strip(),
                self.config.markers.lines,
            )
        for report in summary.failed:
            self.logger.warning("Generation failed for %s: %s", self._relative(report.path), report.error)
        self.logger.info("Finished in %.3f seconds", summary.elapsed)
        return summary

    def discover(self) -> List[Path]:
        ignore_paths: List[str] = list(self.config.scan.ignore_paths)
        ignore_paths.append(f"{self.config.generation.output_dir.strip('/')}/")
        return discover_files(
            self.config.root,
            extensions=self.config.scan.extensions,
            ignore_paths=ignore_paths,
        )

    def process_file(self, path: Path, *, dry_run: bool = False) -> FileReport:
        """Run the full pipeline for one file; failures are captured in the report."""
        relative = self._relative(path)
        try:
            decision = self.marker_scanner.decide(path)
        except OSError as exc:
            return self._failed(path, ErrorCode.READ, f"Couldn't read file {relative}: {exc}")

        if decision is MarkerDecision.FORCE_IGNORED:
            self.logger.debug("Force-ignoring %s", relative)
            return FileReport(path=path, status=FileStatus.FORCE_IGNORED)
        if decision is MarkerDecision.NOT_MARKED:
            return FileReport(path=path, status=FileStatus.NOT_MARKED)

        self.logger.info("Scanning %s", relative)
        try:
            indexed = self.indexer.index(path)
        except IndexerError as exc:
            return self._failed(path, ErrorCode.INDEXER, str(exc))

        generation = self.config.generation
        try:
            result = build_generation_unit(indexed.root, path, class_prefix=generation.class_prefix)
        except StructureError as exc:
            return self._failed(path, ErrorCode.STRUCTURE, str(exc))

        report = FileReport(
            path=path,
            status=FileStatus.DRY_RUN if dry_run else FileStatus.GENERATED,
            unit=result.unit,
            warnings=list(result.warnings),
        )
        if generation.strict and result.unclassified:
            report.status = FileStatus.FAILED
            report.error_code = ErrorCode.UNCLASSIFIED
            report.error = f"Unclassified member(s): {', '.join(result.unclassified)}"
            return report

        report.rendered = self.renderer.render(result.unit)
        if dry_run:
            return report

        try:
            if generation.dump_structure:
                report.outputs.append(self.writer.write_structure_dump(path, indexed.raw))
            if generation.write_files:
                report.outputs.append(self.writer.write_shadow_file(path, report.rendered))
            if generation.append_to_source:
                report.outputs.append(self.writer.append_to_source(path, report.rendered))
        except OutputError as exc:
            report.status = FileStatus.FAILED
            report.error_code = ErrorCode.OUTPUT
            report.error = str(exc)
            return report

        self.logger.info("Generated %s", relative)
        return report

    def _failed(self, path: Path, code: ErrorCode, message: str) -> FileReport:
        return FileReport(path=path, status=FileStatus.FAILED, error_code=code, error=message)

    def _relative(self, path: Path) -> str:
        try:
            return path.relative_to(self.config.root).as_posix()
        except ValueError:
            return str(path)


def run_generation(
    config: ShadowConfig,
    *,
    indexer: Optional[Indexer] = None,
    dry_run: bool = False,
) -> RunSummary:
    """Convenience entry point used by the CLI and by embedding callers."""
    return Orchestrator(config, indexer=indexer).run(dry_run=dry_run)


__all__ = ["Orchestrator", "RunSummary", "run_generation"]
