# File: extmodelgen/generator.py
"""
ExtModelGen - Generation Pipeline (Orchestrator)
==================================================

Connects every phase together:

    Descriptor file → ClassDescriptors → Model → Ext.define text → artifacts

The ``ModelGenerator`` class provides both a programmatic API and the
backend for the CLI.

Workflow::

    1. Load descriptors from a JSON/YAML file (or accept in-memory objects).
    2. Parse into ``ClassDescriptor`` list + ``GenerationConfig``.
    3. For each class: assemble the model and render it.
    4. Hand each rendered model to ``ArtifactExporter``.
    5. Return a ``GenerationReport`` with metrics and status.

Error handling strategy:
    - Input errors (unreadable or invalid file) stop the run.
    - Metadata and serialization errors are isolated per class; the other
      classes are still generated.
    - Resource errors are isolated per class as well.
    - The final report gives a clear pass/fail verdict.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import yaml
from pydantic import ValidationError

from extmodelgen.assembler import build_model
from extmodelgen.descriptors import ClassDescriptor
from extmodelgen.errors import ExtModelGenError, ResourceError
from extmodelgen.exporters import ArtifactExporter, ExportResult
from extmodelgen.models import GenerationConfig, ModelDefinition
from extmodelgen.serializer import generate_javascript
from extmodelgen.utils import Timer

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("extmodelgen.generator")


# ---------------------------------------------------------------------------
# Generation report
# ---------------------------------------------------------------------------


@dataclass(frozen=False, slots=True)
class GenerationStepMetric:
    """Timing and outcome for a single pipeline step."""

    step_name: str = ""
    success: bool = True
    elapsed_seconds: float = 0.0
    detail: str = ""


@dataclass(frozen=False, slots=True)
class ClassOutcome:
    """What happened to one class."""

    class_name: str = ""
    model_name: str = ""
    success: bool = False
    code: str = ""
    files: List[str] = field(default_factory=list)
    kept: List[str] = field(default_factory=list)
    error: str = ""


@dataclass(frozen=False, slots=True)
class GenerationReport:
    """
    Comprehensive report produced by ``ModelGenerator.generate()``.

    Contains timing information, file counts, per-class outcomes and any
    errors encountered.
    """

    success: bool = False
    output_directory: str = ""
    output_format: str = ""

    # Metrics
    total_classes: int = 0
    total_models: int = 0
    total_files: int = 0
    total_bytes: int = 0
    total_lines: int = 0
    total_elapsed_seconds: float = 0.0

    # Sub-reports
    step_metrics: List[GenerationStepMetric] = field(default_factory=list)
    outcomes: List[ClassOutcome] = field(default_factory=list)
    input_errors: List[str] = field(default_factory=list)
    generation_errors: List[str] = field(default_factory=list)
    export_errors: List[str] = field(default_factory=list)

    def outcome_for(self, class_name: str) -> Optional[ClassOutcome]:
        for outcome in self.outcomes:
            if outcome.class_name == class_name:
                return outcome
        return None

    def summary(self) -> str:
        """Return a human-readable summary string."""
        lines: List[str] = []
        status: str = "✅ SUCCESS" if self.success else "❌ FAILED"
        lines.append(f"{'='*60}")
        lines.append("  ExtModelGen — Generation Report")
        lines.append(f"{'='*60}")
        lines.append(f"  Status:           {status}")
        lines.append(f"  Output:           {self.output_directory}")
        lines.append(f"  Format:           {self.output_format}")
        lines.append(f"  Classes:          {self.total_classes}")
        lines.append(f"  Models generated: {self.total_models}")
        lines.append(f"  Files written:    {self.total_files}")
        lines.append(f"  Total lines:      {self.total_lines:,}")
        lines.append(f"  Total bytes:      {self.total_bytes:,}")
        lines.append(f"  Total time:       {self.total_elapsed_seconds:.3f}s")
        lines.append(f"{'─'*60}")

        if self.step_metrics:
            lines.append("  Pipeline Steps:")
            for step in self.step_metrics:
                icon: str = "✓" if step.success else "✗"
                lines.append(
                    f"    {icon} {step.step_name:<28s} "
                    f"{step.elapsed_seconds:>7.3f}s  "
                    f"{step.detail}"
                )

        for title, errors in (
            ("Input Errors", self.input_errors),
            ("Generation Errors", self.generation_errors),
            ("Export Errors", self.export_errors),
        ):
            if errors:
                lines.append(f"{'─'*60}")
                lines.append(f"  {title} ({len(errors)}):")
                for err in errors:
                    lines.append(f"    ✗ {err}")

        kept: List[str] = [path for o in self.outcomes for path in o.kept]
        if kept:
            lines.append(f"{'─'*60}")
            lines.append(f"  Kept Existing Files ({len(kept)}):")
            for path in kept:
                lines.append(f"    ⊘ {path}")

        lines.append(f"{'='*60}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Descriptor loader helpers
# ---------------------------------------------------------------------------


def _load_json_file(path: Path) -> Dict[str, Any]:
    """Load and parse a JSON file. Raises ValueError on parse errors."""
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a JSON object at top level, got {type(data).__name__}."
        )
    return data


def _load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML file. Raises ValueError on parse errors."""
    try:
        data: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a YAML mapping at top level, got {type(data).__name__}."
        )
    return data


def load_descriptor_file(path: Path) -> Dict[str, Any]:
    """
    Load a descriptor file (JSON or YAML).

    Dispatches based on file extension.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file can't be parsed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Descriptor file not found: {path}")

    if not path.is_file():
        raise ValueError(f"Descriptor path is not a file: {path}")

    suffix: str = path.suffix.lower()

    if suffix in (".yaml", ".yml"):
        return _load_yaml_file(path)
    elif suffix == ".json":
        return _load_json_file(path)
    else:
        # YAML is a superset of JSON
        logger.info("Unknown extension '%s' — parsing as YAML.", suffix)
        return _load_yaml_file(path)


def parse_raw_descriptors(
    raw: Dict[str, Any],
) -> Tuple[List[ClassDescriptor], GenerationConfig]:
    """
    Parse a raw dictionary (from JSON/YAML) into validated Pydantic models.

    Expected top-level keys:
        - "classes": list of class descriptors
        - "config": generation settings (optional)

    Raises:
        ValueError: If required keys are missing or validation fails.
    """
    unknown: List[str] = sorted(set(raw) - {"classes", "config"})
    if unknown:
        raise ValueError(f"Unknown top-level key(s) in descriptor file: {unknown}.")

    classes_data: Any = raw.get("classes")
    if not isinstance(classes_data, list):
        raise ValueError("Expected top-level key 'classes' holding a list.")

    config_data: Any = raw.get("config") or {}
    if not raw.get("config"):
        logger.info("No generation config found in input — using defaults.")

    try:
        descriptors: List[ClassDescriptor] = [
            ClassDescriptor.model_validate(item) for item in classes_data
        ]
    except ValidationError as exc:
        raise ValueError(f"Descriptor validation failed: {exc}") from exc

    try:
        config: GenerationConfig = GenerationConfig.model_validate(config_data)
    except ValidationError as exc:
        raise ValueError(f"Config validation failed: {exc}") from exc

    return descriptors, config


# ---------------------------------------------------------------------------
# ModelGenerator — Master orchestrator
# ---------------------------------------------------------------------------


class ModelGenerator:
    """
    Master pipeline orchestrator.

    Usage::

        generator = ModelGenerator()

        # From a file
        report = generator.generate_from_file(Path("models.yaml"), Path("./out"))

        # From in-memory objects
        report = generator.generate(descriptors, config, Path("./out"))

        print(report.summary())

    The generator is reusable — create once, call generate() many times.
    """

    def __init__(self, *, write_files: bool = True) -> None:
        """
        Initialise the generator.

        Args:
            write_files: If False, render only (dry run); nothing is written.
        """
        self._write_files: bool = write_files
        logger.debug("ModelGenerator initialised: write_files=%s.", write_files)

    # -----------------------------------------------------------------
    # Public: single class
    # -----------------------------------------------------------------

    @staticmethod
    def render(descriptor: ClassDescriptor, config: GenerationConfig) -> Tuple[str, str]:
        """
        Assemble and render one class.

        Returns:
            Tuple of (model name, generated code).

        Raises:
            MetadataError, SerializationError: from the core.
        """
        model: ModelDefinition = build_model(descriptor, config)
        return model.name, generate_javascript(model, config)

    # -----------------------------------------------------------------
    # Public: generate from file
    # -----------------------------------------------------------------

    def generate_from_file(
        self,
        descriptor_path: Path,
        output_dir: Optional[Path] = None,
        *,
        config_overrides: Optional[Dict[str, Any]] = None,
    ) -> GenerationReport:
        """
        Full pipeline: load file → generate → export.

        Args:
            descriptor_path: Path to JSON/YAML descriptor file.
            output_dir: Output directory; defaults to ``config.output_dir``.
            config_overrides: Optional dict to override config values.
        """
        report: GenerationReport = GenerationReport()
        load_error: Optional[str] = None

        with Timer("load_descriptors") as t_load:
            try:
                raw_data: Dict[str, Any] = load_descriptor_file(descriptor_path)
                if config_overrides:
                    raw_data["config"] = {**(raw_data.get("config") or {}), **config_overrides}
                descriptors, config = parse_raw_descriptors(raw_data)
            except (FileNotFoundError, ValueError) as exc:
                load_error = str(exc)
                report.input_errors.append(load_error)
                logger.error("Failed to load %s: %s", descriptor_path, exc)

        report.step_metrics.append(GenerationStepMetric(
            step_name="Load Descriptors",
            success=load_error is None,
            elapsed_seconds=t_load.elapsed,
            detail=load_error or f"{len(descriptors)} classes from {descriptor_path.name}",
        ))
        if load_error is not None:
            return self._finalise_report(report, t_load.elapsed)

        logger.info(
            "Loaded %d class descriptor(s) from %s.", len(descriptors), descriptor_path
        )
        return self._run_pipeline(descriptors, config, output_dir, report, t_load.elapsed)

    # -----------------------------------------------------------------
    # Public: generate from in-memory objects
    # -----------------------------------------------------------------

    def generate(
        self,
        descriptors: Sequence[ClassDescriptor],
        config: GenerationConfig,
        output_dir: Optional[Path] = None,
    ) -> GenerationReport:
        """Full pipeline from pre-parsed descriptors and configuration."""
        return self._run_pipeline(descriptors, config, output_dir, GenerationReport(), 0.0)

    # -----------------------------------------------------------------
    # Internal: master pipeline
    # -----------------------------------------------------------------

    def _run_pipeline(
        self,
        descriptors: Sequence[ClassDescriptor],
        config: GenerationConfig,
        output_dir: Optional[Path],
        report: GenerationReport,
        elapsed_before: float,
    ) -> GenerationReport:
        pipeline_start: float = time.perf_counter()

        target_dir: Path = Path(output_dir) if output_dir is not None else Path(config.output_dir)
        report.output_directory = str(target_dir.resolve())
        report.output_format = config.output_format
        report.total_classes = len(descriptors)

        rendered: List[ClassOutcome] = self._step_generate(descriptors, config, report)

        if self._write_files and rendered:
            self._step_export(rendered, config, target_dir, report)

        total_elapsed: float = elapsed_before + time.perf_counter() - pipeline_start
        return self._finalise_report(report, total_elapsed)

    # -----------------------------------------------------------------
    # Pipeline step: Model generation
    # -----------------------------------------------------------------

    def _step_generate(
        self,
        descriptors: Sequence[ClassDescriptor],
        config: GenerationConfig,
        report: GenerationReport,
    ) -> List[ClassOutcome]:
        """Render every class; a failing class does not stop the others."""
        rendered: List[ClassOutcome] = []

        with Timer("model_generation") as t:
            for descriptor in descriptors:
                outcome = ClassOutcome(class_name=descriptor.simple_name)
                report.outcomes.append(outcome)
                try:
                    outcome.model_name, outcome.code = self.render(descriptor, config)
                except (ExtModelGenError, ValueError) as exc:
                    outcome.error = f"{descriptor.simple_name}: {type(exc).__name__}: {exc}"
                    report.generation_errors.append(outcome.error)
                    logger.error("Generation failed for %s: %s", descriptor.simple_name, exc)
                    continue

                outcome.success = True
                rendered.append(outcome)
                logger.debug("Rendered %s as '%s'.", descriptor.simple_name, outcome.model_name)

        report.total_models = len(rendered)
        report.step_metrics.append(GenerationStepMetric(
            step_name="Model Generation",
            success=not report.generation_errors,
            elapsed_seconds=t.elapsed,
            detail=f"{len(rendered)}/{len(descriptors)} classes",
        ))
        logger.info(
            "Model generation complete: %d/%d classes in %.3fs.",
            len(rendered),
            len(descriptors),
            t.elapsed,
        )
        return rendered

    # -----------------------------------------------------------------
    # Pipeline step: Export
    # -----------------------------------------------------------------

    def _step_export(
        self,
        rendered: Sequence[ClassOutcome],
        config: GenerationConfig,
        output_dir: Path,
        report: GenerationReport,
    ) -> None:
        """Write artifacts of every rendered class."""
        exporter: ArtifactExporter = ArtifactExporter(config, output_dir)

        with Timer("export") as t:
            for outcome in rendered:
                try:
                    result: ExportResult = exporter.export(outcome.model_name, outcome.code)
                except ResourceError as exc:
                    outcome.success = False
                    outcome.error = f"{outcome.class_name}: {exc}"
                    report.export_errors.append(outcome.error)
                    logger.error("Export failed for %s: %s", outcome.class_name, exc)
                    continue

                outcome.files = [r.relative_path for r in result.written]
                outcome.kept = list(result.skipped)
                report.total_files += len(result.written)
                report.total_bytes += result.total_bytes
                report.total_lines += result.total_lines

        report.step_metrics.append(GenerationStepMetric(
            step_name="Export to Filesystem",
            success=not report.export_errors,
            elapsed_seconds=t.elapsed,
            detail=f"{report.total_files} files, {report.total_bytes:,} bytes",
        ))

        if report.export_errors:
            logger.error(
                "Export finished with %d error(s) in %.3fs.",
                len(report.export_errors),
                t.elapsed,
            )
        else:
            logger.info(
                "Export complete: %d files to %s in %.3fs.",
                report.total_files,
                exporter.output_dir,
                t.elapsed,
            )

    # -----------------------------------------------------------------
    # Internal: finalise report
    # -----------------------------------------------------------------

    def _finalise_report(
        self,
        report: GenerationReport,
        total_elapsed: float,
    ) -> GenerationReport:
        """Set final status and timing on the report."""
        report.total_elapsed_seconds = total_elapsed
        report.success = not (
            report.input_errors or report.generation_errors or report.export_errors
        )
        return report


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ModelGenerator",
    "GenerationReport",
    "GenerationStepMetric",
    "ClassOutcome",
    "load_descriptor_file",
    "parse_raw_descriptors",
]

logger.debug("extmodelgen.generator loaded.")
