"""
tests/conftest.py
Shared fixtures for the extmodelgen test suite.

No external mocking libraries are used; real file I/O is performed
inside temporary directories managed by pytest's tmp_path fixtures.
"""

from __future__ import annotations

import copy
import json
import logging
import pathlib
from typing import Any, Callable, Dict, Iterator, List

import pytest
import yaml

from extmodelgen.descriptors import ClassDescriptor
from extmodelgen.models import GenerationConfig


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

ROOT_DIR: pathlib.Path = pathlib.Path(__file__).resolve().parent.parent
MODELS_EXAMPLE_PATH: pathlib.Path = ROOT_DIR / "models_example.yaml"


# ---------------------------------------------------------------------------
# Logging isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_extmodelgen_logger() -> Iterator[None]:
    """The CLI detaches the package logger from root; undo that after each test."""
    yield
    package_logger: logging.Logger = logging.getLogger("extmodelgen")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


# ---------------------------------------------------------------------------
# Raw descriptor data fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def raw_models_dict() -> Dict[str, Any]:
    """Load the reference models_example.yaml once per session and return as dict."""
    assert MODELS_EXAMPLE_PATH.exists(), (
        f"Reference descriptors not found at {MODELS_EXAMPLE_PATH}. "
        "Make sure models_example.yaml is in the project root."
    )
    with open(MODELS_EXAMPLE_PATH, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    assert isinstance(data, dict), "Top-level YAML must be a mapping."
    return data


@pytest.fixture()
def models_dict(raw_models_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Return a deep copy so each test can mutate freely."""
    return copy.deepcopy(raw_models_dict)


@pytest.fixture()
def models_yaml_path(models_dict: Dict[str, Any], tmp_path: pathlib.Path) -> pathlib.Path:
    """Write the descriptor dict to a temporary YAML file and return its path."""
    path = tmp_path / "models.yaml"
    with open(path, "w", encoding="utf-8") as fh:
        yaml.dump(models_dict, fh, default_flow_style=False, allow_unicode=True)
    return path


@pytest.fixture()
def models_json_path(models_dict: Dict[str, Any], tmp_path: pathlib.Path) -> pathlib.Path:
    """Write the descriptor dict to a temporary JSON file and return its path."""
    path = tmp_path / "models.json"
    path.write_text(json.dumps(models_dict, indent=2), encoding="utf-8")
    return path


@pytest.fixture()
def output_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    """Empty directory for generated artifacts."""
    path = tmp_path / "out"
    path.mkdir()
    return path


# ---------------------------------------------------------------------------
# Model object fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def config() -> GenerationConfig:
    """Default configuration with LF line endings for stable assertions."""
    return GenerationConfig(line_ending="lf")


@pytest.fixture()
def make_config() -> Callable[..., GenerationConfig]:
    """Factory for configurations on top of the LF default."""

    def _make(**overrides: Any) -> GenerationConfig:
        values: Dict[str, Any] = {"line_ending": "lf"}
        values.update(overrides)
        return GenerationConfig(**values)

    return _make


@pytest.fixture()
def make_descriptor() -> Callable[..., ClassDescriptor]:
    """Factory building a ``ClassDescriptor`` from plain dicts."""

    def _make(
        simple_name: str = "User",
        fields: List[Dict[str, Any]] | None = None,
        **extra: Any,
    ) -> ClassDescriptor:
        data: Dict[str, Any] = {"simple_name": simple_name, "fields": fields or []}
        data.update(extra)
        return ClassDescriptor.model_validate(data)

    return _make
