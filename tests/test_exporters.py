"""
tests/test_exporters.py
Unit tests for extmodelgen.exporters (artifact naming and writing).
"""

from __future__ import annotations

import hashlib
import pathlib
from typing import Callable, Tuple

import pytest

from extmodelgen.errors import ResourceError
from extmodelgen.exporters import ArtifactExporter, plan_artifacts, resource_location
from extmodelgen.models import GenerationConfig

CODE: str = 'Ext.define("App.model.User",{extend:"Ext.data.Model",fields:["name"]});'


class TestResourceLocation:
    """Tests for resource_location()."""

    @pytest.mark.parametrize(
        "model_name, expected",
        [
            ("App.model.User", ("model", "User")),
            ("App.model.sales.Order", ("model/sales", "Order")),
            ("App.User", ("", "User")),
            ("User", ("", "User")),
        ],
    )
    def test_locations(self, model_name: str, expected: Tuple[str, str]) -> None:
        assert resource_location(model_name) == expected


class TestPlanArtifacts:
    """Tests for plan_artifacts()."""

    def test_single_artifact(self, config: GenerationConfig) -> None:
        artifacts = plan_artifacts("App.model.User", CODE, config)
        assert [(a.relative_path, a.create_only) for a in artifacts] == [
            ("model/User.js", False),
        ]
        assert artifacts[0].content == CODE

    def test_base_and_subclass(self, make_config: Callable[..., GenerationConfig]) -> None:
        artifacts = plan_artifacts(
            "App.model.User", CODE, make_config(create_base_and_subclass=True)
        )
        assert [(a.relative_path, a.create_only) for a in artifacts] == [
            ("model/UserBase.js", False),
            ("model/User.js", True),
        ]
        assert artifacts[0].content.startswith('Ext.define("App.model.UserBase",')
        assert artifacts[1].content == (
            'Ext.define("App.model.User",{extend:"App.model.UserBase"});'
        )


class TestArtifactExporter:
    """Tests for ArtifactExporter.export()."""

    def test_writes_file(self, config: GenerationConfig, output_dir: pathlib.Path) -> None:
        result = ArtifactExporter(config, output_dir).export("App.model.User", CODE)
        target = output_dir / "model" / "User.js"
        assert target.read_text(encoding="utf-8") == CODE
        assert result.skipped == []
        assert len(result.written) == 1
        record = result.written[0]
        assert record.relative_path == "model/User.js"
        assert record.size_bytes == len(CODE.encode("utf-8"))
        assert record.line_count == 1
        assert record.sha256 == hashlib.sha256(CODE.encode("utf-8")).hexdigest()
        assert result.total_bytes == record.size_bytes

    def test_overwrites_existing_file(
        self, config: GenerationConfig, output_dir: pathlib.Path
    ) -> None:
        target = output_dir / "model" / "User.js"
        target.parent.mkdir(parents=True)
        target.write_text("old", encoding="utf-8")
        ArtifactExporter(config, output_dir).export("App.model.User", CODE)
        assert target.read_text(encoding="utf-8") == CODE

    def test_subclass_is_created_once(
        self,
        make_config: Callable[..., GenerationConfig],
        output_dir: pathlib.Path,
    ) -> None:
        exporter = ArtifactExporter(make_config(create_base_and_subclass=True), output_dir)
        first = exporter.export("App.model.User", CODE)
        assert [r.relative_path for r in first.written] == [
            "model/UserBase.js",
            "model/User.js",
        ]

        subclass = output_dir / "model" / "User.js"
        subclass.write_text("// customised", encoding="utf-8")

        second = exporter.export("App.model.User", CODE.replace("name", "email"))
        assert [r.relative_path for r in second.written] == ["model/UserBase.js"]
        assert second.skipped == ["model/User.js"]
        assert subclass.read_text(encoding="utf-8") == "// customised"
        assert '"email"' in (output_dir / "model" / "UserBase.js").read_text(encoding="utf-8")

    def test_unwritable_target_raises(
        self, config: GenerationConfig, tmp_path: pathlib.Path
    ) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        with pytest.raises(ResourceError) as exc_info:
            ArtifactExporter(config, blocker).export("App.model.User", CODE)
        assert exc_info.value.path is not None
        assert exc_info.value.path.endswith("User.js")
