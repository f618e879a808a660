"""Tests for the dry-run preview (kmpgen.scaffolder.preview)."""

from __future__ import annotations

from pathlib import Path

import pytest

from kmpgen.config import Settings
from kmpgen.parser.models import FileEntry, FileTree, TemplateDefinition
from kmpgen.scaffolder.configuration import create_configuration
from kmpgen.scaffolder.generator import GenerationEngine
from kmpgen.scaffolder.preview import PreviewEngine


pytestmark = pytest.mark.unit


def _snapshot(root: Path) -> dict[str, bytes | None]:
    return {
        p.relative_to(root).as_posix(): (p.read_bytes() if p.is_file() else None)
        for p in root.rglob("*")
    }


class TestPreview:
    def test_payments_scenario(self, payments_template, tmp_path):
        target = tmp_path / "proj" / "modules"
        config = create_configuration(payments_template, {"moduleName": "payments"}, target)

        preview = PreviewEngine(Settings(project_root=tmp_path / "proj")).preview(config)

        assert [(d.path, d.level) for d in preview.directories] == [("payments/src", 1)]
        assert [(f.path, f.size, f.level) for f in preview.files] == [
            ("payments/README.md", len("# payments"), 1)
        ]
        assert preview.manifest_changes == []
        assert not (tmp_path / "proj").exists()

    def test_root_level_directory_is_level_zero(self, module_template, settings, project_dir):
        config = create_configuration(module_template, {"moduleName": "core"}, project_dir)
        preview = PreviewEngine(settings).preview(config)
        assert preview.directories[0].path == "core"
        assert preview.directories[0].level == 0
        assert preview.directories[1].path == "core/src/main/kotlin/com/example"
        assert preview.directories[1].level == 5

    def test_no_filesystem_mutation(self, module_template, settings, project_dir):
        before = _snapshot(project_dir)
        config = create_configuration(module_template, {"moduleName": "core"}, project_dir / "modules")
        PreviewEngine(settings).preview(config)
        assert _snapshot(project_dir) == before

    def test_manifest_lines(self, module_template, settings, project_dir):
        config = create_configuration(module_template, {"moduleName": "core"}, project_dir / "modules")
        preview = PreviewEngine(settings).preview(config)
        assert preview.manifest_changes == [
            'Add to settings.gradle.kts: include(":modules:core")'
        ]

    def test_manifest_line_for_existing_entry(self, module_template, settings, project_dir):
        (project_dir / "settings.gradle.kts").write_text('include(":modules:core")\n')
        config = create_configuration(module_template, {"moduleName": "core"}, project_dir / "modules")
        preview = PreviewEngine(settings).preview(config)
        assert preview.manifest_changes == [
            'Already included in settings.gradle.kts: include(":modules:core")'
        ]

    def test_manifest_line_without_manifest(self, module_template, tmp_path):
        config = create_configuration(module_template, {"moduleName": "core"}, tmp_path)
        preview = PreviewEngine(Settings(project_root=tmp_path)).preview(config)
        assert preview.manifest_changes == [
            'Add to settings.gradle(.kts): include(":core")'
        ]

    def test_missing_variables_and_validation(self, payments_template, tmp_path):
        config = create_configuration(payments_template, {}, tmp_path)
        preview = PreviewEngine(Settings(project_root=tmp_path)).preview(config)
        assert preview.missing_variables == ["moduleName"]
        assert preview.validation_errors == ["Module Name is required"]
        assert preview.files[0].path == "${moduleName}/README.md"

    async def test_preview_matches_generation(self, module_template, settings, project_dir):
        target = project_dir / "modules"
        config = create_configuration(
            module_template, {"moduleName": "core", "packageName": "io.shop"}, target
        )
        preview = PreviewEngine(settings).preview(config)

        result = await GenerationEngine(settings).generate(config)

        assert [target / f.path for f in preview.files] == result.generated_files
        for f in preview.files:
            assert len((target / f.path).read_text()) == f.size
        for d in preview.directories:
            assert (target / d.path).is_dir()
        manifest = (project_dir / "settings.gradle.kts").read_text()
        for change in preview.manifest_changes:
            assert change.split(": ", 1)[1] in manifest

    def test_rejected_paths_reported(self, payments_template, tmp_path):
        tree = FileTree(
            directories=payments_template.file_tree.directories,
            files=[*payments_template.file_tree.files, FileEntry(path="${d}/x.txt", content="x")],
        )
        template = payments_template.model_copy(update={"file_tree": tree})
        config = create_configuration(template, {"moduleName": "payments", "d": ".."}, tmp_path / "m")

        preview = PreviewEngine(Settings(project_root=tmp_path)).preview(config)

        assert [f.path for f in preview.files] == ["payments/README.md"]
        assert len(preview.rejected) == 1
        assert "leaves the target directory" in preview.rejected[0]

    async def test_rejected_paths_match_generation(self, payments_template, tmp_path):
        tree = FileTree(
            directories=payments_template.file_tree.directories,
            files=[*payments_template.file_tree.files, FileEntry(path="${d}/x.txt", content="x")],
        )
        template = payments_template.model_copy(update={"file_tree": tree})
        target = tmp_path / "m"
        config = create_configuration(template, {"moduleName": "payments", "d": ".."}, target)

        preview = PreviewEngine(Settings(project_root=tmp_path)).preview(config)
        result = await GenerationEngine(Settings(project_root=tmp_path)).generate(config)

        assert [target / f.path for f in preview.files] == result.generated_files
        assert preview.rejected == result.warnings
        assert not (tmp_path / "x.txt").exists()

    def test_escaping_marker_has_no_manifest_line(self, settings, project_dir):
        template = TemplateDefinition(
            id="t",
            name="t",
            file_tree=FileTree(files=[FileEntry(path="${up}/x/build.gradle.kts", content="")]),
            module_markers=["${up}/x/build.gradle.kts"],
        )
        config = create_configuration(template, {"up": ".."}, project_dir / "modules")

        preview = PreviewEngine(settings).preview(config)

        assert preview.manifest_changes == []
        assert preview.files == []
        assert len(preview.rejected) == 1
