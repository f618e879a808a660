"""Shared pytest fixtures for the KMP Module Generator test suite.

Provides reusable fixtures for:
- Temporary Gradle projects with and without a settings file
- Template folders written to disk
- Parsed template definitions built in memory
"""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from kmpgen.config import Settings
from kmpgen.parser.models import (
    DirectoryEntry,
    FileEntry,
    FileTree,
    ParameterSpec,
    ParameterType,
    TemplateDefinition,
)
from kmpgen.parser.validators import get_validator


# ---------------------------------------------------------------------------
# Template sources
# ---------------------------------------------------------------------------

FEATURE_TEMPLATE_XML = textwrap.dedent("""\
    <?xml version="1.0"?>
    <template>
        <id>feature</id>
        <name>Feature Module</name>
        <description>KMP feature with api and impl submodules</description>

        <parameters>
            <parameter name="moduleName">
                <displayName>Module Name</displayName>
                <description>Name of the feature</description>
                <type>TEXT</type>
                <required>true</required>
                <validator>module-name</validator>
            </parameter>
            <parameter name="packageName">
                <displayName>Package Name</displayName>
                <type>PACKAGE</type>
                <default>com.example</default>
            </parameter>
            <parameter name="platform">
                <displayName>Platform</displayName>
                <type>DROPDOWN</type>
                <options>android, ios, ,desktop</options>
                <required>false</required>
            </parameter>
        </parameters>
    </template>
""")


def write_template(folder: Path, xml: str, files: dict[str, str] | None = None) -> Path:
    """Create a template folder with *xml* as descriptor and *files* under ``root/``."""
    folder.mkdir(parents=True, exist_ok=True)
    (folder / "template.xml").write_text(xml, encoding="utf-8")
    root = folder / "root"
    root.mkdir(exist_ok=True)
    for rel, content in (files or {}).items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return folder


# ---------------------------------------------------------------------------
# Projects & settings
# ---------------------------------------------------------------------------

@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A Gradle project root with an empty-ish ``settings.gradle.kts``."""
    root = tmp_path / "proj"
    root.mkdir()
    (root / "settings.gradle.kts").write_text(
        'rootProject.name = "demo"\n', encoding="utf-8"
    )
    yield root


@pytest.fixture
def settings(project_dir: Path) -> Settings:
    return Settings(project_root=project_dir)


@pytest.fixture
def template_folder(settings: Settings) -> Path:
    """The default template folder of ``project_dir``, populated with a feature template."""
    folder = settings.ensure_template_folder()
    write_template(
        folder / "feature",
        FEATURE_TEMPLATE_XML,
        {
            "${moduleName}/api/build.gradle.kts.ftl": 'plugins { kotlin("multiplatform") }\n',
            "${moduleName}/impl/build.gradle.kts.ftl": 'plugins { kotlin("multiplatform") }\n',
            "${moduleName}/impl/src/commonMain/kotlin/${packageNamePath}/Module.kt.ftl": (
                "package ${packageName}\n\nobject {{moduleName}}Module\n"
            ),
            "${moduleName}/README.md": "not a template file\n",
        },
    )
    yield folder


# ---------------------------------------------------------------------------
# In-memory templates
# ---------------------------------------------------------------------------

@pytest.fixture
def payments_template() -> TemplateDefinition:
    """One directory, one file, a required ``moduleName`` and no markers."""
    return TemplateDefinition(
        id="simple",
        name="Simple",
        parameters=[
            ParameterSpec(
                name="moduleName",
                display_name="Module Name",
                type=ParameterType.TEXT,
                validator_name="module-name",
                validator=get_validator("module-name"),
            ),
        ],
        file_tree=FileTree(
            directories=[DirectoryEntry(path="${moduleName}/src")],
            files=[FileEntry(path="${moduleName}/README.md", content="# ${moduleName}")],
        ),
    )


@pytest.fixture
def module_template() -> TemplateDefinition:
    """A template whose module lives in ``${moduleName}`` with a build-file marker."""
    return TemplateDefinition(
        id="module",
        name="Module",
        parameters=[
            ParameterSpec(name="moduleName", display_name="Module Name"),
            ParameterSpec(
                name="packageName",
                type=ParameterType.PACKAGE,
                default_value="com.example",
                validator_name="package-name",
                validator=get_validator("package-name"),
            ),
        ],
        file_tree=FileTree(
            directories=[
                DirectoryEntry(path="${moduleName}"),
                DirectoryEntry(path="${moduleName}/src/main/kotlin/${packageNamePath}"),
            ],
            files=[
                FileEntry(
                    path="${moduleName}/build.gradle.kts",
                    content='plugins { kotlin("jvm") }\n',
                ),
                FileEntry(
                    path="${moduleName}/src/main/kotlin/${packageNamePath}/Main.kt",
                    content="package ${packageName}\n",
                ),
            ],
        ),
        module_markers=["${moduleName}/build.gradle.kts"],
    )


@pytest.fixture
def feature_xml() -> str:
    """Descriptor of the ``feature`` template."""
    return FEATURE_TEMPLATE_XML


@pytest.fixture
def make_template():
    """Factory writing a template folder; see :func:`write_template`."""
    return write_template
