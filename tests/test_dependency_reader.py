"""Manifest parsing and dependency -> anchor mapping."""

import json

import pytest

from smartui_migrator.dependency_reader import (
    DependencyReader,
    normalize_python_name,
    parse_package_json,
    parse_pom_xml,
    parse_requirements,
)
from smartui_migrator.errors import MultiplePlatformsDetectedError
from smartui_migrator.file_locator import FileLocator
from smartui_migrator.models import Framework, Language, Platform

POM_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
  <modelVersion>4.0.0</modelVersion>
  <dependencies>
{deps}
  </dependencies>
</project>
"""


def pom(*coordinates):
    deps = "\n".join(
        f"    <dependency><groupId>{group}</groupId><artifactId>{artifact}</artifactId></dependency>"
        for group, artifact in coordinates
    )
    return POM_TEMPLATE.format(deps=deps)


def package_json(dependencies=None, dev_dependencies=None):
    return json.dumps({"name": "demo", "dependencies": dependencies or {}, "devDependencies": dev_dependencies or {}})


@pytest.fixture
def reader_for(quiet_logger):
    def _reader(root):
        return DependencyReader(FileLocator(root, logger=quiet_logger), logger=quiet_logger)

    return _reader


class TestParsers:
    def test_package_json_reads_dependencies_and_dev_dependencies(self):
        text = json.dumps(
            {
                "dependencies": {"react": "^18"},
                "devDependencies": {"@percy/cypress": "^3"},
                "peerDependencies": {"@applitools/eyes-cypress": "^3"},
            }
        )
        assert parse_package_json(text) == {"react", "@percy/cypress"}

    def test_package_json_rejects_non_object(self):
        with pytest.raises(ValueError):
            parse_package_json("[1, 2]")

    def test_pom_strips_namespace_and_reads_dependency_management(self):
        text = """<project xmlns="http://maven.apache.org/POM/4.0.0">
          <dependencies>
            <dependency><groupId>com.applitools</groupId><artifactId>eyes-selenium-java5</artifactId></dependency>
            <dependency><groupId>org.example</groupId></dependency>
          </dependencies>
          <dependencyManagement>
            <dependencies>
              <dependency><groupId>io.appium</groupId><artifactId>java-client</artifactId></dependency>
            </dependencies>
          </dependencyManagement>
        </project>"""
        assert parse_pom_xml(text) == {"com.applitools:eyes-selenium-java5", "io.appium:java-client"}

    def test_pom_rejects_other_root_elements(self):
        with pytest.raises(ValueError):
            parse_pom_xml("<settings/>")

    def test_requirements_normalizes_names_and_skips_noise(self):
        text = "\n".join(
            [
                "# visual tests",
                "-r base.txt",
                "--index-url https://example.invalid/simple",
                "",
                "saucelabs_visual==0.1.2",
                "Appium-Python-Client>=2.0 ; python_version > '3.8'",
                "eyes-selenium[extra]~=5.0  # pinned",
            ]
        )
        assert parse_requirements(text) == {"saucelabs-visual", "appium-python-client", "eyes-selenium"}

    def test_normalize_python_name(self):
        assert normalize_python_name("Saucelabs_Visual") == "saucelabs-visual"
        assert normalize_python_name("percy.appium__app") == "percy-appium-app"


class TestPackageJsonAnchor:
    def test_single_dependency_gives_complete_anchor(self, make_project, reader_for):
        root = make_project({"package.json": package_json(dev_dependencies={"@percy/cypress": "^3.1.0"})})

        anchor = reader_for(root).anchor_for("package.json")

        assert anchor.platform is Platform.PERCY
        assert anchor.framework is Framework.CYPRESS
        assert anchor.language is Language.JAVASCRIPT_TYPESCRIPT
        assert anchor.magic_strings == ("percySnapshot", "percyScreenshot")
        assert anchor.evidence.source == "package.json"
        assert anchor.evidence.match == "@percy/cypress"

    def test_competing_platforms_raise_immediately(self, make_project, reader_for):
        root = make_project(
            {"package.json": package_json({"@percy/cypress": "^1.0.0", "@applitools/eyes-cypress": "^3.0.0"})}
        )

        with pytest.raises(MultiplePlatformsDetectedError) as excinfo:
            reader_for(root).anchor_for("package.json")

        assert excinfo.value.platforms == ["Percy", "Applitools"]
        assert excinfo.value.source == "package.json"
        assert excinfo.value.matches == ["Percy (@percy/cypress)", "Applitools (@applitools/eyes-cypress)"]

    def test_two_frameworks_of_one_platform_also_conflict(self, make_project, reader_for):
        root = make_project({"package.json": package_json({"@percy/cypress": "1", "@percy/playwright": "1"})})

        with pytest.raises(MultiplePlatformsDetectedError):
            reader_for(root).anchor_for("package.json")

    def test_unrelated_dependencies_give_no_anchor(self, make_project, reader_for):
        root = make_project({"package.json": package_json({"cypress": "^13", "@percy/cli": "^1"})})

        assert reader_for(root).anchor_for("package.json").is_unknown

    @pytest.mark.parametrize("content", ["{not json", "", b"\xff\xfe\x00garbage"])
    def test_malformed_manifest_is_not_fatal(self, make_project, reader_for, content):
        root = make_project({"package.json": content})

        assert reader_for(root).anchor_for("package.json").is_unknown

    def test_missing_manifest_is_not_fatal(self, tmp_path, reader_for):
        assert reader_for(tmp_path).anchor_for("package.json").is_unknown

    def test_unreadable_manifest_is_not_fatal(self, make_project, reader_for):
        root = make_project({"package.json/README.md": "a directory, not a manifest"})
        (root / "pom.xml").symlink_to(root / "missing-pom.xml")

        reader = reader_for(root)

        assert reader.read_dependencies("package.json") is None
        assert reader.read_dependencies("pom.xml") is None
        assert reader.anchor_for("package.json").is_unknown


class TestPomAnchor:
    def test_eyes_selenium_any_group(self, make_project, reader_for):
        root = make_project({"pom.xml": pom(("com.applitools", "eyes-selenium-java5"))})

        anchor = reader_for(root).anchor_for("pom.xml")

        assert (anchor.platform, anchor.framework, anchor.language) == (
            Platform.APPLITOOLS,
            Framework.SELENIUM,
            Language.JAVA,
        )

    def test_sauce_client_with_appium_is_appium(self, make_project, reader_for):
        root = make_project({"pom.xml": pom(("com.saucelabs.visual", "java-client"), ("io.appium", "java-client"))})

        anchor = reader_for(root).anchor_for("pom.xml")

        assert anchor.platform is Platform.SAUCE_LABS_VISUAL
        assert anchor.framework is Framework.APPIUM

    def test_sauce_client_alone_is_selenium(self, make_project, reader_for):
        root = make_project({"pom.xml": pom(("com.saucelabs.visual", "java-client"))})

        assert reader_for(root).anchor_for("pom.xml").framework is Framework.SELENIUM

    def test_group_must_match_when_given(self, make_project, reader_for):
        root = make_project({"pom.xml": pom(("org.other", "java-client"))})

        assert reader_for(root).anchor_for("pom.xml").is_unknown

    def test_malformed_pom_is_not_fatal(self, make_project, reader_for):
        root = make_project({"pom.xml": "<project><dependencies>"})

        assert reader_for(root).anchor_for("pom.xml").is_unknown


class TestRequirementsAnchor:
    def test_sauce_with_robot_files_is_robot_framework(self, make_project, reader_for):
        root = make_project(
            {"requirements.txt": "saucelabs_visual==0.1\n", "tests/visual.robot": "*** Test Cases ***\n"}
        )

        anchor = reader_for(root).anchor_for("requirements.txt")

        assert anchor.framework is Framework.ROBOT_FRAMEWORK
        assert anchor.language is Language.PYTHON

    def test_sauce_without_robot_files_is_selenium(self, make_project, reader_for):
        root = make_project({"requirements.txt": "saucelabs-visual\n"})

        assert reader_for(root).anchor_for("requirements.txt").framework is Framework.SELENIUM

    def test_appium_companion_wins_over_robot_files(self, make_project, reader_for):
        root = make_project(
            {
                "requirements.txt": "saucelabs_visual\nAppium-Python-Client==3.1\n",
                "tests/visual.robot": "*** Test Cases ***\n",
            }
        )

        assert reader_for(root).anchor_for("requirements.txt").framework is Framework.APPIUM

    def test_percy_appium(self, make_project, reader_for):
        root = make_project({"requirements.txt": "percy-appium-app==2.0\nAppium-Python-Client\n"})

        anchor = reader_for(root).anchor_for("requirements.txt")

        assert anchor.platform is Platform.PERCY
        assert anchor.framework is Framework.APPIUM

    def test_two_platforms_in_requirements_conflict(self, make_project, reader_for):
        root = make_project({"requirements.txt": "eyes-selenium\nsaucelabs_visual\n"})

        with pytest.raises(MultiplePlatformsDetectedError) as excinfo:
            reader_for(root).anchor_for("requirements.txt")

        assert excinfo.value.source == "requirements.txt"


def test_read_anchors_collects_every_ecosystem(make_project, reader_for, run):
    root = make_project(
        {
            "package.json": package_json({"@percy/playwright": "1"}),
            "pom.xml": pom(("com.applitools", "eyes-selenium-java5")),
            "requirements.txt": "requests\n",
        }
    )

    anchors = run(reader_for(root).read_anchors())

    assert [anchor.platform for anchor in anchors] == [Platform.PERCY, Platform.APPLITOOLS]
