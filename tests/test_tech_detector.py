"""Framework scoring, language precedence and cold-scan platform choice."""

import pytest

from smartui_migrator.errors import PlatformNotDetectedError
from smartui_migrator.models import Framework, Language, Platform
from smartui_migrator.tech_detector import (
    detect_framework,
    detect_language,
    detect_platform,
    score_frameworks,
    score_platforms,
)


class TestDetectFramework:
    def test_repeated_matches_accumulate(self):
        content = "\n".join(f"cy.visit('/page/{i}')" for i in range(5)) + "\ntest('works', () => {})\n"

        scores, _ = score_frameworks({"spec.js": content})
        framework, evidence = detect_framework({"spec.js": content})

        assert scores[Framework.CYPRESS] == pytest.approx(4.5)
        assert scores[Framework.PLAYWRIGHT] == pytest.approx(0.5)
        assert framework is Framework.CYPRESS
        assert evidence.files == ("spec.js",)
        assert evidence.signatures[0].startswith(r"cy\.(visit")

    def test_scores_sum_across_files(self):
        contents = {
            "a.spec.ts": "await page.goto('/a')",
            "b.spec.ts": "await page.goto('/b')\nawait page.click('#go')",
        }

        scores, evidence = score_frameworks(contents)

        assert scores[Framework.PLAYWRIGHT] == pytest.approx(2.7)
        assert evidence[Framework.PLAYWRIGHT].files == ("a.spec.ts", "b.spec.ts")

    def test_nothing_matched_defaults_to_selenium(self):
        framework, evidence = detect_framework({"notes.py": "percy_snapshot(driver, 'home')"})

        assert framework is Framework.SELENIUM
        assert evidence.files == ()

    def test_empty_input_defaults_to_selenium(self):
        assert detect_framework({})[0] is Framework.SELENIUM

    def test_tie_goes_to_first_declared_framework(self):
        content = "Cypress.Commands.add('login', () => {})\nOpen Browser    https://example.com\n"

        scores, _ = score_frameworks({"mixed.js": content})

        assert scores[Framework.CYPRESS] == scores[Framework.ROBOT_FRAMEWORK]
        assert detect_framework({"mixed.js": content})[0] is Framework.CYPRESS

    def test_tie_between_robot_and_appium(self):
        content = "Open Browser\ndriver.findElementByXPath('//a')\n"

        assert detect_framework({"x.robot": content})[0] is Framework.ROBOT_FRAMEWORK

    def test_identifier_boundaries(self):
        scores, _ = score_frameworks({"a.js": "submit('x'); latest('y')"})

        assert scores[Framework.CYPRESS] == 0
        assert scores[Framework.PLAYWRIGHT] == 0


class TestDetectLanguage:
    def test_java_wins_over_everything(self):
        assert detect_language(["a.py", "b.js", "src/VisualTest.java"]) is Language.JAVA

    @pytest.mark.parametrize("paths", [["tests/test_home.py"], ["tests/home.robot", "a.ts"]])
    def test_python_before_javascript(self, paths):
        assert detect_language(paths) is Language.PYTHON

    @pytest.mark.parametrize("paths", [["a.ts"], ["a.jsx", "b.tsx"], []])
    def test_javascript_is_the_default(self, paths):
        assert detect_language(paths) is Language.JAVASCRIPT_TYPESCRIPT


class TestDetectPlatform:
    def test_counts_distinct_strings_per_file(self):
        contents = {
            "a.js": "eyes.open(driver); eyes.check('a'); eyes.check('b');",
            "b.py": "take a snapshot",
        }

        scores = score_platforms(contents)

        assert scores[Platform.APPLITOOLS] == 2
        assert scores[Platform.SAUCE_LABS_VISUAL] == 1
        assert detect_platform(contents) is Platform.APPLITOOLS

    def test_tie_goes_to_percy_first(self):
        assert detect_platform({"a.js": "percySnapshot(); eyes.open(driver);"}) is Platform.PERCY

    def test_no_match_raises(self):
        with pytest.raises(PlatformNotDetectedError):
            detect_platform({"a.js": "console.log('hello')"})
