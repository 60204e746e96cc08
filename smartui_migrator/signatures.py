"""Static detection tables: dependency identifiers, config names, magic strings
and weighted framework signatures.

Nothing here is derived from the scanned project. Order matters in several
tables and is relied on for deterministic tie-breaking.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Optional, Pattern, Tuple

from .models import Framework, Language, Platform

PACKAGE_JSON = "package.json"
POM_XML = "pom.xml"
REQUIREMENTS_TXT = "requirements.txt"
ECOSYSTEMS: Tuple[str, ...] = (PACKAGE_JSON, POM_XML, REQUIREMENTS_TXT)

# Declaration order doubles as the cold-scan tie-break order.
PLATFORM_MAGIC_STRINGS: Dict[Platform, Tuple[str, ...]] = {
    Platform.PERCY: (
        "percySnapshot",
        "percyScreenshot",
        "percy.capture",
        "percy.snapshot",
        "percy.screenshot",
        "@percy/cypress",
        "@percy/playwright",
        "@percy/storybook",
        # Framework calls that show up around Percy snapshots
        "cy.visit",
        "cy.get",
        "cy.click",
        "page.goto",
        "page.click",
        "page.fill",
        "export default",
        "export const",
        "title:",
    ),
    Platform.APPLITOOLS: (
        "eyes.check",
        "eyes.open",
        "eyes.close",
        "eyes.checkWindow",
        "eyes.checkElement",
        "@applitools/eyes",
        "eyes.selenium",
        "eyes.playwright",
    ),
    Platform.SAUCE_LABS_VISUAL: (
        "sauceVisualCheck",
        "sauceVisualSnapshot",
        "sauce.visual",
        "screener.snapshot",
        "screener.check",
        "saucelabs_visual",
        "SauceVisual",
        "check_page",
        "snapshot",
    ),
}

PERCY_JS = ("percySnapshot", "percyScreenshot")
PERCY_PY = ("percy_snapshot", "percy_screenshot", "percySnapshot")
PERCY_JAVA = ("percy.snapshot", "percy.screenshot", "new Percy(", "new AppPercy(")
EYES = ("eyes.check", "eyes.open", "eyes.close")
SAUCE_JS = ("sauceVisualCheck", "sauceVisualSnapshot")
SAUCE_PY = ("SauceVisual", "check_page", "snapshot", "saucelabs_visual")
SCREENER = ("screener.snapshot", "screener.check")
STORY_HINTS = ("export default", "export const", "title:")

# Config files name a platform but not a framework; only its API calls are searched.
CONFIG_ANCHOR_MAGIC_STRINGS: Dict[Platform, Tuple[str, ...]] = {
    Platform.PERCY: PERCY_JS,
    Platform.APPLITOOLS: EYES,
    Platform.SAUCE_LABS_VISUAL: SAUCE_JS,
}


@dataclass(frozen=True)
class DependencySignature:
    """One manifest identifier and what it tells us about the project.

    ``companion`` and ``requires_glob`` narrow a row: it only applies when the
    companion dependency is also declared, or when a file matching the glob
    exists. Rows sharing an identifier are tried in order; the first whose
    conditions hold wins.
    """

    ecosystem: str
    identifier: str
    platform: Platform
    framework: Framework
    language: Language
    magic_strings: Tuple[str, ...]
    companion: Optional[str] = None
    requires_glob: Optional[str] = None


_JS = Language.JAVASCRIPT_TYPESCRIPT
_APPIUM_PY = "appium-python-client"
_APPIUM_JAVA = "io.appium:java-client"

DEPENDENCY_SIGNATURES: Tuple[DependencySignature, ...] = (
    # package.json
    DependencySignature(PACKAGE_JSON, "@percy/cypress", Platform.PERCY, Framework.CYPRESS, _JS, PERCY_JS),
    DependencySignature(PACKAGE_JSON, "@percy/playwright", Platform.PERCY, Framework.PLAYWRIGHT, _JS, PERCY_JS),
    DependencySignature(
        PACKAGE_JSON, "@percy/storybook", Platform.PERCY, Framework.STORYBOOK, _JS, PERCY_JS + STORY_HINTS
    ),
    DependencySignature(
        PACKAGE_JSON, "@percy/selenium-webdriver", Platform.PERCY, Framework.SELENIUM, _JS, PERCY_JS
    ),
    DependencySignature(PACKAGE_JSON, "@applitools/eyes-cypress", Platform.APPLITOOLS, Framework.CYPRESS, _JS, EYES),
    DependencySignature(
        PACKAGE_JSON, "@applitools/eyes-playwright", Platform.APPLITOOLS, Framework.PLAYWRIGHT, _JS, EYES
    ),
    DependencySignature(
        PACKAGE_JSON, "@applitools/eyes-storybook", Platform.APPLITOOLS, Framework.STORYBOOK, _JS, EYES
    ),
    DependencySignature(
        PACKAGE_JSON, "@applitools/eyes-selenium", Platform.APPLITOOLS, Framework.SELENIUM, _JS, EYES
    ),
    DependencySignature(
        PACKAGE_JSON,
        "@saucelabs/cypress-visual-plugin",
        Platform.SAUCE_LABS_VISUAL,
        Framework.CYPRESS,
        _JS,
        SAUCE_JS,
    ),
    DependencySignature(
        PACKAGE_JSON, "screener-storybook", Platform.SAUCE_LABS_VISUAL, Framework.STORYBOOK, _JS, SCREENER
    ),
    # pom.xml, identifiers are groupId:artifactId ("*" matches any group)
    DependencySignature(
        POM_XML,
        "*:eyes-selenium-java5",
        Platform.APPLITOOLS,
        Framework.SELENIUM,
        Language.JAVA,
        EYES + ("new ChromeDriver", "By.id", "WebDriver"),
    ),
    DependencySignature(
        POM_XML, "com.applitools:eyes-appium-java5", Platform.APPLITOOLS, Framework.APPIUM, Language.JAVA, EYES
    ),
    DependencySignature(
        POM_XML, "io.percy:percy-appium-app", Platform.PERCY, Framework.APPIUM, Language.JAVA, PERCY_JAVA
    ),
    DependencySignature(
        POM_XML, "io.percy:percy-java-selenium", Platform.PERCY, Framework.SELENIUM, Language.JAVA, PERCY_JAVA
    ),
    DependencySignature(
        POM_XML,
        "com.saucelabs.visual:java-client",
        Platform.SAUCE_LABS_VISUAL,
        Framework.APPIUM,
        Language.JAVA,
        SAUCE_JS,
        companion=_APPIUM_JAVA,
    ),
    DependencySignature(
        POM_XML,
        "com.saucelabs.visual:java-client",
        Platform.SAUCE_LABS_VISUAL,
        Framework.SELENIUM,
        Language.JAVA,
        SAUCE_JS,
    ),
    # requirements.txt, identifiers are PEP 503 normalized names
    DependencySignature(
        REQUIREMENTS_TXT, "percy-appium-app", Platform.PERCY, Framework.APPIUM, Language.PYTHON, PERCY_PY
    ),
    DependencySignature(
        REQUIREMENTS_TXT, "percy-selenium", Platform.PERCY, Framework.SELENIUM, Language.PYTHON, PERCY_PY
    ),
    DependencySignature(
        REQUIREMENTS_TXT,
        "eyes-selenium",
        Platform.APPLITOOLS,
        Framework.APPIUM,
        Language.PYTHON,
        EYES,
        companion=_APPIUM_PY,
    ),
    DependencySignature(
        REQUIREMENTS_TXT, "eyes-selenium", Platform.APPLITOOLS, Framework.SELENIUM, Language.PYTHON, EYES
    ),
    DependencySignature(
        REQUIREMENTS_TXT,
        "saucelabs-visual",
        Platform.SAUCE_LABS_VISUAL,
        Framework.APPIUM,
        Language.PYTHON,
        SAUCE_PY,
        companion=_APPIUM_PY,
    ),
    DependencySignature(
        REQUIREMENTS_TXT,
        "saucelabs-visual",
        Platform.SAUCE_LABS_VISUAL,
        Framework.ROBOT_FRAMEWORK,
        Language.PYTHON,
        SAUCE_PY,
        requires_glob="**/*.robot",
    ),
    DependencySignature(
        REQUIREMENTS_TXT,
        "saucelabs-visual",
        Platform.SAUCE_LABS_VISUAL,
        Framework.SELENIUM,
        Language.PYTHON,
        SAUCE_PY,
    ),
)

CONFIG_FILE_PATTERNS: Dict[Platform, Tuple[str, ...]] = {
    Platform.PERCY: (
        "**/.percy.yml",
        "**/.percy.yaml",
        "**/.percy.js",
        "**/.percyrc",
        "**/percy.config.js",
        "**/percy.config.ts",
    ),
    Platform.APPLITOOLS: (
        "**/applitools.config.js",
        "**/applitools.config.ts",
        "**/applitools.config.json",
    ),
    Platform.SAUCE_LABS_VISUAL: (
        "**/saucectl.yml",
        "**/sauce.config.js",
        "**/sauce.config.ts",
        "**/sauce.config.json",
    ),
}

SOURCE_EXTENSIONS: Tuple[str, ...] = (".js", ".ts", ".jsx", ".tsx", ".py", ".java", ".robot")
SOURCE_PATTERNS: Tuple[str, ...] = tuple(f"**/*{ext}" for ext in SOURCE_EXTENSIONS)

CI_PATTERNS: Tuple[str, ...] = (
    ".github/workflows/**/*.yml",
    ".github/workflows/**/*.yaml",
    ".gitlab-ci.yml",
    "Jenkinsfile",
    "azure-pipelines.yml",
    ".circleci/config.yml",
)

PACKAGE_MANAGER_PATTERNS: Tuple[str, ...] = (
    "package.json",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "pom.xml",
    "requirements.txt",
    "Pipfile",
    "poetry.lock",
)


@dataclass(frozen=True)
class FrameworkSignature:
    framework: Framework
    pattern: Pattern[str]
    weight: float


def _sig(framework: Framework, pattern: str, weight: float) -> FrameworkSignature:
    return FrameworkSignature(framework, re.compile(pattern), weight)


# Frameworks are declared in tie-break order: on equal scores the first wins.
FRAMEWORK_SIGNATURES: Tuple[FrameworkSignature, ...] = (
    _sig(Framework.CYPRESS, r"cy\.(visit|get|contains|click|type|find|should|wait|intercept|request)\(", 0.9),
    _sig(Framework.CYPRESS, r"Cypress\.Commands\.add", 0.8),
    _sig(Framework.CYPRESS, r"cypress\.config\.", 0.7),
    _sig(Framework.CYPRESS, r"cy\.(on|off|window|document)\(", 0.6),
    # describe/it also appear in Mocha and Jest suites
    _sig(Framework.CYPRESS, r"describe\s*\(\s*['\"]", 0.3),
    _sig(Framework.CYPRESS, r"\bit\s*\(\s*['\"]", 0.3),
    _sig(Framework.PLAYWRIGHT, r"page\.(goto|click|fill|locator|getByRole|getByText|getByLabel)\(", 0.9),
    _sig(Framework.PLAYWRIGHT, r"expect\s*\(\s*page\s*\)", 0.8),
    _sig(Framework.PLAYWRIGHT, r"\btest\s*\(\s*['\"]", 0.5),
    _sig(Framework.PLAYWRIGHT, r"browser\.(newPage|close)\(", 0.7),
    _sig(Framework.PLAYWRIGHT, r"context\.(newPage|close)\(", 0.6),
    _sig(Framework.PLAYWRIGHT, r"playwright\.config\.", 0.7),
    _sig(Framework.SELENIUM, r"new ChromeDriver\(\)", 0.7),
    _sig(Framework.SELENIUM, r"new FirefoxDriver\(\)", 0.7),
    _sig(Framework.SELENIUM, r"new EdgeDriver\(\)", 0.7),
    _sig(Framework.SELENIUM, r"WebDriverWait\s*\(", 0.6),
    _sig(Framework.SELENIUM, r"By\.(id|cssSelector|xpath|className|tagName)\(", 0.5),
    _sig(Framework.SELENIUM, r"driver\.(findElement|findElements)\(", 0.6),
    _sig(Framework.SELENIUM, r"Actions\s*\(", 0.5),
    _sig(Framework.SELENIUM, r"JavascriptExecutor", 0.4),
    _sig(Framework.ROBOT_FRAMEWORK, r"Open Browser", 0.8),
    _sig(Framework.ROBOT_FRAMEWORK, r"Click Element", 0.7),
    _sig(Framework.ROBOT_FRAMEWORK, r"Input Text", 0.7),
    _sig(Framework.ROBOT_FRAMEWORK, r"Get Text", 0.6),
    _sig(Framework.ROBOT_FRAMEWORK, r"Wait Until Element Is Visible", 0.6),
    _sig(Framework.ROBOT_FRAMEWORK, r"Robot Framework", 0.5),
    _sig(Framework.APPIUM, r"driver\.findElementBy", 0.8),
    _sig(Framework.APPIUM, r"MobileElement", 0.7),
    _sig(Framework.APPIUM, r"AppiumDriver", 0.7),
    _sig(Framework.APPIUM, r"DesiredCapabilities", 0.6),
    _sig(Framework.APPIUM, r"TouchAction", 0.6),
    _sig(Framework.APPIUM, r"appium", 0.5),
    _sig(Framework.STORYBOOK, r"\.stories\.(js|ts|jsx|tsx)", 0.9),
    _sig(Framework.STORYBOOK, r"export default.*title:", 0.8),
    _sig(Framework.STORYBOOK, r"export const.*=.*\(\)", 0.7),
    _sig(Framework.STORYBOOK, r"\.add\(", 0.6),
    _sig(Framework.STORYBOOK, r"Storybook", 0.5),
)

FRAMEWORK_ORDER: Tuple[Framework, ...] = tuple(
    dict.fromkeys(signature.framework for signature in FRAMEWORK_SIGNATURES)
)
