"""Scanner configuration loading."""

import json

import pytest

from smartui_migrator.config import DEFAULT_IGNORE_DIRS, ScannerConfig, load_config


def test_defaults_without_a_file():
    config = load_config(None)

    assert config == ScannerConfig()
    assert "node_modules" in config.ignore_dirs
    assert config.max_concurrency == 32


def test_yaml_scanner_section(tmp_path):
    path = tmp_path / "smartui.yaml"
    path.write_text("scanner:\n  extra-ignore: vendor\n  max_file_bytes: 1024\n  unknown_key: 1\n")

    config = load_config(path)

    assert config.extra_ignore == ("vendor",)
    assert config.max_file_bytes == 1024
    assert config.ignore_dirs == DEFAULT_IGNORE_DIRS


def test_json_top_level_keys(tmp_path):
    path = tmp_path / "smartui.json"
    path.write_text(json.dumps({"ignore_dirs": ["node_modules"], "max_concurrency": "4"}))

    config = load_config(path)

    assert config.ignore_dirs == ("node_modules",)
    assert config.max_concurrency == 4


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "smartui.yml"
    path.write_text("")

    assert load_config(path) == ScannerConfig()


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.yml")


@pytest.mark.parametrize(
    "text",
    [
        "- just\n- a list\n",
        "scanner: [1, 2]\n",
        "scanner:\n  max_concurrency: 0\n",
        "scanner: [unclosed\n",
        "max_file_bytes: null\n",
        "max_concurrency: lots\n",
        "extra_ignore: 5\n",
        "ignore_dirs: [node_modules, 3]\n",
        "max_file_bytes: true\n",
    ],
)
def test_invalid_config(tmp_path, text):
    path = tmp_path / "smartui.yml"
    path.write_text(text)

    with pytest.raises(ValueError):
        load_config(path)
