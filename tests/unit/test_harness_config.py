import ast

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

import config as harness_config_module
from config import HarnessConfig


def test_defaults_are_valid():
    assert HarnessConfig(database_url="memory://", api_base_url=None, seed_count=10).validate() == []


def test_seed_count_must_be_positive():
    errors = HarnessConfig(database_url="memory://", api_base_url=None, seed_count=0).validate()

    assert errors == ["TEST_SEED_COUNT must be at least 1"]


def test_external_server_needs_shared_database():
    errors = HarnessConfig(database_url="memory://", api_base_url="http://localhost:8080").validate()

    assert len(errors) == 1
    assert "TEST_API_BASE_URL" in errors[0]


def test_get_config_raises_on_invalid_configuration(monkeypatch):
    monkeypatch.setattr(
        harness_config_module,
        "HarnessConfig",
        lambda: HarnessConfig(database_url="memory://", api_base_url=None, seed_count=-1)
    )

    with pytest.raises(ValueError, match="Configuration errors"):
        harness_config_module.get_config()


def test_conftest_loads_dotenv_before_app_settings():
    tree = ast.parse((Path(__file__).parent.parent / "conftest.py").read_text())
    imported = [
        node.module for node in tree.body
        if isinstance(node, ast.ImportFrom) and node.module
    ]

    first_app_import = next(i for i, module in enumerate(imported) if module.startswith("blog_api"))
    assert imported.index("config") < first_app_import
