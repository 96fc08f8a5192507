"""Shared pytest fixtures for libbuild tests."""

from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from libbuild.runners import SequenceRunner
from libbuild.workflow import TaskRegistry


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def registry():
    return TaskRegistry()


@pytest.fixture
def runner(registry):
    return SequenceRunner(registry)


@pytest.fixture
def calls():
    """Call-order log shared by recording tasks."""
    return []


@pytest.fixture
def recorder(calls):
    """Factory for units of work that log their name and return `outcome`."""

    def make(name, outcome=None):
        def work():
            calls.append(name)
            return outcome

        return work

    return make


@pytest.fixture
def sample_config(tmp_path):
    """Create a sample config file."""
    config_file = tmp_path / "libbuild.yaml"
    config_file.write_text(
        f"""
library:
  pretty_name: "Sample Lib"
  export_var: sampleLib
  dependencies: [jquery]

paths:
  src: "src/*.src.js"

tools:
  umd: "umd-tool {{src}} --export {{export_var}}"
  lint: "jshint {{debug}}"
  min: "terser {{debug}}"
  comments: "raise-comments {{min}}"
  test:
    command: "mocha {{test}}"
    timeout: 30

sequences:
  release: [build, examples]

watch:
  debounce: 0
  root: "{tmp_path}"
"""
    )
    return config_file


@pytest.fixture
def mock_subprocess():
    """Mock subprocess.run for tests that call external tools."""
    with patch("subprocess.run") as mock_run:
        mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")
        yield mock_run


@pytest.fixture(name="_mock_shutil_which")
def mock_shutil_which():
    """Mock shutil.which to simulate available tools."""

    def which_side_effect(tool):
        available = {"npm", "npx", "jshint", "mocha"}
        return f"/usr/bin/{tool}" if tool in available else None

    with patch("shutil.which", side_effect=which_side_effect) as mock:
        yield mock
