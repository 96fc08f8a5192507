"""Tests for the examples catalog action."""

import json

import pytest

from libbuild.actions import generate_catalog
from libbuild.actions.catalog import INDEX_TEMPLATE, read_package_main, render_index, strip_require
from libbuild.constants import CATALOG_HEADER


@pytest.fixture
def project(tmp_path):
    """Project with a package.json and an examples directory."""
    (tmp_path / "package.json").write_text(json.dumps({"name": "sample", "main": "dist/sample.min.js"}))
    (tmp_path / "examples").mkdir()
    return tmp_path


def write_example(project, name, body):
    (project / "examples" / name).write_text(body, encoding="utf-8")


def load_examples(list_file):
    text = list_file.read_text(encoding="utf-8")
    assert text.startswith(CATALOG_HEADER)
    payload = text[len(CATALOG_HEADER) :]
    assert payload.startswith("var examples=") and payload.endswith(";")
    return json.loads(payload[len("var examples=") : -1])


def catalog(project, **kwargs):
    return generate_catalog(
        project / "examples",
        "sampleLib",
        pretty_name="Sample Lib",
        package_file=project / "package.json",
        **kwargs,
    )


class TestStripRequire:
    """Tests for strip_require."""

    def test_removes_require_line_and_trims(self):
        content = "var sampleLib = require('../dist/sample.min.js');\n\nsampleLib.run();\n"
        assert strip_require(content, "sampleLib", "dist/sample.min.js") == "sampleLib.run();"

    def test_other_requires_kept(self):
        content = "var other = require('../dist/sample.min.js');\nother();"
        assert strip_require(content, "sampleLib", "dist/sample.min.js") == content

    def test_only_first_occurrence(self):
        line = "var sampleLib = require('../main.js');"
        assert strip_require(f"{line}\nx();\n{line}", "sampleLib", "main.js") == f"x();\n{line}"


class TestGenerateCatalog:
    """Tests for generate_catalog."""

    def test_missing_examples_dir_is_noop(self, tmp_path):
        result = generate_catalog(tmp_path / "examples", "sampleLib")

        assert result.success
        assert result.examples == []
        assert not (tmp_path / "examples").exists()

    def test_writes_sorted_list_without_require(self, project):
        require = "var sampleLib = require('../dist/sample.min.js');\n"
        write_example(project, "zeta.js", require + "sampleLib.z();\n")
        write_example(project, "alpha.js", require + "sampleLib.a();\n")
        write_example(project, "Beta.js", "  sampleLib.b();  \n")
        write_example(project, "notes.txt", "ignored")

        result = catalog(project)

        assert result.success
        assert result.examples == ["Beta.js", "alpha.js", "zeta.js"]
        examples = load_examples(project / "examples" / "_list.jsonp")
        assert list(examples) == ["Beta.js", "alpha.js", "zeta.js"]
        assert examples == {
            "Beta.js": "sampleLib.b();",
            "alpha.js": "sampleLib.a();",
            "zeta.js": "sampleLib.z();",
        }

    def test_compact_json(self, project):
        write_example(project, "a.js", 'say("hé");')

        catalog(project)

        text = (project / "examples" / "_list.jsonp").read_text(encoding="utf-8")
        assert text == CATALOG_HEADER + 'var examples={"a.js":"say(\\"hé\\");"};'

    def test_subdirectories_ignored(self, project):
        (project / "examples" / "lib.js").mkdir()
        write_example(project, "a.js", "a();")

        assert catalog(project).examples == ["a.js"]

    def test_list_rewritten_each_run(self, project):
        write_example(project, "a.js", "a();")
        catalog(project)
        write_example(project, "b.js", "b();")

        catalog(project)

        assert list(load_examples(project / "examples" / "_list.jsonp")) == ["a.js", "b.js"]

    def test_index_created_from_template(self, project):
        result = catalog(project)

        index = (project / "examples" / "_index.html").read_text()
        assert result.index_created
        assert "Sample Lib" in index
        assert "sampleLib" in index
        assert "../dist/sample.min.js" in index
        assert "{%" not in index

    def test_existing_index_not_overwritten(self, project):
        index_file = project / "examples" / "_index.html"
        index_file.write_text("<p>custom</p>")

        result = catalog(project)

        assert result.success
        assert not result.index_created
        assert index_file.read_text() == "<p>custom</p>"

    def test_missing_package_json_uses_fallback_main(self, project):
        (project / "package.json").unlink()
        write_example(project, "a.js", "var sampleLib = require('../dist/index.min.js');\na();")

        result = catalog(project, main="dist/index.min.js")

        assert result.success
        assert load_examples(result.list_file) == {"a.js": "a();"}

    def test_invalid_package_json_fails(self, project):
        (project / "package.json").write_text("{not json")

        result = catalog(project)

        assert not result.success
        assert "JSONDecodeError" in result.error
        assert not (project / "examples" / "_list.jsonp").exists()

    def test_dry_run_writes_nothing(self, project):
        write_example(project, "a.js", "a();")

        result = catalog(project, dry_run=True)

        assert result.success
        assert result.examples == ["a.js"]
        assert not (project / "examples" / "_list.jsonp").exists()
        assert not (project / "examples" / "_index.html").exists()


def test_read_package_main(tmp_path):
    package_file = tmp_path / "package.json"
    assert read_package_main(package_file, "fallback.js") == "fallback.js"

    package_file.write_text('{"name": "x"}')
    assert read_package_main(package_file, "fallback.js") == "fallback.js"

    package_file.write_text('{"main": "lib/x.js"}')
    assert read_package_main(package_file) == "lib/x.js"


def test_render_index_fills_every_placeholder():
    page = render_index(INDEX_TEMPLATE.read_text(), "Pretty $1", "myLib", "dist/my.js")

    assert "Pretty $1" in page
    assert "window['myLib']" in page
    assert '<script src="../dist/my.js"></script>' in page
    assert "{%" not in page
