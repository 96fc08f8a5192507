"""Catalog actions - Collect the example scripts into a browsable catalog."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from ..constants import CATALOG_HEADER, CATALOG_INDEX_FILENAME, CATALOG_LIST_FILENAME

logger = logging.getLogger(__name__)

INDEX_TEMPLATE = Path(__file__).parent.parent / "templates" / "examples-index.tpl"


@dataclass
class CatalogResult:
    """Result of generating the examples catalog."""

    success: bool
    examples: list[str] = field(default_factory=list)
    list_file: Path | None = None
    index_created: bool = False
    error: str | None = None


def read_package_main(package_file: Path, default: str = "") -> str:
    """
    Read the `main` entry of a package.json.

    Returns:
        The entry, or `default` when the file or the key is missing

    Raises:
        ValueError: If the file is not valid JSON
    """
    if not package_file.is_file():
        logger.debug("No %s, using main=%s", package_file, default)
        return default
    data = json.loads(package_file.read_text(encoding="utf-8"))
    main = data.get("main") if isinstance(data, dict) else None
    return main or default


def strip_require(content: str, export_var: str, main: str) -> str:
    """Remove the line that loads the library under Node, then trim."""
    return content.replace(f"var {export_var} = require('../{main}');", "", 1).strip()


def collect_examples(examples_dir: Path, export_var: str, main: str) -> dict[str, str]:
    """Read every `*.js` file directly in the examples directory, sorted by name."""
    names = sorted(p.name for p in examples_dir.iterdir() if p.is_file() and p.name.endswith(".js"))
    return {
        name: strip_require((examples_dir / name).read_text(encoding="utf-8"), export_var, main) for name in names
    }


def render_jsonp(examples: dict[str, str]) -> str:
    return CATALOG_HEADER + "var examples=" + json.dumps(examples, ensure_ascii=False, separators=(",", ":")) + ";"


def render_index(template: str, pretty_name: str, export_var: str, main: str) -> str:
    return (
        template.replace("{%pretty_name%}", pretty_name)
        .replace("{%export_var%}", export_var)
        .replace("{%pkg_main%}", main)
    )


def generate_catalog(
    examples_dir: Path,
    export_var: str,
    pretty_name: str = "",
    package_file: Path | None = None,
    main: str = "",
    template: Path = INDEX_TEMPLATE,
    dry_run: bool = False,
) -> CatalogResult:
    """
    Write `_list.jsonp` and, if missing, `_index.html` into the examples directory.

    Args:
        examples_dir: Directory holding the example scripts
        export_var: Global the library is exported as
        pretty_name: Human-readable library name for the index page
        package_file: package.json whose `main` the examples require
        main: Fallback when package.json has no `main`
        template: Index page template
        dry_run: If True, report what would be written without writing

    Returns:
        CatalogResult; a missing examples directory is a successful no-op
    """
    if not examples_dir.is_dir():
        logger.debug("No examples directory at %s, skipping catalog", examples_dir)
        return CatalogResult(success=True)

    list_file = examples_dir / CATALOG_LIST_FILENAME
    index_file = examples_dir / CATALOG_INDEX_FILENAME

    try:
        if package_file is not None:
            main = read_package_main(package_file, main)
        examples = collect_examples(examples_dir, export_var, main)

        if dry_run:
            logger.info("[dry-run] would write %s (%d examples)", list_file, len(examples))
            return CatalogResult(success=True, examples=list(examples), list_file=list_file)

        list_file.write_text(render_jsonp(examples), encoding="utf-8")
        logger.info("Wrote %s (%d examples)", list_file, len(examples))

        index_created = False
        if not index_file.exists():
            page = render_index(template.read_text(encoding="utf-8"), pretty_name, export_var, main)
            index_file.write_text(page, encoding="utf-8")
            index_created = True
            logger.info("Created %s", index_file)
    except (OSError, ValueError) as e:
        logger.error("Examples catalog failed: %s", e)
        return CatalogResult(success=False, error=f"{type(e).__name__}: {e}")

    return CatalogResult(
        success=True,
        examples=list(examples),
        list_file=list_file,
        index_created=index_created,
    )
