"""
Data source reading a site from a directory tree:

    content/            items, with optional YAML front matter
    layouts/            layouts, with optional YAML front matter
    templates/          templates for new items
    lib/*.py            custom site code
    rules.py            compilation and layout rules
    page_defaults.yaml  attributes shared by all items
"""
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

import frontmatter
import yaml

from core.code_snippet import CodeSnippet
from core.entities import Item, Layout, PageDefaults, Template
from data_sources.base import DataSource

logger = logging.getLogger(__name__)

TEXT_EXTENSIONS = (
    "atom", "css", "csv", "htm", "html", "j2", "jinja", "js", "json",
    "markdown", "md", "rss", "svg", "txt", "xml", "yaml", "yml",
)


def _parse(text: str, path: Path) -> Tuple[Dict[str, Any], str]:
    try:
        parsed = frontmatter.loads(text)
    except (yaml.YAMLError, ValueError) as e:
        logger.warning(f"Failed to parse front matter in {path}: {e}")
        return {}, text

    metadata = parsed.metadata or {}
    if not isinstance(metadata, dict):
        logger.warning(f"Front matter in {path} is not a mapping, ignoring it")
        metadata = {}
    return dict(metadata), parsed.content


def identifier_for(relative: Path) -> str:
    """
    content/about.md -> /about/, content/blog/index.html -> /blog/,
    content/index.md -> /
    """
    parts = list(relative.parent.parts)
    if relative.stem != "index":
        parts.append(relative.stem)
    return "/" + "".join(f"{part}/" for part in parts)


class FilesystemDataSource(DataSource):
    def __init__(self, site):
        super().__init__(site)
        self.root: Optional[Path] = None

    def up(self) -> None:
        self.root = Path(self.site.config.site_root)
        if not self.root.is_dir():
            raise FileNotFoundError(f"Site directory does not exist: {self.root}")
        logger.debug(f"Reading site from {self.root.resolve()}")

    def down(self) -> None:
        self.root = None

    @property
    def text_extensions(self) -> Tuple[str, ...]:
        configured = getattr(self.site.config, "text_extensions", None)
        return tuple(configured) if configured else TEXT_EXTENSIONS

    def _files(self, directory: str) -> Iterator[Path]:
        base = self.root / directory
        if not base.is_dir():
            return
        for path in sorted(base.rglob("*")):
            if not path.is_file():
                continue
            if path.name.startswith(".") or path.name.endswith("~"):
                continue
            yield path

    @property
    def items(self) -> List[Item]:
        items = []
        seen: Dict[str, Path] = {}
        base = self.root / "content"

        for path in self._files("content"):
            relative = path.relative_to(base)
            identifier = identifier_for(relative)
            if identifier in seen:
                logger.warning(f"{path} and {seen[identifier]} both map to {identifier}, skipping {path}")
                continue
            seen[identifier] = path

            extension = path.suffix.lstrip(".").lower()
            mtime = path.stat().st_mtime

            if extension in self.text_extensions:
                attributes, content = _parse(path.read_text(encoding="utf-8"), path)
                binary = False
            else:
                attributes, content = {}, path.read_bytes()
                binary = True

            attributes.setdefault("extension", extension)
            attributes.setdefault("content_filename", str(path))
            items.append(Item(content, attributes, identifier, mtime=mtime, binary=binary))

        logger.info(f"Loaded {len(items)} items from {base}")
        return items

    @property
    def layouts(self) -> List[Layout]:
        layouts = []
        base = self.root / "layouts"

        for path in self._files("layouts"):
            attributes, content = _parse(path.read_text(encoding="utf-8"), path)
            attributes.setdefault("extension", path.suffix.lstrip(".").lower())
            identifier = identifier_for(path.relative_to(base))
            layouts.append(Layout(content, attributes, identifier, mtime=path.stat().st_mtime))

        return layouts

    @property
    def templates(self) -> List[Template]:
        templates = []
        for path in self._files("templates"):
            attributes, content = _parse(path.read_text(encoding="utf-8"), path)
            templates.append(Template(content, attributes, path.stem))
        return templates

    @property
    def page_defaults(self) -> PageDefaults:
        path = self.root / "page_defaults.yaml"
        if not path.is_file():
            return PageDefaults({})

        with open(path, "r", encoding="utf-8") as file:
            attributes = yaml.safe_load(file) or {}
        return PageDefaults(attributes, mtime=path.stat().st_mtime)

    @property
    def code(self) -> List[CodeSnippet]:
        paths = [path for path in self._files("lib") if path.suffix == ".py"]
        rules = self.root / "rules.py"
        if rules.is_file():
            paths.append(rules)

        return [
            CodeSnippet(path.read_text(encoding="utf-8"), str(path), mtime=path.stat().st_mtime)
            for path in paths
        ]
