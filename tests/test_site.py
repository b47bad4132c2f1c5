"""Unit tests for Site: configuration, code and data loading, item links."""

from __future__ import annotations

from typing import Callable

import pytest

from compilation import Site
from core.code_snippet import CodeSnippet
from core.entities import Item, Layout, PageDefaults, Template
from core.errors import UnknownDataSourceError, UnknownRouterError
from core.plugins import PluginKind, PluginRegistry
from delivery.routers import DefaultRouter


class TestConstruction:
    """Tests for Site construction."""

    def test_defaults_fill_missing_config(self, make_site: Callable[..., Site]) -> None:
        site = make_site(output_dir="public")

        assert site.config.output_dir == "public"
        assert site.config.router == "default"
        assert site.config.index_filenames == ["index.html"]
        assert isinstance(site.router, DefaultRouter)

    def test_unknown_data_source(self, registry: PluginRegistry) -> None:
        with pytest.raises(UnknownDataSourceError) as exc_info:
            Site({"data_source": "nope"}, registry=registry)
        assert exc_info.value.name == "nope"

    def test_unknown_router(self, make_site: Callable[..., Site]) -> None:
        with pytest.raises(UnknownRouterError) as exc_info:
            make_site(router="nope")
        assert exc_info.value.name == "nope"

    def test_router_defined_in_site_code(self, make_site: Callable[..., Site], site_data) -> None:
        """Code is loaded before the router is resolved."""
        site_data.code = [CodeSnippet(
            "@plugin(PluginKind.ROUTER, 'flat')\n"
            "class FlatRouter(Router):\n"
            "    def path_for(self, rep):\n"
            "        return '/flat.html'\n",
            "lib/routers.py",
        )]

        site = make_site(router="flat")

        assert type(site.router).__name__ == "FlatRouter"
        assert site.registry.find(PluginKind.ROUTER, "flat") is type(site.router)

    def test_data_not_loaded_on_construction(self, make_site: Callable[..., Site], site_data) -> None:
        site_data.items = [Item("x", {}, "/x/")]
        site = make_site()

        assert site.items == []
        assert site_data.calls["items"] == 0
        assert site_data.calls["code"] == 1


class TestLoadCode:
    """Tests for Site.load_code."""

    def test_loaded_once(self, make_site: Callable[..., Site], site_data) -> None:
        site_data.code = [CodeSnippet("counter = globals().get('counter', 0) + 1", "lib/a.py")]
        site = make_site()

        site.load_code()
        site.load_code()

        assert site_data.calls["code"] == 1
        assert site.code_namespace["counter"] == 1

    def test_force_reloads(self, make_site: Callable[..., Site], site_data) -> None:
        site_data.code = [CodeSnippet("rules.layout('*', 'jinja')", "rules.py")]
        site = make_site()

        site.load_code(force=True)

        assert site_data.calls["code"] == 2
        assert len(site.rules.layout_rules) == 1

    def test_snippets_share_namespace(self, make_site: Callable[..., Site], site_data) -> None:
        site_data.code = [
            CodeSnippet("GREETING = 'hi'", "lib/a.py"),
            CodeSnippet("shout = GREETING.upper()", "lib/b.py"),
        ]
        site = make_site()

        assert site.code_namespace["shout"] == "HI"
        assert [snippet.site for snippet in site.code_snippets] == [site, site]

    def test_shared_snippet_objects_load_into_every_site(
        self, make_site: Callable[..., Site], site_data
    ) -> None:
        """A data source handing out the same snippet objects still gives each site its rules."""
        site_data.code = [CodeSnippet("@rules.compile('*')\ndef page(rep):\n    pass\n", "rules.py")]

        first = make_site()
        second = make_site()

        assert len(first.rules.compilation_rules) == 1
        assert len(second.rules.compilation_rules) == 1
        assert second.code_namespace["page"] is not first.code_namespace["page"]

    def test_legacy_string_code(self, make_site: Callable[..., Site], site_data) -> None:
        site_data.code = "LEGACY = True"

        with pytest.warns(DeprecationWarning):
            site = make_site()

        assert site.code_namespace["LEGACY"] is True
        assert site.code_snippets[0].filename == "<site code>"


class TestLoadData:
    """Tests for Site.load_data."""

    def test_fetches_everything_within_loading(self, make_site: Callable[..., Site], site_data) -> None:
        site_data.items = [Item("x", {}, "/x/")]
        site_data.layouts = [Layout("", {}, "/default/")]
        site_data.templates = [Template("", {}, "post")]
        site_data.page_defaults = PageDefaults({"a": 1})
        site = make_site()

        site.load_data()

        assert site.items == site_data.items
        assert site.layouts == site_data.layouts
        assert site.templates == site_data.templates
        assert site.page_defaults is site_data.page_defaults
        assert all(entity.site is site for entity in [*site.items, *site.layouts, *site.templates])
        assert site.page_defaults.site is site
        assert site_data.calls["up"] == site_data.calls["down"] == 2

    def test_second_call_does_not_fetch(self, make_site: Callable[..., Site], site_data) -> None:
        site = make_site()

        site.load_data()
        site.load_data()

        assert site_data.calls["items"] == 1
        assert site_data.calls["layouts"] == 1

    def test_force_fetches_again(self, make_site: Callable[..., Site], site_data) -> None:
        site_data.items = [Item("", {}, "/"), Item("", {}, "/a/")]
        site = make_site()
        site.load_data()

        site_data.items = [Item("", {}, "/"), Item("", {}, "/b/")]
        site.load_data(force=True)

        assert site_data.calls["items"] == 2
        assert [item.identifier for item in site.items] == ["/", "/b/"]
        assert site.items[0].children == [site.items[1]]

    def test_force_relinks_same_items(self, make_site: Callable[..., Site], site_data) -> None:
        """Reloading the same entities does not duplicate children."""
        site_data.items = [Item("", {}, "/"), Item("", {}, "/a/")]
        site = make_site()

        site.load_data()
        site.load_data(force=True)

        root, child = site.items
        assert root.children == [child]
        assert child.parent is root

    def test_teardown_on_failure(self, make_site: Callable[..., Site], site_data) -> None:
        site = make_site()
        site_data.layouts = [object()]

        with pytest.raises(TypeError):
            site.load_data()

        assert site_data.calls["up"] == site_data.calls["down"]


class TestLegacyRecords:
    """Plain mappings from old data sources are wrapped with a warning."""

    def test_items(self, make_site: Callable[..., Site], site_data) -> None:
        site_data.items = [{"content": "hello", "path": "/hello/", "title": "Hi"}]
        site = make_site()

        with pytest.warns(DeprecationWarning, match="DataSource.items"):
            site.load_data()

        item = site.items[0]
        assert isinstance(item, Item)
        assert item.raw_content == "hello"
        assert item.identifier == "/hello/"
        assert item["title"] == "Hi"
        assert item.site is site

    def test_layouts_by_name(self, make_site: Callable[..., Site], site_data) -> None:
        site_data.layouts = [{"content": "{{ content }}", "name": "default"}]
        site = make_site()

        with pytest.warns(DeprecationWarning):
            site.load_data()

        assert site.layouts[0].identifier == "/default/"

    def test_templates_with_yaml_meta(self, make_site: Callable[..., Site], site_data) -> None:
        site_data.templates = [{"content": "body", "meta": "title: New", "name": "post"}]
        site = make_site()

        with pytest.warns(DeprecationWarning):
            site.load_data()

        assert site.templates[0].attributes == {"title": "New"}
        assert site.templates[0].name == "post"

    def test_page_defaults(self, make_site: Callable[..., Site], site_data) -> None:
        site_data.page_defaults = {"layout": "default"}
        site = make_site()

        with pytest.warns(DeprecationWarning):
            site.load_data()

        assert isinstance(site.page_defaults, PageDefaults)
        assert site.page_defaults.attributes == {"layout": "default"}

    def test_mixed_list(self, make_site: Callable[..., Site], site_data) -> None:
        site_data.items = [Item("typed", {}, "/typed/"), {"content": "raw", "identifier": "/raw/"}]
        site = make_site()

        with pytest.warns(DeprecationWarning):
            site.load_data()

        assert [item.raw_content for item in site.items] == ["typed", "raw"]


class TestParentLinks:
    """Tests for deriving parent/child links from paths."""

    @pytest.fixture
    def site(self, make_site: Callable[..., Site], site_data) -> Site:
        site_data.items = [
            Item("", {}, "/"),
            Item("", {}, "/foo/"),
            Item("", {}, "/foo/bar/"),
            Item("", {}, "/foo/baz/"),
            Item("", {}, "/orphan/child/"),
        ]
        site = make_site()
        site.load_data()
        return site

    def test_root_has_no_parent(self, site: Site) -> None:
        assert site.item_with_identifier("/").parent is None

    def test_children_linked_once(self, site: Site) -> None:
        root = site.item_with_identifier("/")
        foo = site.item_with_identifier("/foo/")
        bar = site.item_with_identifier("/foo/bar/")
        baz = site.item_with_identifier("/foo/baz/")

        assert foo.parent is root
        assert bar.parent is foo
        assert foo.children == [bar, baz]
        assert root.children == [foo]

    def test_missing_parent_is_not_an_error(self, site: Site) -> None:
        assert site.item_with_identifier("/orphan/child/").parent is None
