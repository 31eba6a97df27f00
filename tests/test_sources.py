"""Tests for source roots and glob suffix matching."""

import pytest

from collider.errors import ConfigError
from collider.sources import SourceSet, glob_to_regex, resolve_roots


@pytest.mark.parametrize(
    "pattern,path,expected",
    [
        ("**/*.html", "index.html", True),
        ("**/*.html", "blog/2024/post.html", True),
        ("*.html", "blog/post.html", False),
        ("assets/**/*", "assets/logo.png", True),
        ("assets/**/*", "assets/img/icons/a.svg", True),
        ("assets/**/*", "other/a.svg", False),
        ("data/*.json", "data/site.json", True),
        ("main.scss", "main.scss", True),
        ("main.scss", "partials/main.scss", False),
        ("page?.html", "page1.html", True),
    ],
)
def test_glob_to_regex(pattern, path, expected):
    assert bool(glob_to_regex(pattern).match(path)) is expected


class TestSourceSet:
    def test_files_from_every_root_sorted(self, tmp_path):
        root = tmp_path.resolve()
        (root / "project" / "assets").mkdir(parents=True)
        (root / "ui-matter" / "assets").mkdir(parents=True)
        (root / "project" / "assets" / "b.png").write_text("b")
        (root / "ui-matter" / "assets" / "a.png").write_text("a")
        (root / "project" / "index.html").write_text("x")

        sources = SourceSet((root / "project", root / "ui-matter"), "assets/**/*")

        assert [p.name for p in sources.files()] == ["b.png", "a.png"]

    def test_relative_reports_owning_root(self, tmp_path):
        root = tmp_path.resolve()
        sources = SourceSet((root / "project", root / "ui-matter"), "**/*.scss")

        owner, rel = sources.relative(root / "ui-matter" / "matter" / "button.scss")

        assert owner == root / "ui-matter"
        assert rel.as_posix() == "matter/button.scss"
        assert sources.relative(root / "elsewhere" / "x.scss") is None


class TestResolveRoots:
    def test_resolves_existing_roots(self, tmp_path):
        (tmp_path / "project").mkdir()

        roots = resolve_roots(tmp_path, ["project"])

        assert roots == ((tmp_path / "project").resolve(),)

    def test_missing_root_fails_fast(self, tmp_path):
        (tmp_path / "project").mkdir()

        with pytest.raises(ConfigError, match="ui-matter"):
            resolve_roots(tmp_path, ["project", "ui-matter"])
