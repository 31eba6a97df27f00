"""Tests for the task registry and composite builders."""

import pytest

from collider.errors import DuplicateTaskError, UnknownTaskError
from collider.tasks import PARALLEL, SERIES, RunResult, parallel, series


class TestTaskRegistry:
    def test_register_and_lookup(self, registry):
        task = registry.register("compile", lambda: None, description="Compile")

        assert registry.lookup("compile") is task
        assert "compile" in registry
        assert registry.names() == ["compile"]

    def test_redefinition_is_an_error(self, registry):
        registry.register("compile", lambda: None)

        with pytest.raises(DuplicateTaskError):
            registry.register("compile", lambda: None)

    def test_lookup_unknown_task(self, registry):
        with pytest.raises(UnknownTaskError) as exc_info:
            registry.lookup("missing")

        assert exc_info.value.name == "missing"

    def test_validate_rejects_unknown_member(self, registry):
        registry.register("a", lambda: None)
        registry.register("all", series("a", parallel("b")))

        with pytest.raises(UnknownTaskError, match="'b'"):
            registry.validate()

    def test_validate_rejects_unknown_prerequisite(self, registry):
        registry.register("a", lambda: None, requires=("clean",))

        with pytest.raises(UnknownTaskError):
            registry.validate()

    def test_registration_order_is_irrelevant(self, registry):
        registry.register("default", series("clean", "build"))
        registry.register("build", lambda: None)
        registry.register("clean", lambda: None)

        registry.validate()


class TestComposer:
    def test_builders_only_describe_structure(self):
        composite = series(parallel("a", "b"), "c")

        assert composite.mode == SERIES
        assert composite.members[0].mode == PARALLEL
        assert composite.members[0].members == ("a", "b")
        assert composite.members[1] == "c"

    def test_empty_composites(self):
        assert series().members == ()
        assert parallel().members == ()

    def test_label_uses_name_or_members(self):
        assert series("a", "b", name="default").label == "default"
        assert parallel("a", "b").label == "<parallel>(a, b)"


class TestRunResult:
    def test_success_and_failure(self):
        assert RunResult.success("x").ok
        failed = RunResult.failed("x", "sass", "boom")
        assert not failed.ok
        assert failed.failures[0].unit == "sass"
        assert failed.renamed("y").name == "y"
