"""Tests for publishing the build tree to a git branch."""

import subprocess

import pytest

from collider.config import DeployOptions
from collider.deploy import publish
from collider.errors import TransformFailure


class FakeGit:
    def __init__(self, fail_on=None):
        self.fail_on = fail_on
        self.calls = []

    def __call__(self, cmd, capture_output=True, text=True, cwd=None):
        self.calls.append(cmd)
        subcommand = next(arg for arg in cmd[1:] if not arg.startswith("--"))
        if subcommand == self.fail_on:
            return subprocess.CompletedProcess(cmd, 1, stdout="", stderr="rejected")
        stdout = "git@example.com:me/site.git" if subcommand == "remote" else ""
        return subprocess.CompletedProcess(cmd, 0, stdout=stdout, stderr="")


@pytest.fixture()
def build_dir(tmp_path):
    build = tmp_path / "distribute"
    build.mkdir()
    (build / "index.html").write_text("<p>hi</p>")
    return build


def test_publish_pushes_the_build_tree(monkeypatch, tmp_path, build_dir):
    git = FakeGit()
    monkeypatch.setattr("collider.deploy.subprocess.run", git)

    publish(tmp_path, build_dir, DeployOptions())

    push = git.calls[-1]
    assert push[-2:] == ["git@example.com:me/site.git", "gh-pages:gh-pages"]
    assert f"--work-tree={build_dir}" in push
    assert not (build_dir / ".git").exists()


def test_push_failure_is_a_transform_failure(monkeypatch, tmp_path, build_dir):
    monkeypatch.setattr("collider.deploy.subprocess.run", FakeGit(fail_on="push"))

    with pytest.raises(TransformFailure) as exc_info:
        publish(tmp_path, build_dir, DeployOptions())

    assert exc_info.value.unit == "gh-pages"
    assert exc_info.value.message == "rejected"


def test_empty_build_is_not_deployed(tmp_path):
    (tmp_path / "distribute").mkdir()

    with pytest.raises(TransformFailure, match="Nothing to deploy"):
        publish(tmp_path, tmp_path / "distribute", DeployOptions())
