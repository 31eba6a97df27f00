from __future__ import annotations

import logging
import subprocess
import tempfile
from pathlib import Path

from collider.config import DeployOptions
from collider.errors import TransformFailure

logger = logging.getLogger(__name__)

UNIT = "gh-pages"


def git(*args: str, cwd: Path, git_dir: Path | None = None, work_tree: Path | None = None) -> str:
    cmd = ["git"]
    if git_dir is not None:
        cmd.append(f"--git-dir={git_dir}")
    if work_tree is not None:
        cmd.append(f"--work-tree={work_tree}")
    cmd.extend(args)
    logger.debug("git: %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, cwd=cwd)
    except FileNotFoundError:
        raise TransformFailure(UNIT, "git executable not found") from None
    if result.returncode != 0:
        raise TransformFailure(UNIT, result.stderr.strip() or f"git {args[0]} failed")
    return result.stdout.strip()


def publish(project_root: Path, build_dir: Path, options: DeployOptions):
    """Force-push the build tree as the only commit on the deploy branch.

    Uses a throwaway git directory so the build tree never gets a .git.
    """
    if not build_dir.is_dir() or not any(build_dir.iterdir()):
        raise TransformFailure(UNIT, f"Nothing to deploy in {build_dir}")

    remote_url = git("remote", "get-url", options.remote, cwd=project_root)
    with tempfile.TemporaryDirectory(prefix="collider-deploy-") as tmp:
        git_dir = Path(tmp) / "repo.git"
        paths = {"cwd": build_dir, "git_dir": git_dir, "work_tree": build_dir}
        git("init", "--quiet", cwd=build_dir, git_dir=git_dir)
        git("checkout", "--quiet", "-b", options.branch, **paths)
        git("add", "--all", ".", **paths)
        git("commit", "--quiet", "-m", options.message, **paths)
        git("push", "--force", "--quiet", remote_url, f"{options.branch}:{options.branch}", **paths)
    logger.info("Published %s to %s (%s)", build_dir, options.remote, options.branch)
