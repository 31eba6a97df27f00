from __future__ import annotations

from pathlib import Path

from collider.config import ScriptOptions
from collider.sources import SourceSet
from collider.tasks import RunResult
from collider.transforms import run_command


class ScriptBundler:
    """Bundle the entry script and its imports with the esbuild CLI."""

    name = "esbuild"
    label = "esbuild"

    def build_command(self, entry: Path, output: Path, options: ScriptOptions) -> list[str]:
        cmd = [
            *options.command,
            str(entry),
            "--bundle",
            f"--format={options.format}",
            f"--outfile={output}",
        ]
        if options.minify:
            cmd.append("--minify")
        for alias, target in sorted(options.aliases.items()):
            cmd.append(f"--alias:{alias}={target}")
        return cmd

    def invoke(self, sources: SourceSet, output_dir: Path, options: ScriptOptions) -> RunResult:
        entries = sources.files()
        if not entries:
            return RunResult.failed(
                self.name, self.name, f"No script matching {sources.pattern}"
            )
        output = output_dir / options.output
        output.parent.mkdir(parents=True, exist_ok=True)
        root = sources.roots[0]
        return run_command(
            self.name, self.build_command(entries[0], output, options), cwd=root
        )
