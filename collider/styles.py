from __future__ import annotations

from pathlib import Path

from collider.config import StyleOptions
from collider.sources import SourceSet
from collider.tasks import RunResult
from collider.transforms import run_command


class StyleCompiler:
    """Compile the entry stylesheet with the sass CLI."""

    name = "sass"
    label = "Sass"

    def __init__(self, load_paths: tuple[Path, ...] = ()):
        self.load_paths = load_paths

    def build_command(self, entry: Path, output: Path, options: StyleOptions) -> list[str]:
        cmd = [*options.command, f"--style={options.output_style}"]
        cmd.append("--source-map" if options.source_map else "--no-source-map")
        for root in self.load_paths:
            cmd.append(f"--load-path={root}")
        cmd.extend([str(entry), str(output)])
        return cmd

    def invoke(self, sources: SourceSet, output_dir: Path, options: StyleOptions) -> RunResult:
        entries = sources.files()
        if not entries:
            return RunResult.failed(
                self.name, self.name, f"No stylesheet matching {sources.pattern}"
            )
        output = output_dir / options.output
        output.parent.mkdir(parents=True, exist_ok=True)
        return run_command(
            self.name, self.build_command(entries[0], output, options), cwd=output_dir
        )
