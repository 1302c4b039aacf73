#!/usr/bin/env python3
"""Quick perf benchmark for formatting a tree of Nushell scripts."""

from __future__ import annotations

import argparse
import cProfile
import io
from pathlib import Path
import pstats
import statistics
import time

from tqdm import tqdm

from nufmt.config import Config
from nufmt.files import discover_files
from nufmt.pipeline import run_format


def _read_sources(root: Path) -> list[tuple[Path, str]]:
    files, missing = discover_files([root], Config())
    if missing:
        raise SystemExit(f"Invalid root: {root}")
    return [(path, path.read_text(encoding="utf-8")) for path in files]


def _run_once(
    sources: list[tuple[Path, str]],
    config: Config,
    *,
    label: str,
    show_progress: bool,
) -> tuple[float, int, int]:
    start = time.perf_counter()
    total_changed = 0
    total_diagnostics = 0
    iterator = tqdm(sources, desc=label, unit="file") if show_progress else sources
    for _, source in iterator:
        result = run_format(source, config)
        total_changed += result.changed
        total_diagnostics += len(result.diagnostics)
    duration = time.perf_counter() - start
    return duration, total_changed, total_diagnostics


def main() -> int:
    parser = argparse.ArgumentParser(description="Benchmark formatting throughput (nothing is written)")
    parser.add_argument("root", type=Path, help="Directory (or single file) of .nu scripts")
    parser.add_argument("--runs", type=int, default=5, help="Measured runs")
    parser.add_argument("--warmups", type=int, default=1, help="Warmup runs")
    parser.add_argument("--line-length", type=int, default=80, help="Line length to format with")
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable tqdm progress bars (useful for pure timing)",
    )
    parser.add_argument("--profile", action="store_true", help="Run cProfile and print top hotspots")
    parser.add_argument(
        "--profile-top",
        type=int,
        default=30,
        help="Number of cProfile rows to print (default: 30)",
    )
    args = parser.parse_args()

    sources = _read_sources(args.root)
    if not sources:
        raise SystemExit(f"No .nu files found under {args.root}")
    config = Config(line_length=args.line_length)
    show_progress = not args.no_progress
    total_bytes = sum(len(source) for _, source in sources)

    def _benchmark() -> tuple[list[float], int, int]:
        for warmup_idx in range(max(args.warmups, 0)):
            _run_once(sources, config, label=f"warmup {warmup_idx + 1}", show_progress=show_progress)

        timings: list[float] = []
        changed = diagnostics = 0
        for run_idx in range(max(args.runs, 1)):
            duration, changed, diagnostics = _run_once(
                sources,
                config,
                label=f"run {run_idx + 1}/{max(args.runs, 1)}",
                show_progress=show_progress,
            )
            timings.append(duration)
        return timings, changed, diagnostics

    if args.profile:
        profiler = cProfile.Profile()
        profiler.enable()
        timings, changed, diagnostics = _benchmark()
        profiler.disable()
        stream = io.StringIO()
        pstats.Stats(profiler, stream=stream).sort_stats("tottime").print_stats(max(args.profile_top, 1))
        print("\n[cProfile top functions]")
        print(stream.getvalue())
    else:
        timings, changed, diagnostics = _benchmark()

    mean = statistics.mean(timings)
    print(f"Dataset: {args.root}")
    print(f"Files: {len(sources)} ({total_bytes} chars)")
    print(f"Would reformat: {changed}")
    print(f"Diagnostics: {diagnostics}")
    print(f"Best:   {min(timings):.4f}s")
    print(f"Median: {statistics.median(timings):.4f}s")
    print(f"Mean:   {mean:.4f}s")
    print(f"Files/s (mean): {len(sources) / mean:.1f}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
