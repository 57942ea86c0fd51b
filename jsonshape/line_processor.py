#!/usr/bin/env python3
"""Profile the value shapes of a JSON-per-line file, one backend per run."""

import argparse, json, logging, pathlib, sys, time
from typing import Iterable, Optional

from jsonshape.config import DEFAULT_STRING_THRESHOLD, ProfilerConfig
from jsonshape.errors import ParseFailure, ProfilerError
from jsonshape.json_worker.streaming_parser import BACKENDS, ParseBackend, get_backend, iter_lines
from jsonshape.shared.memory_probe import MemoryProbe, MemorySample
from jsonshape.shared.metrics import PipelineMetrics
from jsonshape.stats import StatsTable
from jsonshape.walker import walk

logger = logging.getLogger(__name__)

PROGRESS_EVERY = 100000


def run(lines: Iterable[str], backend: ParseBackend, table: Optional[StatsTable] = None,
        metrics: Optional[PipelineMetrics] = None, threshold: Optional[int] = None) -> StatsTable:
    """Parse every line with ``backend`` and fold it into one shared StatsTable.

    Blank lines are handed to the backend like any other; the first line that
    fails to parse, or is not a JSON object, aborts the run.
    """
    if table is None:
        table = StatsTable() if threshold is None else StatsTable(threshold)
    line_no = 0
    for line_no, line in enumerate(lines, start=1):
        t0 = time.perf_counter()
        try:
            value = backend.parse(line)
            t1 = time.perf_counter()
            unknown_before = table.unknown_count
            walk(value, table)
        except ParseFailure as e:
            raise ParseFailure(str(e), line_number=line_no, backend=backend.name) from e
        if metrics is not None:
            metrics.observe_line(backend.name, t1 - t0, time.perf_counter() - t1,
                                 table.unknown_count - unknown_before)
        if line_no % PROGRESS_EVERY == 0:
            logger.info("%s lines | %s fields", line_no, len(table))
    logger.info("Done %s lines with backend %s", line_no, backend.name)
    return table


class RunReport:
    """Everything printed at the end of one pipeline run."""

    def __init__(self, path, backend_name, table, lines, elapsed, before, after=None,
                 allocation_tracing=False):
        self.path = path
        self.backend_name = backend_name
        self.table = table
        self.lines = lines
        self.elapsed = elapsed
        self.before = before
        self.after = after
        self.allocation_tracing = allocation_tracing

    def render_text(self) -> str:
        out = [f"Stats from reading file: {self.path} (backend={self.backend_name}, {self.lines} lines)"]
        for name, counts in self.table.as_dict().items():
            out.append("  %s: %s" % (name, " ".join(f"{k}={v}" for k, v in counts.items())))
        out.append(f"Unknown values: {self.table.unknown_count}")
        elapsed = f"Elapsed time: {self.elapsed:.6f}s"
        if self.allocation_tracing:
            elapsed += " (tracemalloc on; timing includes tracing overhead)"
        out.append(elapsed)
        out.append(f"Before: {self.before}")
        if self.after is not None:
            out.append(f"After: {self.after}")
        return "\n".join(out)

    def as_dict(self):
        def sample(s: Optional[MemorySample]):
            return None if s is None else {"allocated": s.allocated, "resident": s.resident}
        return {
            "file": str(self.path),
            "backend": self.backend_name,
            "lines": self.lines,
            "elapsed_seconds": self.elapsed,
            "allocation_tracing": self.allocation_tracing,
            "threshold": self.table.threshold,
            "unknown_values": self.table.unknown_count,
            "fields": self.table.as_dict(),
            "memory": {"before": sample(self.before), "after": sample(self.after)},
        }


class _CountingLines:
    def __init__(self, lines):
        self._lines = lines
        self.count = 0

    def __iter__(self):
        for line in self._lines:
            self.count += 1
            yield line


def profile_file(path, backend: ParseBackend, probe, threshold: int = DEFAULT_STRING_THRESHOLD,
                 metrics: Optional[PipelineMetrics] = None) -> RunReport:
    """Sample memory, time one pipeline run over ``path``, and return its report.

    The post-run sample is left to the caller so the table stays alive until
    it is taken.
    """
    before = probe.sample()
    lines = _CountingLines(iter_lines(path))
    start = time.perf_counter()
    table = run(lines, backend, metrics=metrics, threshold=threshold)
    elapsed = time.perf_counter() - start
    return RunReport(path, backend.name, table, lines.count, elapsed, before,
                     allocation_tracing=getattr(probe, "tracing", False))


def _emit_report(report: RunReport, probe, fmt: str):
    if fmt == "json":
        report.after = probe.sample()
        print(json.dumps(report.as_dict(), indent=2))
    else:
        print(report.render_text())
        report.after = probe.sample()
        print(f"After: {report.after}")


def cli(argv=None):
    try:
        config = ProfilerConfig.from_env()
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    ap = argparse.ArgumentParser(prog="jsonshape", description=__doc__)
    ap.add_argument("file", nargs="?", type=pathlib.Path, default=pathlib.Path(config.input_path))
    ap.add_argument("--backend", choices=sorted(BACKENDS), default=config.backend)
    ap.add_argument("--threshold", type=int, default=config.string_threshold,
                    help="longest string (in characters) still counted as short")
    ap.add_argument("--settle-seconds", type=float, default=config.settle_seconds,
                    help="delay before each memory sample")
    ap.add_argument("--format", choices=["text", "json"], default="text")
    ap.add_argument("--compare", action="store_true", help="run once per backend and compare tables")
    ap.add_argument("--metrics-file", type=pathlib.Path, help="write Prometheus metrics here")
    ap.add_argument("--log-level", default=config.log_level)
    args = ap.parse_args(argv)

    try:
        logging.basicConfig(level=args.log_level.upper(),
                            format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    except ValueError as e:
        ap.error(str(e))
    # argparse checks choices on given values only, not on an env-supplied default
    if args.backend not in BACKENDS:
        ap.error(f"unknown backend {args.backend!r}")
    if args.threshold < 0:
        ap.error("--threshold must be non-negative")

    metrics = PipelineMetrics() if args.metrics_file else None
    backend_names = sorted(BACKENDS) if args.compare else [args.backend]
    tables = {}
    try:
        with MemoryProbe(settle_seconds=args.settle_seconds) as probe:
            for name in backend_names:
                report = profile_file(args.file, get_backend(name), probe,
                                      threshold=args.threshold, metrics=metrics)
                _emit_report(report, probe, args.format)
                tables[name] = report.table
    except ProfilerError as e:
        logger.error("Run aborted: %s", e)
        print(f"error: {e}", file=sys.stderr)
        return 2

    if metrics is not None:
        metrics.write(args.metrics_file)

    if args.compare:
        reference = tables[backend_names[0]]
        identical = all(t == reference for t in tables.values())
        print(f"Tables identical across backends ({', '.join(backend_names)}): {identical}")
        if not identical:
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(cli())
