from prometheus_client import CollectorRegistry, Counter, Histogram, write_to_textfile


class PipelineMetrics:
    """Prometheus instruments for profiling runs, kept in their own registry."""

    def __init__(self, registry=None):
        self.registry = registry if registry is not None else CollectorRegistry()
        self.lines = Counter("jsonshape_lines_total", "Lines parsed and walked",
                             ["backend"], registry=self.registry)
        self.unknown_values = Counter("jsonshape_unknown_values_total",
                                      "Field values that fit no tally counter",
                                      ["backend"], registry=self.registry)
        self.parse_duration = Histogram("jsonshape_parse_seconds", "Time spent parsing one line",
                                        ["backend"], registry=self.registry)
        self.walk_duration = Histogram("jsonshape_walk_seconds", "Time spent walking one record",
                                       ["backend"], registry=self.registry)

    def observe_line(self, backend: str, parse_seconds: float, walk_seconds: float, unknown: int = 0):
        self.lines.labels(backend).inc()
        self.parse_duration.labels(backend).observe(parse_seconds)
        self.walk_duration.labels(backend).observe(walk_seconds)
        if unknown:
            self.unknown_values.labels(backend).inc(unknown)

    def write(self, path):
        write_to_textfile(str(path), self.registry)
