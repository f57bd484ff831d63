# io/recorder.py
import json
import sys
from dataclasses import asdict
from typing import Protocol


class Sink(Protocol):
    def write(self, ev) -> None: ...


class JsonlSink:
    def __init__(self, fp=sys.stdout):
        self.fp = fp

    def write(self, ev) -> None:
        self.fp.write(json.dumps(asdict(ev)) + "\n")


class MemorySink:
    def __init__(self):
        self.events: list = []

    def write(self, ev) -> None:
        self.events.append(ev)


class Recorder:
    """Fan-out of analytics events; a failing sink never breaks routing."""

    def __init__(self, *sinks: Sink):
        self.sinks = sinks or (JsonlSink(),)
        self.failed = 0

    def emit(self, ev):
        for s in self.sinks:
            try:
                s.write(ev)
            except (OSError, TypeError, ValueError):
                self.failed += 1
