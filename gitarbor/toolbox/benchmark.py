import logging
import os
import time

logger = logging.getLogger(__name__)
BENCHMARK_LOGGING_LEVEL = 5

try:
    import psutil
except ModuleNotFoundError:
    logger.info("psutil isn't available. Memory usage won't be reported.")
    psutil = None


def getRSS():
    if psutil:
        return psutil.Process(os.getpid()).memory_info().rss
    else:
        return 0


class Benchmark:
    """ Context manager that reports how long a piece of code takes to run. """

    nesting = []

    def __init__(self, name):
        self.name = name
        self.startTime = 0
        self.startBytes = 0
        self.elapsedMs = 0.0

    def __enter__(self):
        Benchmark.nesting.append(self.name)
        self.startBytes = getRSS()
        self.startTime = time.perf_counter()
        return self

    def __exit__(self, exc_type=None, exc_value=None, traceback=None):
        self.elapsedMs = 1000 * (time.perf_counter() - self.startTime)
        kb = (getRSS() - self.startBytes) // 1024

        description = "/".join(Benchmark.nesting)
        if exc_type is not None:
            description += f" (aborted: {exc_type.__name__})"
        logger.log(BENCHMARK_LOGGING_LEVEL, f"{self.elapsedMs:8.2f} ms {kb:6,d}K {description}")

        Benchmark.nesting.pop()


def benchmark(func):
    """ Function decorator that reports how long the function takes to run. """
    def wrapper(*args, **kwargs):
        with Benchmark(func.__qualname__):
            return func(*args, **kwargs)
    return wrapper
