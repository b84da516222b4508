"""Public test-support utilities for timebench.

Re-exports test doubles and factories so that consumer test suites
can import everything from a single ``timebench.testing`` namespace
instead of reaching into private modules.

Provided symbols:

- :class:`VirtualTimeSource` — shiftable time source for timing tests.
- :class:`VirtualStopwatchFactory` — factory wired to a shared
  virtual time source.
- :func:`make_settings` — factory for ``Settings`` without ``.env`` files.
"""

from timebench.testing._clock import VirtualTimeSource
from timebench.testing._factory import VirtualStopwatchFactory
from timebench.testing._settings import make_settings

__all__ = [
    "VirtualStopwatchFactory",
    "VirtualTimeSource",
    "make_settings",
]
