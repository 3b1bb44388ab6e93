from .logger import (
    AbstractLogger as AbstractLogger,
    AppLogger as AppLogger,
    StubLogger as StubLogger,
    stub_logger as stub_logger,
)
