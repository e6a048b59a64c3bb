from txboundary.testkit.fixtures import (  # noqa: F401
    capturing_logger,
    in_memory_tx,
    interceptor,
    static_provider,
)
