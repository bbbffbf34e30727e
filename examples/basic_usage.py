#!/usr/bin/env python3
"""Basic usage example"""

from structured_logger import LoggerBuilder, LogLevel, correlation_scope
from structured_logger.context import new_correlation_id


def main():
    # Create provider with builder pattern
    provider = (LoggerBuilder()
        .set_minimum_level(LogLevel.DEBUG)
        .set_namespace_level("Example.Data", LogLevel.WARN)
        .add_console_sink(colored=True)
        .add_file_sink("logs", prefix="example")
        .add_standard_enrichers()
        .build())

    logger = provider.create_logger("Example.Services.Orders")
    repository = provider.create_logger("Example.Data.Repository")

    # Log messages
    logger.trace("This is trace")
    logger.debug("This is debug")
    logger.info("Application started")

    with correlation_scope(new_correlation_id()):
        with logger.begin_scope(order_id="o-1001", customer="c-42"):
            logger.info("Processing order %s", "o-1001", items=3)
            repository.debug("Filtered out by the namespace rule")
            try:
                raise ValueError("payment declined")
            except ValueError:
                logger.exception("Order failed")

    logger.warn("This is warning")
    logger.critical("This is critical")

    # Flush and shutdown
    provider.flush()
    provider.shutdown()


if __name__ == "__main__":
    main()
