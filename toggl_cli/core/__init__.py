"""Core infrastructure: configuration, logging, exceptions, resilience, concurrency."""
