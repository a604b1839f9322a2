"""
Toggl CLI Package.

- core/: Configuration, logging, exceptions, resilience, concurrency
- api/: Toggl Track API v9 transport, entity cache, domain client
- services/: Timer operations at the command-line boundary
- cli/: Typer commands and console formatting
- tui/: Interactive timer form (Textual)
"""
