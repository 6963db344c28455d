"""Command line client for the sensor telemetry service.

Commands live in ``cli.app``; ``cli.client`` talks to the HTTP API and
``cli.render`` prints its payloads.
"""

__all__: list[str] = []
