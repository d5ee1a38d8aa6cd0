"""SSH exporter: run configured scripts over SSH and expose results to Prometheus."""

__version__ = "0.2.0"
