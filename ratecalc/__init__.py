"""Rate Calc - Hourly billing rate recommendations from employer cost inputs."""

__version__ = "0.1.0"
