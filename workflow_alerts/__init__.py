"""Monitoring and alerting agent for the investment workflow backend."""

__version__ = '1.0.0'
