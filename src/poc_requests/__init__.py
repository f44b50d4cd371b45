"""Cognite Data Fusion proof-of-concept requests.

Typed client for the CDF REST API (time series, units and data modeling)
with an OAuth client-credentials login and a small demo CLI that prints
and plots retrieved series.
"""

__version__ = "0.1.0"
