"""
Org Todo client

Talks to the Org Todo server's action endpoints and drives the onboarding
status poller that waits out read-after-write staleness after onboarding.
"""

__version__ = "0.1.0"
