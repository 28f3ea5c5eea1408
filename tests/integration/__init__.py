"""
tests/integration/
~~~~~~~~~~~~~~~~~~
Live checks against the services flightglobe depends on.

Skipped unless ``INTEGRATION_TESTS=1``:

    INTEGRATION_TESTS=1 pytest tests/integration/ -v

Cost of a run:
- OpenSky ``/states/all``: anonymous polls draw on a small daily credit
  quota; set ``OPENSKY_CLIENT_ID``/``OPENSKY_CLIENT_SECRET`` for the
  authenticated test
- SerpAPI: one search credit per uncached lookup, needs ``SERPAPI_API_KEY``
- FlightAware flight page: free, but may block or change layout
"""
