"""Weather relay: QWeather conditions and forecast reshaped for the display client.

Architecture::

    ingest/     QWeather client and signed bearer tokens
    storage/    Two-day cache of daily records keyed by calendar day
    reshape/    Yesterday resolution and output document rendering
    pipeline/   One fetch → reshape cycle
    server.py   FastAPI endpoint
"""

__version__ = "0.1.0"
