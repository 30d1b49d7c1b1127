"""
India Disaster Response
Disaster report intake, live map feed, and rescue-crew SMS alerting.
"""

__version__ = "0.2.0"
