"""Version information for the OBS Python SDK"""

__version__ = "0.1.0"
