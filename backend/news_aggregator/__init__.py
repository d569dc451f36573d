"""
News Aggregator - collects articles from news providers into one searchable store.
"""

__version__ = "0.1.0"
