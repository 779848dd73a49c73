"""
Session Analyzer: English questions over educational session ratings,
answered by generating MongoDB aggregation pipelines and narrating the results.
"""

__version__ = "1.0.0"
