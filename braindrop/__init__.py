"""
Braindrop: personal idea capture.

Local idea store and query engine:
- Idea records (text, voice, image) with free-form tags
- Whole-collection JSON persistence
- Pure filter/search/sort functions over a snapshot
"""

__version__ = "1.0.0"
