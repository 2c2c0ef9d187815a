"""UGC Engine - prompt scoring, progression and video job lifecycle."""

__version__ = "0.1.0"
