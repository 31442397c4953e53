"""MarkLogic source, sink and action stages for batch data pipelines."""

__version__ = "1.0.0"
