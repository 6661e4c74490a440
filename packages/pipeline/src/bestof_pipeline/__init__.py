"""bestof_pipeline — maintenance CLI and data-repair jobs for Best of Goa."""

__version__ = "0.1.0"
