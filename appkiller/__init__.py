"""Select running apps and hibernate them in best-effort batches."""

__version__ = "0.1.0"
