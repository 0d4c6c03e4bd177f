"""Host-facing adapters implementing the domain ports."""
