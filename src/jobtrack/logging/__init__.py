"""Usage accounting for tailoring requests."""
