"""Resume tailoring pipeline: section layout, validation, generation, orchestration."""
