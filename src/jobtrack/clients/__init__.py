"""Claude API client."""
