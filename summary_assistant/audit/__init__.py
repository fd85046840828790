"""Editorial audit of AI-generated summaries."""
