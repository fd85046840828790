"""Summary generation: content preparation, prompting, API access and retries."""
