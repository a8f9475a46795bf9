"""Business logic: task queries, task and user use cases, tokens."""
