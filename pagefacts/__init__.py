"""Extract claims from a web page and score them against web search evidence."""
