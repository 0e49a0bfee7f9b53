"""Infrastructure adapters: persistence, HTTP integrations, art sources, logging."""
