"""Layout providers: force graph, tidy tree and ordinal list geometry."""
