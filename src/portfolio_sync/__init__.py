"""Portfolio sync — keeps a profile snapshot fresh and serves it over HTTP."""
