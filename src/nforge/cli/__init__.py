"""Command-line entry points other than the ``nforge`` launcher itself."""
