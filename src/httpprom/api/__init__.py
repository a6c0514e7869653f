from httpprom import __version__  # noqa: F401
