"""revdeploy - Deploy a git revision to a remote file store."""

__version__ = "0.4.0"
