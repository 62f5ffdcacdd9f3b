"""StatementFlow: unified income statements from QuickBooks and Rootfi."""

__version__ = "0.1.0"
