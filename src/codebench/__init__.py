"""codebench - evaluate AI coding-agent CLIs against coding standards."""

__version__ = "0.1.0"
