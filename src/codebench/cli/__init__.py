"""codebench command-line interface."""
