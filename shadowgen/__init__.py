"""Shadow class generation for exposing fileprivate members to tests."""

__version__ = "0.1.0"
