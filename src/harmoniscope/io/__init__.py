"""Report serialization."""
