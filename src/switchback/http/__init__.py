"""HTTP request descriptor and response sink types."""
