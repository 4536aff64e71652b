"""Registry core: the ownership challenge protocol and its error types."""
