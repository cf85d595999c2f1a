"""API Relay: relay HTTP requests and keep a bounded history of them."""
