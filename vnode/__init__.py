"""Virtual node liveness pinging and cluster resource view."""
