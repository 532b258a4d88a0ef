"""HTTP routers for the fantasy-league API."""
