"""HTTP API for the realty site."""
