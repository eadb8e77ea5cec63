"""HTTP service exposing the movie catalog built by the ingestion pipeline."""
