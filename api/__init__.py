"""HTTP interface to the chess engine."""
