"""HTTP surface exposing the server actions to remote callers."""
