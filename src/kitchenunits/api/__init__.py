"""HTTP surface for the quantity algebra."""
