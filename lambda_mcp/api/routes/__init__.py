"""Routes of the development server."""
