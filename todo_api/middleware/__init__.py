"""Request middleware: bearer authentication and CORS."""
