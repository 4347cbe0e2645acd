"""Equipment rental listing engine and machine search API."""
