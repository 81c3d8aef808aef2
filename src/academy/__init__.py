"""Academy of Curiosity API."""
