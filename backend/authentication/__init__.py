"""Password hashing, JWT tokens and the FastAPI auth dependencies."""
