"""Infrastructure helpers: encryption and custom model fields."""
