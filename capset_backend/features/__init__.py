"""Feature services (captions, ratings, export, images, filesystem walk)."""
