"""AWS, image and console helpers."""
