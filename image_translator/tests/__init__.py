"""Tests for the image translator."""
