"""Classifier backends."""
