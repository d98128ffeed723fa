"""Prepare Hebrew feed headlines for left-to-right fixed-width displays."""
