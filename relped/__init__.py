"""Родословная по таблице попарного родства."""
