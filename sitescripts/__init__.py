"""Maintenance scripts for the document-publishing site."""
