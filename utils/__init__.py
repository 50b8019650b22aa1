"""Shared utilities: exceptions, logging, request pacing."""
