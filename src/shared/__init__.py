"""Shared configuration, logging and error handling for Voyager services."""
