"""Yatra: destinations, rides and local guides backed by Supabase."""

__version__ = "0.1.0"
