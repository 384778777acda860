"""Command line interface (``fixture-dumper``)."""
