"""Command line tools for planning and exporting LIPM walks."""
