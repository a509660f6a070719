"""CLI tools for pollenTracker.

- ``python -m src.cli token --owner ID``: issue a bearer token
- ``python -m src.cli submit --owner ID --feedback N --lat X --lng Y``:
  store a feedback record with the current pollen readings
- ``python -m src.cli analyze --owner ID [--json]``: recompute and print
  an owner's correlations

All commands use argparse and build their own service instances, since
they run as one-shot scripts rather than a long-lived server.
"""
