"""WSGI entrypoint for Gunicorn.

Usage:
  gunicorn -w 1 -b 0.0.0.0:8000 wsgi:app

Each worker runs its own slot scheduler; promotion is safe to run from
several workers, but one worker keeps the logs readable.
"""

from betboard import create_app

app = create_app()
