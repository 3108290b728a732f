"""Local entrypoint.

Exposes `app` for platforms that look for it in `main.py`.
"""

from betboard import create_app

app = create_app()


if __name__ == "__main__":
    # The reloader would start a second scheduler in the child process.
    app.run(host="127.0.0.1", port=8000, debug=False, use_reloader=False)
