"""Commission tracking for real estate agents."""

__version__ = "0.1.0"


def __getattr__(name):
    # The CLI pulls in click and the database layer; load it on first use
    if name == "main":
        from commtrack.cli.main import main

        return main
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
