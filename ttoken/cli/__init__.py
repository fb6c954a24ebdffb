"""ttoken.cli — typer application (`ttoken` console script)."""
