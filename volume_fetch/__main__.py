"""Main entry point: ``python -m volume_fetch VOLUME_ID [OUTPUT_DIR]``."""

from volume_fetch.cli.fetch_volume import fetch_volume

if __name__ == "__main__":
    fetch_volume()
