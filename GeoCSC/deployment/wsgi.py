#!/usr/bin/env python3
"""
WSGI entry point for the GeoCSC API with Gunicorn.

Importing this module loads the dataset and builds the geo index; with
``preload_app`` that happens once in the gunicorn master.
"""
from GeoCSC import initialize_config
from GeoCSC.api.server import create_app

initialize_config()

app = create_app()

if __name__ == "__main__":
    app.run()
