"""
Serving — FastAPI application exposing ingestion over HTTP.

This module lets other services push text into a memory canister
without shelling out to the CLI.
"""
