"""
Ingestion — late chunking, payload tagging, and sequential inserts.

This module turns free text into tagged sentence records stored in a
memory canister.  Chunking and embedding are delegated to an external
late chunking service; this package only sequences the calls.
"""
