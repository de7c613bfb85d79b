"""
Core application engine for orchestrating the import process.

The `ImportZipPipeline` runs the fetch, extract and manifest-scan stages
in order and turns any failure into a reportable result.
"""
