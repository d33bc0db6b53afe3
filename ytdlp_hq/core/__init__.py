"""
Core application engine for orchestrating a download-and-merge run.

The `PipelineRunner` sequences the stages and decides, from each stage's
result, whether to continue, report diagnostics, or clean up and stop.
"""
