"""Run artifacts: event stream."""
