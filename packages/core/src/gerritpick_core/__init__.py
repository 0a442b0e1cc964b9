"""Core selection and batch-execution pipeline for gerritpick."""
