"""
Command Line Interface Package

Command-line access to alert parsing and reconciliation.

Command Structure:
- bankalerts: Main entry point with utility commands (version, config, formats)
- bankalerts parse: Parse alert email files into structured alerts
- bankalerts match: Reconcile alert emails against a transactions JSON file
- bankalerts fetch: Poll the configured mailbox for unread alerts
"""
