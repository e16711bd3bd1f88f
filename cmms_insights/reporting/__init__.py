"""
cmms_insights.reporting — report files and terminal output.

Modules:
  export     — JSON/CSV writers for risk, analytics and recommendation reports.
  reader     — File discovery and loading of the latest reports.
  formatters — Plain-text formatters for Typer CLI commands.
"""
