"""
iui_scorer.reporting — render and export scoring results.

Nothing here computes scores; everything reads ``ScoringResult`` fields.

Modules:
  formatters — ASCII report / rule-table formatters for Typer CLI commands.
  export     — result_to_dict() plus JSON/CSV file writers.
"""
