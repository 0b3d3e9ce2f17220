"""CLI de Priority Compliance Radar."""
