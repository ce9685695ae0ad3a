"""Domain models, rules and settings shared across the scoreboard."""
