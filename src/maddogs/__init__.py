"""Team stats dashboard: counting stats in, rate stats and rankings out."""
