"""Page controllers: filter state, fetch orchestration and mutations."""
