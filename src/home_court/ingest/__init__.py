"""Season game-log ingestion."""
