"""Infrastructure adapters: generation, embedding and vector index providers."""
