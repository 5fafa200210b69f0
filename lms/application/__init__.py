"""Application layer: use-case services and serializers."""
