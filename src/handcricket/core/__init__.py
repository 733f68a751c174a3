"""Commit-reveal game engine: state machine, resolvers, proof check, collaborators."""
