"""Domain model: scenario definitions, runtime stores and value semantics."""
