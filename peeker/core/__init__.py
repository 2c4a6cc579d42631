"""Core gateway operations: upstream access, rewriting and tree building."""
